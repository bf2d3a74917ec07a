"""Workflow API: thin routes delegating to WorkflowManagementService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Response

from secureboot.api.v1.dependencies import (
    get_workflow_service,
    get_workflow_service_for_write,
)
from secureboot.application.use_cases.workflows import (
    WorkflowManagementService,
    build_write,
)
from secureboot.schemas.workflow import (
    WorkflowCreateRequest,
    WorkflowExecutionHistoryResponse,
    WorkflowResponse,
    WorkflowUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[WorkflowResponse])
async def list_workflows(
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service)],
):
    """List workflows ordered by priority, then name."""
    records = await service.list_workflows()
    return [WorkflowResponse.from_record(r) for r in records]


@router.post("", response_model=WorkflowResponse, status_code=201)
async def create_workflow(
    body: WorkflowCreateRequest,
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service_for_write)],
    x_actor: Annotated[str | None, Header()] = None,
):
    """Create a workflow. Trigger and actions are validated before storing."""
    data = build_write(
        name=body.name,
        description=body.description,
        enabled=body.enabled,
        priority=body.priority,
        trigger=body.trigger,
        actions=body.actions,
    )
    record = await service.create_workflow(data, actor=x_actor)
    return WorkflowResponse.from_record(record)


@router.get(
    "/{workflow_id}/executions",
    response_model=list[WorkflowExecutionHistoryResponse],
)
async def get_workflow_executions(
    workflow_id: str,
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service)],
    limit: int | None = Query(None, description="Clamped to 1..200; default 50"),
):
    """Execution history for a workflow, newest first."""
    items = await service.list_executions(workflow_id, limit)
    return [WorkflowExecutionHistoryResponse.from_item(i) for i in items]


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service)],
):
    """Get workflow by id."""
    return WorkflowResponse.from_record(await service.get_workflow(workflow_id))


@router.put("/{workflow_id}", response_model=WorkflowResponse)
async def update_workflow(
    workflow_id: str,
    body: WorkflowUpdateRequest,
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service_for_write)],
    x_actor: Annotated[str | None, Header()] = None,
):
    """Replace a workflow's definition."""
    data = build_write(
        name=body.name,
        description=body.description,
        enabled=body.enabled,
        priority=body.priority,
        trigger=body.trigger,
        actions=body.actions,
    )
    record = await service.update_workflow(workflow_id, data, actor=x_actor)
    return WorkflowResponse.from_record(record)


@router.delete("/{workflow_id}", status_code=204)
async def delete_workflow(
    workflow_id: str,
    service: Annotated[WorkflowManagementService, Depends(get_workflow_service_for_write)],
) -> Response:
    """Delete a workflow and its execution history."""
    await service.delete_workflow(workflow_id)
    return Response(status_code=204)
