"""Workflow evaluation API: run remediation workflows for a device report."""

from typing import Annotated

from fastapi import APIRouter, Depends

from secureboot.api.v1.dependencies import get_workflow_orchestrator
from secureboot.application.use_cases.workflows import WorkflowOrchestrator
from secureboot.schemas.workflow import WorkflowExecutionResponse

router = APIRouter()


@router.post(
    "/{device_id}/reports/{report_id}/workflow-evaluations",
    response_model=list[WorkflowExecutionResponse],
    status_code=201,
)
async def evaluate_workflows(
    device_id: str,
    report_id: str,
    orchestrator: Annotated[WorkflowOrchestrator, Depends(get_workflow_orchestrator)],
):
    """Evaluate every enabled workflow against the report; return new executions."""
    executions = await orchestrator.evaluate(device_id, report_id)
    return [WorkflowExecutionResponse.from_entity(e) for e in executions]
