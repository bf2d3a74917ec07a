"""Remediation workflow API schemas."""

import json
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from secureboot.application.dtos.workflow import (
    WorkflowExecutionHistoryItem,
    WorkflowRecord,
)
from secureboot.domain.entities.execution import WorkflowExecution


def _decode(raw: str | None) -> Any:
    """Stored JSON text back to a value; unreadable text is returned as-is."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


class WorkflowCreateRequest(BaseModel):
    """Request body for creating a workflow.

    trigger uses the stored PascalCase shape, e.g.
    {"DeploymentState": "Error", "FleetIdMatches": "fleet-a,fleet-b"}; each
    action is {"ActionType": 3, "ConfigurationJson": {...}, "Order": 1}.
    """

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    enabled: bool = True
    priority: int = 100
    trigger: dict[str, Any] | None = None
    actions: list[dict[str, Any]] = Field(default_factory=list)


class WorkflowUpdateRequest(WorkflowCreateRequest):
    """Request body for replacing a workflow (PUT)."""


class WorkflowResponse(BaseModel):
    """Workflow response."""

    id: str
    name: str
    description: str | None
    enabled: bool
    priority: int
    trigger: Any
    actions: Any
    created_at: datetime
    updated_at: datetime
    created_by: str | None
    updated_by: str | None

    @classmethod
    def from_record(cls, record: WorkflowRecord) -> "WorkflowResponse":
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            enabled=record.enabled,
            priority=record.priority,
            trigger=_decode(record.trigger_json),
            actions=_decode(record.actions_json),
            created_at=record.created_at,
            updated_at=record.updated_at,
            created_by=record.created_by,
            updated_by=record.updated_by,
        )


class ActionOutcomeResponse(BaseModel):
    """One action outcome of an execution."""

    model_config = ConfigDict(from_attributes=True)

    action_type: str
    order: int
    success: bool
    message: str
    error_code: str | None
    started_at: datetime
    completed_at: datetime


class WorkflowExecutionResponse(BaseModel):
    """Execution created by a workflow evaluation."""

    id: str | None
    workflow_id: str
    workflow_name: str | None
    device_id: str
    report_id: str | None
    status: str
    started_at: datetime
    completed_at: datetime | None
    result_message: str | None
    action_results: list[ActionOutcomeResponse]

    @classmethod
    def from_entity(cls, execution: WorkflowExecution) -> "WorkflowExecutionResponse":
        return cls(
            id=execution.id,
            workflow_id=execution.workflow_id,
            workflow_name=execution.workflow_name,
            device_id=execution.device_id,
            report_id=execution.report_id,
            status=execution.status.value,
            started_at=execution.started_at,
            completed_at=execution.completed_at,
            result_message=execution.result_message,
            action_results=[
                ActionOutcomeResponse.model_validate(o) for o in execution.action_results
            ],
        )


class WorkflowExecutionHistoryResponse(BaseModel):
    """Execution history row for GET /workflows/{id}/executions."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    workflow_id: str
    device_id: str
    device_name: str | None
    report_id: str | None
    status: str
    started_at: datetime
    completed_at: datetime | None
    result_message: str | None
    action_results: list[dict[str, Any]]

    @classmethod
    def from_item(cls, item: WorkflowExecutionHistoryItem) -> "WorkflowExecutionHistoryResponse":
        return cls.model_validate(item)
