"""DTOs for remediation workflow definitions and execution history."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class WorkflowRecord:
    """Stored workflow row (trigger/actions as stored JSON text)."""

    id: str
    name: str
    description: str | None
    enabled: bool
    priority: int
    trigger_json: str | None
    actions_json: str
    created_at: datetime
    updated_at: datetime
    created_by: str | None
    updated_by: str | None


@dataclass(frozen=True)
class WorkflowWrite:
    """Create/update command for a workflow."""

    name: str
    description: str | None
    enabled: bool
    priority: int
    trigger_json: str | None
    actions_json: str


@dataclass(frozen=True)
class WorkflowExecutionHistoryItem:
    """Execution history row, joined with the device's machine name."""

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
