"""Workflow execution audit record and per-action outcomes."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from secureboot.shared.enums import WorkflowExecutionStatus


@dataclass(frozen=True)
class ActionResult:
    """What an action handler reports back: success flag plus message."""

    success: bool
    message: str


@dataclass(frozen=True)
class ActionOutcome:
    """One executed (or refused) action as recorded in the audit trail."""

    action_type: str
    order: int
    success: bool
    message: str
    started_at: datetime
    completed_at: datetime
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_type": self.action_type,
            "order": self.order,
            "success": self.success,
            "message": self.message,
            "error_code": self.error_code,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass(frozen=True)
class WorkflowExecution:
    """Durable record of one workflow firing for one device/report pair.

    id is None until the execution recorder has stored it.
    """

    workflow_id: str
    device_id: str
    report_id: str | None
    started_at: datetime
    status: WorkflowExecutionStatus
    completed_at: datetime | None = None
    result_message: str | None = None
    action_results: tuple[ActionOutcome, ...] = field(default_factory=tuple)
    id: str | None = None
    workflow_name: str | None = None

    @property
    def actions_succeeded(self) -> int:
        return sum(1 for r in self.action_results if r.success)

    @property
    def actions_failed(self) -> int:
        return sum(1 for r in self.action_results if not r.success)
