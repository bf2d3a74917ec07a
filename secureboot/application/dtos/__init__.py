"""Application DTOs (read models and commands)."""

from secureboot.application.dtos.device import DeviceResult, ReportResult
from secureboot.application.dtos.workflow import (
    WorkflowExecutionHistoryItem,
    WorkflowRecord,
    WorkflowWrite,
)

__all__ = [
    "DeviceResult",
    "ReportResult",
    "WorkflowExecutionHistoryItem",
    "WorkflowRecord",
    "WorkflowWrite",
]
