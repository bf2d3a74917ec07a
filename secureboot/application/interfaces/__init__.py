"""Application interfaces (ports)."""

from secureboot.application.interfaces.repositories import (
    IDeviceRepository,
    IReportRepository,
    IWorkflowDefinitionRepository,
    IWorkflowExecutionRepository,
)
from secureboot.application.interfaces.services import (
    IActionHandler,
    IDeviceTagStore,
    IExecutionRecorder,
    INotificationSender,
)

__all__ = [
    "IActionHandler",
    "IDeviceRepository",
    "IDeviceTagStore",
    "IExecutionRecorder",
    "INotificationSender",
    "IReportRepository",
    "IWorkflowDefinitionRepository",
    "IWorkflowExecutionRepository",
]
