"""SQLAlchemy repositories implementing the application ports."""

from secureboot.infrastructure.persistence.repositories.device_repo import (
    DeviceRepository,
    ReportRepository,
)
from secureboot.infrastructure.persistence.repositories.workflow_repo import (
    WorkflowDefinitionRepository,
    WorkflowExecutionRepository,
)

__all__ = [
    "DeviceRepository",
    "ReportRepository",
    "WorkflowDefinitionRepository",
    "WorkflowExecutionRepository",
]
