"""SQLAlchemy ORM models. Importing this package registers every table on Base.metadata."""

from secureboot.infrastructure.persistence.models.device import Device, SecureBootReport
from secureboot.infrastructure.persistence.models.workflow import (
    RemediationWorkflow,
    WorkflowExecution,
)

__all__ = [
    "Device",
    "RemediationWorkflow",
    "SecureBootReport",
    "WorkflowExecution",
]
