"""API v1 dependencies (composition root)."""

from secureboot.api.v1.dependencies.workflow import (
    get_workflow_orchestrator,
    get_workflow_service,
    get_workflow_service_for_write,
)

__all__ = [
    "get_workflow_orchestrator",
    "get_workflow_service",
    "get_workflow_service_for_write",
]
