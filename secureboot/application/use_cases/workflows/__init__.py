"""Workflow use cases: evaluate workflows for a report, manage definitions."""

from secureboot.application.use_cases.workflows.evaluate_workflows import (
    WorkflowOrchestrator,
    run_workflows,
)
from secureboot.application.use_cases.workflows.manage_workflows import (
    WorkflowManagementService,
    build_write,
    clamp_limit,
)

__all__ = [
    "WorkflowManagementService",
    "WorkflowOrchestrator",
    "build_write",
    "clamp_limit",
    "run_workflows",
]
