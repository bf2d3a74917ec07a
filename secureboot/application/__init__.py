"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, notification
sender, device tag store, action handlers).
"""

from secureboot.application.services import (
    ActionDispatcher,
    ExecutionRecorder,
    FactResolver,
)
from secureboot.application.use_cases.workflows import (
    WorkflowManagementService,
    WorkflowOrchestrator,
    run_workflows,
)

__all__ = [
    "ActionDispatcher",
    "ExecutionRecorder",
    "FactResolver",
    "WorkflowManagementService",
    "WorkflowOrchestrator",
    "run_workflows",
]
