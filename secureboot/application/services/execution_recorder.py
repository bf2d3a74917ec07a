"""Execution recorder: durably store workflow execution records."""

from __future__ import annotations

from secureboot.application.interfaces.repositories import IWorkflowExecutionRepository
from secureboot.domain.entities.execution import WorkflowExecution
from secureboot.domain.exceptions import PersistenceException
from secureboot.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class ExecutionRecorder:
    """Stores executions through the execution repository.

    Store failures surface as PersistenceException and are never swallowed:
    an execution that ran but was not recorded must fail the caller.
    """

    def __init__(self, execution_repo: IWorkflowExecutionRepository) -> None:
        self.execution_repo = execution_repo

    async def record(self, execution: WorkflowExecution) -> WorkflowExecution:
        """Store execution and return it with its assigned id."""
        if not execution.status.is_terminal:
            raise PersistenceException(
                "record_execution",
                f"execution status must be terminal, got {execution.status.value}",
                workflow_id=execution.workflow_id,
                device_id=execution.device_id,
            )
        try:
            stored = await self.execution_repo.add_execution(execution)
        except PersistenceException:
            logger.error(
                "Could not record execution of workflow %s for device %s",
                execution.workflow_id,
                execution.device_id,
            )
            raise
        logger.info(
            "Recorded execution %s of workflow %s for device %s (%s)",
            stored.id,
            stored.workflow_id,
            stored.device_id,
            stored.status.value,
        )
        return stored
