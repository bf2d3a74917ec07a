"""Remediation workflow definition and execution repositories."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from secureboot.application.dtos.workflow import (
    WorkflowExecutionHistoryItem,
    WorkflowRecord,
    WorkflowWrite,
)
from secureboot.application.services.workflow_definition_parser import build_definition
from secureboot.domain.entities.execution import WorkflowExecution as WorkflowExecutionEntity
from secureboot.domain.entities.workflow import WorkflowDefinition
from secureboot.domain.exceptions import PersistenceException
from secureboot.infrastructure.persistence.models.device import Device
from secureboot.infrastructure.persistence.models.workflow import (
    RemediationWorkflow,
    WorkflowExecution,
)
from secureboot.infrastructure.persistence.repositories.base import BaseRepository
from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)


def _to_record(w: RemediationWorkflow) -> WorkflowRecord:
    return WorkflowRecord(
        id=w.id,
        name=w.name,
        description=w.description,
        enabled=w.enabled,
        priority=w.priority,
        trigger_json=w.trigger_json,
        actions_json=w.actions_json,
        created_at=ensure_utc(w.created_at) or utc_now(),
        updated_at=ensure_utc(w.updated_at) or utc_now(),
        created_by=w.created_by,
        updated_by=w.updated_by,
    )


class WorkflowDefinitionRepository(BaseRepository[RemediationWorkflow]):
    """Workflow definitions: parsed definitions for the engine, records for the API."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, RemediationWorkflow)

    async def list_definitions(self) -> list[WorkflowDefinition]:
        """All workflows in load order (creation time, then id), parsed."""
        result = await self.db.execute(
            select(RemediationWorkflow).order_by(
                RemediationWorkflow.created_at, RemediationWorkflow.id
            )
        )
        return [build_definition(_to_record(w)) for w in result.scalars().all()]

    async def list_records(self) -> list[WorkflowRecord]:
        result = await self.db.execute(
            select(RemediationWorkflow).order_by(
                RemediationWorkflow.priority, RemediationWorkflow.name
            )
        )
        return [_to_record(w) for w in result.scalars().all()]

    async def get_record(self, workflow_id: str) -> WorkflowRecord | None:
        workflow = await self.get_by_id(workflow_id)
        return _to_record(workflow) if workflow else None

    async def create_record(
        self, data: WorkflowWrite, *, actor: str | None = None
    ) -> WorkflowRecord:
        workflow = RemediationWorkflow(
            name=data.name,
            description=data.description,
            enabled=data.enabled,
            priority=data.priority,
            trigger_json=data.trigger_json,
            actions_json=data.actions_json,
            created_by=actor,
            updated_by=actor,
        )
        return _to_record(await self.create(workflow))

    async def update_record(
        self, workflow_id: str, data: WorkflowWrite, *, actor: str | None = None
    ) -> WorkflowRecord | None:
        workflow = await self.get_by_id(workflow_id)
        if workflow is None:
            return None
        workflow.name = data.name
        workflow.description = data.description
        workflow.enabled = data.enabled
        workflow.priority = data.priority
        workflow.trigger_json = data.trigger_json
        workflow.actions_json = data.actions_json
        workflow.updated_by = actor
        workflow.updated_at = utc_now()
        return _to_record(await self.update(workflow))

    async def delete_record(self, workflow_id: str) -> bool:
        workflow = await self.get_by_id(workflow_id)
        if workflow is None:
            return False
        await self.delete(workflow)
        return True


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    """Workflow execution audit trail."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowExecution)

    async def add_execution(
        self, execution: WorkflowExecutionEntity
    ) -> WorkflowExecutionEntity:
        """Insert the execution row and return the entity with its id.

        Raises:
            PersistenceException: The row could not be written.
        """
        row = WorkflowExecution(
            workflow_id=execution.workflow_id,
            device_id=execution.device_id,
            report_id=execution.report_id,
            status=execution.status.value,
            started_at=execution.started_at,
            completed_at=execution.completed_at,
            result_message=execution.result_message,
            action_results=[o.to_dict() for o in execution.action_results],
        )
        try:
            self.db.add(row)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to store execution of workflow %s for device %s",
                execution.workflow_id,
                execution.device_id,
                exc_info=True,
            )
            raise PersistenceException(
                "record_execution",
                str(e.orig) if getattr(e, "orig", None) else str(e),
                workflow_id=execution.workflow_id,
                device_id=execution.device_id,
            ) from e
        return WorkflowExecutionEntity(
            id=row.id,
            workflow_id=execution.workflow_id,
            workflow_name=execution.workflow_name,
            device_id=execution.device_id,
            report_id=execution.report_id,
            started_at=execution.started_at,
            completed_at=execution.completed_at,
            status=execution.status,
            result_message=execution.result_message,
            action_results=execution.action_results,
        )

    async def list_for_workflow(
        self, workflow_id: str, limit: int
    ) -> list[WorkflowExecutionHistoryItem]:
        """Newest first, with the device's machine name."""
        result = await self.db.execute(
            select(WorkflowExecution, Device.machine_name)
            .outerjoin(Device, Device.id == WorkflowExecution.device_id)
            .where(WorkflowExecution.workflow_id == workflow_id)
            .order_by(WorkflowExecution.started_at.desc(), WorkflowExecution.id.desc())
            .limit(limit)
        )
        return [
            WorkflowExecutionHistoryItem(
                id=row.id,
                workflow_id=row.workflow_id,
                device_id=row.device_id,
                device_name=machine_name,
                report_id=row.report_id,
                status=row.status,
                started_at=ensure_utc(row.started_at) or utc_now(),
                completed_at=ensure_utc(row.completed_at),
                result_message=row.result_message,
                action_results=list(row.action_results or []),
            )
            for row, machine_name in result.all()
        ]
