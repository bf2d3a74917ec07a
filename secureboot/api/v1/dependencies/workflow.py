"""Workflow dependencies (composition root).

Builds the workflow engine per request: repositories on the request's
session, action handlers, dispatcher, recorder, orchestrator.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from secureboot.application.services.action_dispatcher import ActionDispatcher
from secureboot.application.services.execution_recorder import ExecutionRecorder
from secureboot.application.services.fact_resolver import FactResolver
from secureboot.application.use_cases.workflows import (
    WorkflowManagementService,
    WorkflowOrchestrator,
)
from secureboot.core.config import Settings, get_settings
from secureboot.infrastructure.persistence.database import get_db, get_db_transactional
from secureboot.infrastructure.persistence.repositories import (
    DeviceRepository,
    ReportRepository,
    WorkflowDefinitionRepository,
    WorkflowExecutionRepository,
)
from secureboot.infrastructure.services import (
    LogOnlyNotificationService,
    build_action_handlers,
)


def _management_service(db: AsyncSession, settings: Settings) -> WorkflowManagementService:
    return WorkflowManagementService(
        WorkflowDefinitionRepository(db),
        WorkflowExecutionRepository(db),
        history_default_limit=settings.execution_history_default_limit,
        history_max_limit=settings.execution_history_max_limit,
    )


async def get_workflow_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkflowManagementService:
    """Workflow service for read operations (list, get, history)."""
    return _management_service(db, settings)


async def get_workflow_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkflowManagementService:
    """Workflow service for create/update/delete (transactional)."""
    return _management_service(db, settings)


async def get_workflow_orchestrator(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkflowOrchestrator:
    """Orchestrator for one evaluation; executions commit with the request."""
    device_repo = DeviceRepository(db)
    handlers = build_action_handlers(
        tag_store=device_repo,
        sender=LogOnlyNotificationService(settings.notification_from_address),
        http_client=getattr(request.app.state, "webhook_http_client", None),
        default_recipients=settings.default_notification_recipients,
        webhook_timeout=settings.webhook_timeout_seconds,
    )
    return WorkflowOrchestrator(
        WorkflowDefinitionRepository(db),
        FactResolver(
            device_repo,
            ReportRepository(db),
            lookahead_days=settings.certificate_expiry_lookahead_days,
        ),
        ActionDispatcher(handlers),
        ExecutionRecorder(WorkflowExecutionRepository(db)),
    )
