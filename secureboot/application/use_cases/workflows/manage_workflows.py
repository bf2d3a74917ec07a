"""Workflow management use case: CRUD over definitions and execution history."""

from __future__ import annotations

import json
from typing import Any

from secureboot.application.dtos.workflow import (
    WorkflowExecutionHistoryItem,
    WorkflowRecord,
    WorkflowWrite,
)
from secureboot.application.interfaces.repositories import (
    IWorkflowDefinitionRepository,
    IWorkflowExecutionRepository,
)
from secureboot.application.services.workflow_definition_parser import (
    parse_actions,
    parse_trigger,
)
from secureboot.domain.enums import WorkflowActionType
from secureboot.domain.exceptions import (
    ResourceNotFoundException,
    ValidationException,
    WorkflowConfigurationException,
)
from secureboot.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PRIORITY = 100


def clamp_limit(limit: int | None, *, default: int = 50, maximum: int = 200) -> int:
    """Clamp a history page size to [1, maximum]; None means default."""
    if limit is None:
        return default
    return max(1, min(limit, maximum))


def build_write(
    *,
    name: str,
    description: str | None,
    enabled: bool,
    priority: int,
    trigger: dict[str, Any] | None,
    actions: list[dict[str, Any]],
) -> WorkflowWrite:
    """Validate trigger/actions and serialise them to stored JSON.

    Raises:
        ValidationException: Name blank, trigger malformed, or an action is
            malformed or of an unknown type.
    """
    if not name or not name.strip():
        raise ValidationException("Workflow name is required", field="name")
    try:
        parse_trigger(trigger)
        specs = parse_actions(actions)
    except WorkflowConfigurationException as e:
        raise ValidationException(e.message, field=e.details.get("field")) from e
    for index, spec in enumerate(specs):
        if spec.configuration_error:
            raise ValidationException(spec.configuration_error, field=f"actions[{index}]")
        if spec.action_type is WorkflowActionType.UNSUPPORTED:
            raise ValidationException(
                f"Unsupported action type: {spec.type_name}",
                field=f"actions[{index}].ActionType",
            )
    return WorkflowWrite(
        name=name.strip(),
        description=description,
        enabled=enabled,
        priority=priority,
        trigger_json=json.dumps(trigger) if trigger else None,
        actions_json=json.dumps(actions),
    )


class WorkflowManagementService:
    """Create, read, update and delete workflows; read execution history."""

    def __init__(
        self,
        definition_repo: IWorkflowDefinitionRepository,
        execution_repo: IWorkflowExecutionRepository,
        *,
        history_default_limit: int = 50,
        history_max_limit: int = 200,
    ) -> None:
        self._definition_repo = definition_repo
        self._execution_repo = execution_repo
        self._history_default_limit = history_default_limit
        self._history_max_limit = history_max_limit

    async def list_workflows(self) -> list[WorkflowRecord]:
        return await self._definition_repo.list_records()

    async def get_workflow(self, workflow_id: str) -> WorkflowRecord:
        record = await self._definition_repo.get_record(workflow_id)
        if record is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        return record

    async def create_workflow(
        self, data: WorkflowWrite, *, actor: str | None = None
    ) -> WorkflowRecord:
        record = await self._definition_repo.create_record(data, actor=actor)
        logger.info("Created workflow %s (%s)", record.id, record.name)
        return record

    async def update_workflow(
        self, workflow_id: str, data: WorkflowWrite, *, actor: str | None = None
    ) -> WorkflowRecord:
        record = await self._definition_repo.update_record(workflow_id, data, actor=actor)
        if record is None:
            raise ResourceNotFoundException("workflow", workflow_id)
        logger.info("Updated workflow %s", workflow_id)
        return record

    async def delete_workflow(self, workflow_id: str) -> None:
        if not await self._definition_repo.delete_record(workflow_id):
            raise ResourceNotFoundException("workflow", workflow_id)
        logger.info("Deleted workflow %s", workflow_id)

    async def list_executions(
        self, workflow_id: str, limit: int | None = None
    ) -> list[WorkflowExecutionHistoryItem]:
        """Newest executions first; limit clamped to [1, history_max_limit].

        Raises:
            ResourceNotFoundException: Workflow not found.
        """
        await self.get_workflow(workflow_id)
        page = clamp_limit(
            limit,
            default=self._history_default_limit,
            maximum=self._history_max_limit,
        )
        return await self._execution_repo.list_for_workflow(workflow_id, page)
