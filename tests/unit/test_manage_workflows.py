"""Tests for workflow management (validation, history paging, not-found paths)."""

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from secureboot.application.dtos.workflow import WorkflowRecord
from secureboot.application.use_cases.workflows.manage_workflows import (
    WorkflowManagementService,
    build_write,
    clamp_limit,
)
from secureboot.domain.exceptions import ResourceNotFoundException, ValidationException


def _write(**kwargs):
    values = {
        "name": "Fix errors",
        "description": None,
        "enabled": True,
        "priority": 100,
        "trigger": {"DeploymentState": "Error"},
        "actions": [{"ActionType": 3, "Order": 1}],
    }
    values.update(kwargs)
    return build_write(**values)


def _record(workflow_id: str = "wf-1") -> WorkflowRecord:
    stamp = datetime(2026, 1, 1, tzinfo=UTC)
    return WorkflowRecord(
        id=workflow_id,
        name="Fix errors",
        description=None,
        enabled=True,
        priority=100,
        trigger_json=None,
        actions_json="[]",
        created_at=stamp,
        updated_at=stamp,
        created_by=None,
        updated_by=None,
    )


@pytest.mark.parametrize(
    ("limit", "expected"),
    [(None, 50), (0, 1), (-3, 1), (10, 10), (200, 200), (5000, 200)],
)
def test_clamp_limit(limit, expected) -> None:
    assert clamp_limit(limit) == expected


def test_build_write_serialises_trigger_and_actions() -> None:
    data = _write(name="  Fix errors  ")
    assert data.name == "Fix errors"
    assert json.loads(data.trigger_json) == {"DeploymentState": "Error"}
    assert json.loads(data.actions_json) == [{"ActionType": 3, "Order": 1}]


@pytest.mark.parametrize("trigger", [None, {}])
def test_build_write_empty_trigger_is_stored_as_null(trigger) -> None:
    assert _write(trigger=trigger).trigger_json is None


def test_build_write_accepts_action_type_names() -> None:
    data = _write(actions=[{"ActionType": "Webhook", "ConfigurationJson": {"url": "https://x"}}])
    assert json.loads(data.actions_json)[0]["ActionType"] == "Webhook"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "   "},
        {"trigger": {"NoReportForDays": -1}},
        {"actions": [{"ActionType": 42}]},
        {"actions": [{"ActionType": "Teleport"}]},
        {"actions": [{"ActionType": 3, "ConfigurationJson": "{broken"}]},
        {"actions": ["LogEntry"]},
    ],
)
def test_build_write_rejects_invalid_input(kwargs) -> None:
    with pytest.raises(ValidationException) as exc_info:
        _write(**kwargs)
    assert exc_info.value.error_code == "VALIDATION_ERROR"


async def test_get_missing_workflow_raises_not_found() -> None:
    definitions = AsyncMock()
    definitions.get_record.return_value = None
    service = WorkflowManagementService(definitions, AsyncMock())
    with pytest.raises(ResourceNotFoundException):
        await service.get_workflow("missing")


async def test_update_missing_workflow_raises_not_found() -> None:
    definitions = AsyncMock()
    definitions.update_record.return_value = None
    service = WorkflowManagementService(definitions, AsyncMock())
    with pytest.raises(ResourceNotFoundException):
        await service.update_workflow("missing", _write())


async def test_delete_missing_workflow_raises_not_found() -> None:
    definitions = AsyncMock()
    definitions.delete_record.return_value = False
    service = WorkflowManagementService(definitions, AsyncMock())
    with pytest.raises(ResourceNotFoundException):
        await service.delete_workflow("missing")


async def test_create_passes_actor() -> None:
    definitions = AsyncMock()
    definitions.create_record.return_value = _record()
    service = WorkflowManagementService(definitions, AsyncMock())
    data = _write()
    record = await service.create_workflow(data, actor="admin@example.com")
    assert record.id == "wf-1"
    definitions.create_record.assert_awaited_once_with(data, actor="admin@example.com")


async def test_list_executions_clamps_limit() -> None:
    definitions = AsyncMock()
    definitions.get_record.return_value = _record()
    executions = AsyncMock()
    executions.list_for_workflow.return_value = []
    service = WorkflowManagementService(
        definitions, executions, history_default_limit=25, history_max_limit=100
    )
    await service.list_executions("wf-1")
    await service.list_executions("wf-1", 1000)
    assert [c.args for c in executions.list_for_workflow.await_args_list] == [
        ("wf-1", 25),
        ("wf-1", 100),
    ]


async def test_list_executions_for_missing_workflow() -> None:
    definitions = AsyncMock()
    definitions.get_record.return_value = None
    executions = AsyncMock()
    service = WorkflowManagementService(definitions, executions)
    with pytest.raises(ResourceNotFoundException):
        await service.list_executions("missing")
    executions.list_for_workflow.assert_not_called()
