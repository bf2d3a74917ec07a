"""Tests for workflow evaluation (WorkflowOrchestrator and run_workflows)."""

import asyncio
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from secureboot.application.services.action_dispatcher import ActionDispatcher
from secureboot.application.use_cases.workflows.evaluate_workflows import (
    WorkflowOrchestrator,
    run_workflows,
    summarize,
)
from secureboot.domain.entities.execution import ActionResult, WorkflowExecution
from secureboot.domain.entities.workflow import (
    ActionSpec,
    WorkflowDefinition,
    WorkflowTrigger,
)
from secureboot.domain.enums import WorkflowActionType
from secureboot.domain.exceptions import PersistenceException, ResourceNotFoundException
from secureboot.shared.enums import WorkflowExecutionStatus

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)

LOG_ACTION = ActionSpec(
    action_type=WorkflowActionType.LOG_ENTRY,
    order=1,
    configuration={"message": "Remediation started"},
    raw_action_type=3,
)


def _workflow(workflow_id: str, **kwargs) -> WorkflowDefinition:
    values = {
        "id": workflow_id,
        "name": f"Workflow {workflow_id}",
        "enabled": True,
        "priority": 100,
        "trigger": WorkflowTrigger(),
        "actions": (LOG_ACTION,),
    }
    values.update(kwargs)
    return WorkflowDefinition(**values)


class InMemoryRecorder:
    """Recorder fake that assigns ids like the store would."""

    def __init__(self) -> None:
        self.recorded: list[WorkflowExecution] = []

    async def record(self, execution: WorkflowExecution) -> WorkflowExecution:
        stored = replace(execution, id=f"exec-{len(self.recorded) + 1}")
        self.recorded.append(stored)
        return stored


class StepClock:
    """Clock that advances one second per call."""

    def __init__(self) -> None:
        self.current = NOW

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


def _orchestrator(workflows, facts, recorder=None, dispatcher=None) -> WorkflowOrchestrator:
    definition_repo = AsyncMock()
    definition_repo.list_definitions.return_value = list(workflows)
    fact_resolver = AsyncMock()
    fact_resolver.resolve.return_value = facts
    return WorkflowOrchestrator(
        definition_repo,
        fact_resolver,
        dispatcher or ActionDispatcher(),
        recorder or InMemoryRecorder(),
        clock=StepClock(),
    )


async def test_scenario_no_workflows_returns_empty(make_facts) -> None:
    """Scenario A: no workflows defined yields no executions."""
    executions = await _orchestrator([], make_facts()).evaluate("device-1", "report-1")
    assert executions == []


async def test_scenario_matching_workflow_completes(make_facts) -> None:
    """Scenario B: Error state + test fleet + LogEntry yields one completed execution."""
    workflow = _workflow(
        "wf-b",
        trigger=WorkflowTrigger(deployment_state="Error", fleet_id_matches=("test-fleet",)),
    )
    recorder = InMemoryRecorder()
    executions = await _orchestrator([workflow], make_facts(), recorder).evaluate(
        "device-1", "report-1"
    )
    assert len(executions) == 1
    execution = executions[0]
    assert execution.id == "exec-1"
    assert execution.workflow_id == "wf-b"
    assert execution.device_id == "device-1"
    assert execution.report_id == "report-1"
    assert execution.status is WorkflowExecutionStatus.COMPLETED
    assert execution.result_message == "Executed 1 actions. Success: 1, Failed: 0"
    assert execution.started_at < execution.completed_at
    assert execution.action_results[0].action_type == "LogEntry"
    assert recorder.recorded == executions


async def test_scenario_other_fleet_does_not_match(make_facts) -> None:
    """Scenario C: trigger for another fleet yields no executions."""
    workflow = _workflow("wf-c", trigger=WorkflowTrigger(fleet_id_matches=("other-fleet",)))
    executions = await _orchestrator([workflow], make_facts()).evaluate("device-1", "report-1")
    assert executions == []


async def test_scenario_disabled_workflow_never_runs(make_facts) -> None:
    """Scenario D: a disabled workflow with a matching trigger yields nothing."""
    dispatcher = AsyncMock()
    workflow = _workflow("wf-d", enabled=False)
    executions = await _orchestrator(
        [workflow], make_facts(), dispatcher=dispatcher
    ).evaluate("device-1", "report-1")
    assert executions == []
    dispatcher.dispatch.assert_not_called()


async def test_executions_follow_priority_then_load_order(make_facts) -> None:
    workflows = [
        _workflow("low", priority=200),
        _workflow("first-tie", priority=10),
        _workflow("second-tie", priority=10),
        _workflow("mid", priority=50),
    ]
    executions = await _orchestrator(workflows, make_facts()).evaluate("device-1", "report-1")
    assert [e.workflow_id for e in executions] == ["first-tie", "second-tie", "mid", "low"]


async def test_all_matching_workflows_run(make_facts) -> None:
    """No short-circuit across workflows; non-matching ones are skipped."""
    workflows = [
        _workflow("a"),
        _workflow("b", trigger=WorkflowTrigger(deployment_state="Deployed")),
        _workflow("c"),
    ]
    executions = await _orchestrator(workflows, make_facts()).evaluate("device-1", "report-1")
    assert [e.workflow_id for e in executions] == ["a", "c"]


async def test_facts_resolved_once_and_shared_by_all_workflows(make_facts) -> None:
    facts = make_facts()
    definition_repo = AsyncMock()
    definition_repo.list_definitions.return_value = [
        _workflow("a"),
        _workflow("b", trigger=WorkflowTrigger(deployment_state="Deployed")),
        _workflow("c"),
    ]
    fact_resolver = AsyncMock()
    fact_resolver.resolve.return_value = facts
    handler = AsyncMock()
    handler.execute.return_value = ActionResult(success=True, message="ok")
    orchestrator = WorkflowOrchestrator(
        definition_repo,
        fact_resolver,
        ActionDispatcher({WorkflowActionType.LOG_ENTRY: handler}),
        InMemoryRecorder(),
        clock=StepClock(),
    )

    executions = await orchestrator.evaluate("device-1", "report-1")

    assert [e.workflow_id for e in executions] == ["a", "c"]
    fact_resolver.resolve.assert_awaited_once()
    assert [c.args[1] for c in handler.execute.await_args_list] == [facts, facts]


async def test_malformed_trigger_workflow_is_not_matched(make_facts) -> None:
    workflows = [_workflow("bad", trigger=None, trigger_error="Trigger is not valid JSON")]
    executions = await _orchestrator(workflows, make_facts()).evaluate("device-1", "report-1")
    assert executions == []


async def test_failed_action_marks_execution_failed(make_facts) -> None:
    """Status is FAILED iff at least one action failed; siblings still run."""
    failing = AsyncMock()
    failing.execute.return_value = ActionResult(success=False, message="HTTP 500")
    dispatcher = ActionDispatcher({WorkflowActionType.WEBHOOK: failing})
    workflow = _workflow(
        "wf",
        actions=(
            ActionSpec(action_type=WorkflowActionType.WEBHOOK, order=1, raw_action_type=2),
            ActionSpec(action_type=WorkflowActionType.LOG_ENTRY, order=2, raw_action_type=3),
        ),
    )
    (execution,) = await _orchestrator([workflow], make_facts(), dispatcher=dispatcher).evaluate(
        "device-1", "report-1"
    )
    assert execution.status is WorkflowExecutionStatus.FAILED
    assert execution.result_message == "Executed 2 actions. Success: 1, Failed: 1"
    assert [o.success for o in execution.action_results] == [False, True]


async def test_workflow_without_actions_completes(make_facts) -> None:
    (execution,) = await _orchestrator([_workflow("empty", actions=())], make_facts()).evaluate(
        "device-1", "report-1"
    )
    assert execution.status is WorkflowExecutionStatus.COMPLETED
    assert execution.action_results == ()


async def test_repeated_evaluation_creates_new_executions(make_facts) -> None:
    """Evaluation is not idempotent: each call records new executions."""
    recorder = InMemoryRecorder()
    orchestrator = _orchestrator([_workflow("wf")], make_facts(), recorder)
    first = await orchestrator.evaluate("device-1", "report-1")
    second = await orchestrator.evaluate("device-1", "report-1")
    assert first[0].id != second[0].id
    assert len(recorder.recorded) == 2


async def test_not_found_aborts_evaluation() -> None:
    definition_repo = AsyncMock()
    definition_repo.list_definitions.return_value = [_workflow("wf")]
    fact_resolver = AsyncMock()
    fact_resolver.resolve.side_effect = ResourceNotFoundException("device", "missing")
    recorder = InMemoryRecorder()
    orchestrator = WorkflowOrchestrator(
        definition_repo, fact_resolver, ActionDispatcher(), recorder
    )
    with pytest.raises(ResourceNotFoundException):
        await orchestrator.evaluate("missing", "report-1")
    assert recorder.recorded == []


async def test_persistence_error_propagates(make_facts) -> None:
    recorder = AsyncMock()
    recorder.record.side_effect = PersistenceException("record_execution", "disk full")
    with pytest.raises(PersistenceException):
        await _orchestrator([_workflow("wf")], make_facts(), recorder).evaluate(
            "device-1", "report-1"
        )


async def test_cancel_before_first_workflow_runs_nothing(make_facts) -> None:
    cancel = asyncio.Event()
    cancel.set()
    executions = await _orchestrator([_workflow("wf")], make_facts()).evaluate(
        "device-1", "report-1", cancel_event=cancel
    )
    assert executions == []


async def test_cancel_mid_workflow_records_and_stops(make_facts) -> None:
    """Cancelled between actions: remaining actions CANCELLED, execution recorded, no more workflows."""
    cancel = asyncio.Event()

    class CancellingHandler:
        async def execute(self, device_id, facts, configuration) -> ActionResult:
            cancel.set()
            return ActionResult(success=True, message="sent")

    dispatcher = ActionDispatcher({WorkflowActionType.WEBHOOK: CancellingHandler()})
    first = _workflow(
        "first",
        priority=1,
        actions=(
            ActionSpec(action_type=WorkflowActionType.WEBHOOK, order=1, raw_action_type=2),
            ActionSpec(action_type=WorkflowActionType.LOG_ENTRY, order=2, raw_action_type=3),
        ),
    )
    second = _workflow("second", priority=2)
    recorder = InMemoryRecorder()
    executions = await _orchestrator(
        [first, second], make_facts(), recorder, dispatcher
    ).evaluate("device-1", "report-1", cancel_event=cancel)
    assert [e.workflow_id for e in executions] == ["first"]
    execution = executions[0]
    assert execution.status is WorkflowExecutionStatus.FAILED
    assert [o.error_code for o in execution.action_results] == [None, "CANCELLED"]
    assert execution.result_message.endswith("(cancelled)")
    assert len(recorder.recorded) == 1


async def test_run_workflows_is_usable_without_orchestrator(make_facts) -> None:
    """The pure entry point evaluates given definitions against given facts."""
    recorder = InMemoryRecorder()
    executions = await run_workflows(
        [_workflow("wf", trigger=WorkflowTrigger(manufacturer_matches="contoso"))],
        make_facts(),
        ActionDispatcher(),
        recorder,
        clock=StepClock(),
    )
    assert len(executions) == 1
    assert executions[0].workflow_name == "Workflow wf"


def test_summarize_message() -> None:
    assert summarize(2, 1) == "Executed 3 actions. Success: 2, Failed: 1"
    assert summarize(0, 0, cancelled=True) == "Executed 0 actions. Success: 0, Failed: 0 (cancelled)"
