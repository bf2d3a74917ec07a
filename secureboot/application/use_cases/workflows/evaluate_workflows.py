"""Evaluate remediation workflows for a newly ingested report.

Per workflow: NOT_EVALUATED -> SKIPPED (disabled) | NOT_MATCHED | MATCHED,
then MATCHED -> RUNNING -> COMPLETED | FAILED. Workflows run one after the
other in priority order; every matching workflow runs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime

from secureboot.application.interfaces.repositories import IWorkflowDefinitionRepository
from secureboot.application.interfaces.services import IExecutionRecorder
from secureboot.application.services.action_dispatcher import ActionDispatcher
from secureboot.application.services.fact_resolver import FactResolver
from secureboot.application.services.trigger_evaluator import matches
from secureboot.domain.entities.execution import WorkflowExecution
from secureboot.domain.entities.facts import FactBundle
from secureboot.domain.entities.workflow import WorkflowDefinition
from secureboot.domain.enums import WorkflowEvaluationState
from secureboot.shared.enums import WorkflowExecutionStatus
from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.telemetry.tracing import add_span_attributes, add_span_event, traced
from secureboot.shared.utils.datetime import utc_now

logger = get_logger(__name__)


def summarize(succeeded: int, failed: int, *, cancelled: bool = False) -> str:
    message = f"Executed {succeeded + failed} actions. Success: {succeeded}, Failed: {failed}"
    return f"{message} (cancelled)" if cancelled else message


def order_for_evaluation(
    workflows: Iterable[WorkflowDefinition],
) -> list[WorkflowDefinition]:
    """Enabled workflows by ascending priority; ties keep load order."""
    enabled = []
    for workflow in workflows:
        if workflow.enabled:
            enabled.append(workflow)
        else:
            logger.debug(
                "Workflow %s %s", workflow.id, WorkflowEvaluationState.SKIPPED.value
            )
    return sorted(enabled, key=lambda w: w.priority)


async def run_workflows(
    workflows: Iterable[WorkflowDefinition],
    facts: FactBundle,
    dispatcher: ActionDispatcher,
    recorder: IExecutionRecorder,
    *,
    cancel_event: asyncio.Event | None = None,
    clock: Callable[[], datetime] = utc_now,
) -> list[WorkflowExecution]:
    """Evaluate workflows against facts; execute and record the matching ones.

    Returns the recorded executions in priority order. PersistenceException
    from the recorder propagates and ends the pass.
    """
    executions: list[WorkflowExecution] = []
    for workflow in order_for_evaluation(workflows):
        if cancel_event is not None and cancel_event.is_set():
            logger.info(
                "Evaluation for device %s cancelled before workflow %s",
                facts.device_id,
                workflow.id,
            )
            break

        if not matches(workflow.trigger, facts, workflow_id=workflow.id):
            logger.debug(
                "Workflow %s %s for device %s",
                workflow.id,
                WorkflowEvaluationState.NOT_MATCHED.value,
                facts.device_id,
            )
            continue

        logger.info(
            "Workflow %s (%s) matched device %s; running %d action(s)",
            workflow.id,
            workflow.name,
            facts.device_id,
            len(workflow.actions),
        )
        add_span_event(
            "workflow.matched", {"workflow_id": workflow.id, "priority": workflow.priority}
        )
        started_at = clock()
        dispatched = await dispatcher.dispatch(
            workflow.actions,
            facts,
            workflow_id=workflow.id,
            cancel_event=cancel_event,
        )
        completed_at = clock()

        succeeded = sum(1 for o in dispatched.outcomes if o.success)
        failed = len(dispatched.outcomes) - succeeded
        status = (
            WorkflowExecutionStatus.COMPLETED
            if failed == 0
            else WorkflowExecutionStatus.FAILED
        )
        execution = WorkflowExecution(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            device_id=facts.device_id,
            report_id=facts.report_id,
            started_at=started_at,
            completed_at=completed_at,
            status=status,
            result_message=summarize(succeeded, failed, cancelled=dispatched.cancelled),
            action_results=dispatched.outcomes,
        )
        executions.append(await recorder.record(execution))

        if dispatched.cancelled:
            break
    return executions


class WorkflowOrchestrator:
    """Loads definitions and facts, then delegates to run_workflows."""

    def __init__(
        self,
        definition_repo: IWorkflowDefinitionRepository,
        fact_resolver: FactResolver,
        dispatcher: ActionDispatcher,
        recorder: IExecutionRecorder,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._definition_repo = definition_repo
        self._fact_resolver = fact_resolver
        self._dispatcher = dispatcher
        self._recorder = recorder
        self._clock = clock

    @traced("workflow.evaluate")
    async def evaluate(
        self,
        device_id: str,
        report_id: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> list[WorkflowExecution]:
        """Run every enabled, matching workflow for the device's report.

        Args:
            device_id: Device the report belongs to.
            report_id: Newly ingested report.
            cancel_event: When set, no further workflows or actions start.

        Returns:
            Executions created by this call, in priority order.

        Raises:
            ResourceNotFoundException: Device or report not found.
            PersistenceException: An execution could not be recorded.
        """
        add_span_attributes(device_id=device_id, report_id=report_id)
        workflows = await self._definition_repo.list_definitions()
        facts = await self._fact_resolver.resolve(
            device_id, report_id, evaluated_at=self._clock()
        )
        executions = await run_workflows(
            workflows,
            facts,
            self._dispatcher,
            self._recorder,
            cancel_event=cancel_event,
            clock=self._clock,
        )
        add_span_attributes(executions=len(executions))
        logger.info(
            "Evaluated %d workflow(s) for device %s report %s: %d execution(s)",
            len(workflows),
            device_id,
            report_id,
            len(executions),
        )
        return executions
