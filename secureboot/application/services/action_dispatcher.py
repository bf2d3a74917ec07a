"""Action dispatcher: run a workflow's ordered actions against registered handlers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from secureboot.application.interfaces.services import IActionHandler
from secureboot.domain.entities.execution import ActionOutcome, ActionResult
from secureboot.domain.entities.facts import FactBundle
from secureboot.domain.entities.workflow import ActionSpec
from secureboot.domain.enums import ActionErrorCode, WorkflowActionType
from secureboot.domain.exceptions import ActionExecutionException
from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.telemetry.tracing import add_span_attributes, traced
from secureboot.shared.utils.datetime import utc_now

logger = get_logger(__name__)

DEFAULT_LOG_MESSAGE = "Workflow action executed"


class LogEntryActionHandler:
    """Built-in LOG_ENTRY action: writes the configured message to the log."""

    async def execute(
        self,
        device_id: str,
        facts: FactBundle,
        configuration: dict[str, Any],
    ) -> ActionResult:
        message = configuration.get("message") or DEFAULT_LOG_MESSAGE
        logger.info(
            "Workflow log action for device %s (%s): %s",
            facts.machine_name,
            device_id,
            message,
        )
        return ActionResult(success=True, message="Log entry created")


@dataclass(frozen=True)
class DispatchResult:
    """Outcomes in execution order; cancelled when the run was cut short."""

    outcomes: tuple[ActionOutcome, ...]
    cancelled: bool = False

    @property
    def all_succeeded(self) -> bool:
        return all(o.success for o in self.outcomes)


class ActionDispatcher:
    """Executes actions in ascending order; a failure never stops later actions."""

    def __init__(
        self,
        handlers: Mapping[WorkflowActionType, IActionHandler] | None = None,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._handlers: dict[WorkflowActionType, IActionHandler] = {
            WorkflowActionType.LOG_ENTRY: LogEntryActionHandler(),
        }
        self._handlers.update(handlers or {})
        self._clock = clock

    @traced("workflow.dispatch_actions")
    async def dispatch(
        self,
        actions: Iterable[ActionSpec],
        facts: FactBundle,
        *,
        workflow_id: str,
        cancel_event: asyncio.Event | None = None,
    ) -> DispatchResult:
        """Run every action and collect one outcome per action.

        cancel_event is checked before each action, never during one. Once
        set, the remaining actions are recorded as failed with CANCELLED.
        """
        ordered = sorted(actions, key=lambda a: a.order)
        add_span_attributes(device_id=facts.device_id, action_count=len(ordered))
        outcomes: list[ActionOutcome] = []
        cancelled = False
        for action in ordered:
            if cancelled or (cancel_event is not None and cancel_event.is_set()):
                cancelled = True
                now = self._clock()
                outcomes.append(
                    self._outcome(
                        action, False, "Cancelled before execution", now, now,
                        ActionErrorCode.CANCELLED,
                    )
                )
                continue
            outcomes.append(await self._run_one(action, facts, workflow_id))
        if cancelled:
            logger.info(
                "Workflow %s cancelled for device %s; %d action(s) not run",
                workflow_id,
                facts.device_id,
                sum(1 for o in outcomes if o.error_code == ActionErrorCode.CANCELLED.value),
            )
        return DispatchResult(outcomes=tuple(outcomes), cancelled=cancelled)

    async def _run_one(
        self, action: ActionSpec, facts: FactBundle, workflow_id: str
    ) -> ActionOutcome:
        started_at = self._clock()
        if action.configuration_error:
            return self._outcome(
                action, False, action.configuration_error, started_at, self._clock(),
                ActionErrorCode.CONFIGURATION_ERROR,
            )
        handler = self._handlers.get(action.action_type)
        if action.action_type is WorkflowActionType.UNSUPPORTED or handler is None:
            logger.warning(
                "Workflow %s: no handler for action type %s (device %s)",
                workflow_id,
                action.type_name,
                facts.device_id,
            )
            return self._outcome(
                action, False, f"Unsupported action type: {action.type_name}",
                started_at, self._clock(), ActionErrorCode.UNSUPPORTED_ACTION_TYPE,
            )
        try:
            result = await handler.execute(facts.device_id, facts, dict(action.configuration))
        except Exception as e:
            error = (
                e
                if isinstance(e, ActionExecutionException)
                else ActionExecutionException(action.type_name, str(e) or type(e).__name__)
            )
            logger.warning(
                "Workflow %s action %s failed for device %s: %s",
                workflow_id,
                action.type_name,
                facts.device_id,
                error.message,
                exc_info=not isinstance(e, ActionExecutionException),
            )
            return self._outcome(
                action, False, error.message, started_at, self._clock(),
                ActionErrorCode.ACTION_EXECUTION_ERROR,
            )
        if not result.success:
            logger.info(
                "Workflow %s action %s reported failure for device %s: %s",
                workflow_id,
                action.type_name,
                facts.device_id,
                result.message,
            )
        return self._outcome(
            action, result.success, result.message, started_at, self._clock(),
            None if result.success else ActionErrorCode.ACTION_FAILED,
        )

    @staticmethod
    def _outcome(
        action: ActionSpec,
        success: bool,
        message: str,
        started_at: datetime,
        completed_at: datetime,
        error_code: ActionErrorCode | None = None,
    ) -> ActionOutcome:
        return ActionOutcome(
            action_type=action.type_name,
            order=action.order,
            success=success,
            message=message,
            started_at=started_at,
            completed_at=completed_at,
            error_code=error_code.value if error_code else None,
        )
