"""Application services: workflow engine building blocks."""

from secureboot.application.services.action_dispatcher import (
    ActionDispatcher,
    DispatchResult,
    LogEntryActionHandler,
)
from secureboot.application.services.execution_recorder import ExecutionRecorder
from secureboot.application.services.fact_resolver import FactResolver
from secureboot.application.services.trigger_evaluator import matches
from secureboot.application.services.workflow_definition_parser import (
    ActionDocument,
    TriggerDocument,
    build_definition,
    parse_actions,
    parse_trigger,
)

__all__ = [
    "ActionDispatcher",
    "ActionDocument",
    "DispatchResult",
    "ExecutionRecorder",
    "FactResolver",
    "LogEntryActionHandler",
    "TriggerDocument",
    "build_definition",
    "matches",
    "parse_actions",
    "parse_trigger",
]
