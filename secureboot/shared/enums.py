"""Shared enumerations for the SecureBoot dashboard.

Cross-cutting enums used by application and infrastructure (execution
status is stored, serialised and checked by a DB constraint). Workflow
domain enums live in secureboot.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class WorkflowExecutionStatus(_ValuesMixin, str, Enum):
    """Workflow execution lifecycle status.

    RUNNING only exists while actions are dispatched; a recorded execution
    is always COMPLETED or FAILED.
    """

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not WorkflowExecutionStatus.RUNNING
