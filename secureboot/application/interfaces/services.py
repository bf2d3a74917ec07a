"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from secureboot.domain.entities.execution import ActionResult, WorkflowExecution
    from secureboot.domain.entities.facts import FactBundle


# Action handler interface
class IActionHandler(Protocol):
    """Protocol for one workflow action type (email, webhook, tags, ...).

    Handlers report ordinary failure via ActionResult(success=False, ...) and
    may raise; the dispatcher turns exceptions into failed outcomes.
    """

    async def execute(
        self,
        device_id: str,
        facts: FactBundle,
        configuration: dict[str, Any],
    ) -> ActionResult:
        """Run the action for the device and return its result."""


# Notification sender interface
class INotificationSender(Protocol):
    """Protocol for sending notification emails."""

    async def send(self, to: list[str], subject: str, body: str) -> None:
        """Send email to recipients. Raise on failure."""


# Device tag store interface
class IDeviceTagStore(Protocol):
    """Protocol for merging tags into a device."""

    async def merge_tags(self, device_id: str, tags: dict[str, Any]) -> dict[str, Any]:
        """Merge key/values into device tags; return the resulting tags."""


# Execution recorder interface
class IExecutionRecorder(Protocol):
    """Protocol for durably storing workflow executions."""

    async def record(self, execution: WorkflowExecution) -> WorkflowExecution:
        """Store execution; raise PersistenceException on failure."""
