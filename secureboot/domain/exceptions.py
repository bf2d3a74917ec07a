"""Domain exceptions for the SecureBoot dashboard.

Defines domain-level exceptions for the remediation workflow engine. They
are independent of infrastructure concerns; the presentation layer maps
them to HTTP responses in exception handlers.

Taxonomy used by the workflow engine:
    ResourceNotFoundException: device or report absent; aborts the call.
    WorkflowConfigurationException: malformed trigger or action payload;
        that workflow is non-matching or that action fails.
    ActionExecutionException: a side-effecting collaborator failed; recorded
        as a failed action outcome.
    PersistenceException: an execution record could not be stored; fatal.
"""

from typing import Any


class SecureBootException(Exception):
    """Base exception for all SecureBoot dashboard errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. workflow_id, device_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for API error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SecureBootException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(SecureBootException):
    """Raised when a requested resource (device, report, workflow) is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'device', 'report').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class WorkflowConfigurationException(SecureBootException):
    """Raised when a stored trigger or action payload cannot be parsed."""

    def __init__(
        self,
        reason: str,
        *,
        workflow_id: str | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize with the parse failure.

        Args:
            reason: What was wrong with the payload.
            workflow_id: Workflow the payload belongs to, when known.
            field: Offending field (e.g. 'Trigger', 'Actions[1].ConfigurationJson').
        """
        details: dict[str, Any] = {"reason": reason}
        if workflow_id:
            details["workflow_id"] = workflow_id
        if field:
            details["field"] = field
        super().__init__(
            f"Invalid workflow configuration: {reason}",
            "CONFIGURATION_ERROR",
            details,
        )


class ActionExecutionException(SecureBootException):
    """Raised by action handlers when a side-effecting collaborator fails."""

    def __init__(self, action_type: str, reason: str) -> None:
        super().__init__(
            f"{action_type} action failed: {reason}",
            "ACTION_EXECUTION_ERROR",
            {"action_type": action_type, "reason": reason},
        )


class PersistenceException(SecureBootException):
    """Raised when a workflow execution record cannot be durably stored."""

    def __init__(self, operation: str, reason: str, **details_extra: Any) -> None:
        """Initialize with the failed operation.

        Args:
            operation: Store operation (e.g. 'record_execution').
            reason: Underlying error message.
            **details_extra: Extra context (e.g. workflow_id, device_id).
        """
        super().__init__(
            f"Failed to {operation.replace('_', ' ')}: {reason}",
            "PERSISTENCE_ERROR",
            {"operation": operation, "reason": reason, **details_extra},
        )
