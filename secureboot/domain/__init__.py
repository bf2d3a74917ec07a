"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from secureboot.domain.entities import (
    ActionOutcome,
    ActionResult,
    ActionSpec,
    CertificateFacts,
    FactBundle,
    WorkflowDefinition,
    WorkflowExecution,
    WorkflowTrigger,
)
from secureboot.domain.enums import (
    ActionErrorCode,
    WorkflowActionType,
    WorkflowEvaluationState,
)
from secureboot.domain.exceptions import (
    ActionExecutionException,
    PersistenceException,
    ResourceNotFoundException,
    SecureBootException,
    ValidationException,
    WorkflowConfigurationException,
)

__all__ = [
    # Entities
    "ActionOutcome",
    "ActionResult",
    "ActionSpec",
    "CertificateFacts",
    "FactBundle",
    "WorkflowDefinition",
    "WorkflowExecution",
    "WorkflowTrigger",
    # Enums
    "ActionErrorCode",
    "WorkflowActionType",
    "WorkflowEvaluationState",
    # Exceptions
    "ActionExecutionException",
    "PersistenceException",
    "ResourceNotFoundException",
    "SecureBootException",
    "ValidationException",
    "WorkflowConfigurationException",
]
