"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from secureboot.domain.entities.execution import (
    ActionOutcome,
    ActionResult,
    WorkflowExecution,
)
from secureboot.domain.entities.facts import CertificateFacts, FactBundle
from secureboot.domain.entities.workflow import (
    ActionSpec,
    WorkflowDefinition,
    WorkflowTrigger,
)

__all__ = [
    "ActionOutcome",
    "ActionResult",
    "ActionSpec",
    "CertificateFacts",
    "FactBundle",
    "WorkflowDefinition",
    "WorkflowExecution",
    "WorkflowTrigger",
]
