"""Remediation workflow domain entities.

A workflow is a definition: a trigger (optional predicates over the fact
bundle) and an ordered list of actions. Definitions are parsed once when
loaded and are immutable for the evaluation pass that uses them.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any

from secureboot.domain.enums import WorkflowActionType


@dataclass(frozen=True)
class WorkflowTrigger:
    """Optional predicates; None means wildcard (always matches).

    fleet_id_matches and alert_contains hold one or more alternatives; any
    alternative satisfies the predicate.
    """

    deployment_state: str | None = None
    fleet_id_matches: tuple[str, ...] | None = None
    manufacturer_matches: str | None = None
    no_report_for_days: int | None = None
    alert_contains: tuple[str, ...] | None = None
    has_expired_certificates: bool | None = None
    certificate_expiring_within_days: int | None = None

    @property
    def is_wildcard(self) -> bool:
        """True when no predicate is set (matches every device)."""
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class ActionSpec:
    """One action of a workflow.

    configuration_error is set when the stored payload could not be parsed;
    the dispatcher then fails this action without calling a handler.
    """

    action_type: WorkflowActionType
    order: int
    configuration: dict[str, Any] = field(default_factory=dict)
    raw_action_type: Any = None
    configuration_error: str | None = None

    @property
    def type_name(self) -> str:
        if self.action_type is WorkflowActionType.UNSUPPORTED and self.raw_action_type is not None:
            return str(self.raw_action_type)
        return self.action_type.display_name


@dataclass(frozen=True)
class WorkflowDefinition:
    """Loaded workflow definition.

    trigger is None when the stored trigger payload was malformed; such a
    workflow never matches.
    """

    id: str
    name: str
    enabled: bool
    priority: int
    trigger: WorkflowTrigger | None
    actions: tuple[ActionSpec, ...]
    description: str | None = None
    trigger_error: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
