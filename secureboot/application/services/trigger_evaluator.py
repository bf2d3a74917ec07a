"""Trigger evaluator: pure predicate matching of a workflow trigger against facts.

Each set trigger field is one predicate; the trigger matches when every
predicate holds (unset fields are wildcards). Missing facts fail closed.
"""

from __future__ import annotations

from collections.abc import Callable

from secureboot.domain.entities.facts import FactBundle
from secureboot.domain.entities.workflow import WorkflowTrigger
from secureboot.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

Predicate = Callable[[WorkflowTrigger, FactBundle], bool]


def _same(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a.strip().casefold() == b.strip().casefold()


def _deployment_state(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    return _same(facts.deployment_state, trigger.deployment_state)


def _fleet_id(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    return any(_same(facts.fleet_id, alt) for alt in trigger.fleet_id_matches or ())


def _manufacturer(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    return _same(facts.manufacturer, trigger.manufacturer_matches)


def _no_report_for_days(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    return facts.days_since_last_seen >= trigger.no_report_for_days


def _alert_contains(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    terms = [t.casefold() for t in trigger.alert_contains or ()]
    return any(term in alert.casefold() for alert in facts.alerts for term in terms)


def _has_expired_certificates(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    if not facts.certificates.available:
        return False
    return facts.certificates.has_expired == trigger.has_expired_certificates


def _certificate_expiring(trigger: WorkflowTrigger, facts: FactBundle) -> bool:
    days = facts.certificates.days_until_next_expiry
    if not facts.certificates.available or days is None:
        return False
    return days <= trigger.certificate_expiring_within_days


# Evaluated in this order; the first mismatch short-circuits.
PREDICATES: tuple[tuple[str, Predicate], ...] = (
    ("deployment_state", _deployment_state),
    ("fleet_id_matches", _fleet_id),
    ("manufacturer_matches", _manufacturer),
    ("no_report_for_days", _no_report_for_days),
    ("alert_contains", _alert_contains),
    ("has_expired_certificates", _has_expired_certificates),
    ("certificate_expiring_within_days", _certificate_expiring),
)


def matches(
    trigger: WorkflowTrigger | None,
    facts: FactBundle,
    *,
    workflow_id: str | None = None,
) -> bool:
    """Return True when every set predicate of trigger holds for facts.

    A None trigger (malformed definition) never matches. Never raises.
    """
    if trigger is None:
        return False
    for field_name, predicate in PREDICATES:
        if getattr(trigger, field_name) is None:
            continue
        try:
            ok = predicate(trigger, facts)
        except (TypeError, ValueError, AttributeError):
            logger.warning(
                "Trigger predicate %s failed for workflow %s, device %s; treating as no match",
                field_name,
                workflow_id,
                facts.device_id,
                exc_info=True,
            )
            return False
        if not ok:
            logger.debug(
                "Workflow %s: %s did not match device %s",
                workflow_id,
                field_name,
                facts.device_id,
            )
            return False
    return True
