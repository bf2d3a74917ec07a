"""Parse stored workflow trigger/action JSON into domain entities.

Payloads use the PascalCase shapes the reporting clients and the dashboard
UI write (e.g. {"DeploymentState": "Error", "FleetIdMatches": "a,b"}).
Parsing happens once, when definitions are loaded; a malformed trigger makes
the workflow non-matching and a malformed action fails only that action.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from secureboot.application.dtos.workflow import WorkflowRecord
from secureboot.domain.entities.workflow import (
    ActionSpec,
    WorkflowDefinition,
    WorkflowTrigger,
)
from secureboot.domain.enums import WorkflowActionType
from secureboot.domain.exceptions import WorkflowConfigurationException
from secureboot.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class TriggerDocument(BaseModel):
    """Stored trigger shape. Every field is optional; unset means wildcard."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    deployment_state: str | None = Field(default=None, alias="DeploymentState")
    fleet_id_matches: str | list[str] | None = Field(default=None, alias="FleetIdMatches")
    manufacturer_matches: str | None = Field(default=None, alias="ManufacturerMatches")
    no_report_for_days: int | None = Field(default=None, ge=0, alias="NoReportForDays")
    alert_contains: str | list[str] | None = Field(default=None, alias="AlertContains")
    has_expired_certificates: bool | None = Field(default=None, alias="HasExpiredCertificates")
    certificate_expiring_within_days: int | None = Field(
        default=None, ge=0, alias="CertificateExpiringWithinDays"
    )

    def to_trigger(self) -> WorkflowTrigger:
        return WorkflowTrigger(
            deployment_state=_blank_to_none(self.deployment_state),
            fleet_id_matches=_alternatives(self.fleet_id_matches),
            manufacturer_matches=_blank_to_none(self.manufacturer_matches),
            no_report_for_days=self.no_report_for_days,
            alert_contains=_alternatives(self.alert_contains),
            has_expired_certificates=self.has_expired_certificates,
            certificate_expiring_within_days=self.certificate_expiring_within_days,
        )


class ActionDocument(BaseModel):
    """Stored action shape: type code (or name), configuration and order."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action_type: int | str = Field(..., alias="ActionType")
    configuration_json: dict[str, Any] | str | None = Field(
        default=None, alias="ConfigurationJson"
    )
    order: int = Field(default=0, alias="Order")

    @field_validator("action_type", mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("ActionType must be an integer code or a name")
        return v


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _alternatives(value: str | list[str] | None) -> tuple[str, ...] | None:
    """Split comma-separated alternatives; only blanks means wildcard."""
    if value is None:
        return None
    parts = value.split(",") if isinstance(value, str) else value
    cleaned = tuple(p.strip() for p in parts if p and p.strip())
    return cleaned or None


def _load_json(raw: str | dict[str, Any] | list[Any] | None, what: str) -> Any:
    if raw is None or isinstance(raw, (dict, list)):
        return raw
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise WorkflowConfigurationException(f"{what} is not valid JSON ({e.msg})") from e


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ())) or "payload"
    return f"{loc}: {err.get('msg', 'invalid value')}"


def parse_trigger(
    raw: str | dict[str, Any] | None, *, workflow_id: str | None = None
) -> WorkflowTrigger:
    """Parse a stored trigger. Empty or null payload is the all-wildcard trigger.

    Raises:
        WorkflowConfigurationException: payload is not a JSON object or a
            field has the wrong type.
    """
    try:
        data = _load_json(raw, "Trigger")
    except WorkflowConfigurationException as e:
        raise WorkflowConfigurationException(
            e.details["reason"], workflow_id=workflow_id, field="Trigger"
        ) from e
    if data is None:
        return WorkflowTrigger()
    if not isinstance(data, dict):
        raise WorkflowConfigurationException(
            "Trigger must be a JSON object", workflow_id=workflow_id, field="Trigger"
        )
    try:
        return TriggerDocument.model_validate(data).to_trigger()
    except ValidationError as e:
        raise WorkflowConfigurationException(
            _first_error(e), workflow_id=workflow_id, field="Trigger"
        ) from e


def _parse_configuration(value: dict[str, Any] | str | None) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    if not value.strip():
        return {}
    data = json.loads(value)
    if not isinstance(data, dict):
        raise ValueError("ConfigurationJson must be a JSON object")
    return data


def _parse_action(item: Any, index: int) -> ActionSpec:
    if not isinstance(item, dict):
        return ActionSpec(
            action_type=WorkflowActionType.UNSUPPORTED,
            order=index,
            raw_action_type=None,
            configuration_error=f"Actions[{index}] must be a JSON object",
        )
    raw_type = item.get("ActionType", item.get("action_type"))
    try:
        doc = ActionDocument.model_validate(item)
    except ValidationError as e:
        order = item.get("Order", index)
        return ActionSpec(
            action_type=WorkflowActionType.parse(raw_type),
            order=order if isinstance(order, int) and not isinstance(order, bool) else index,
            raw_action_type=raw_type,
            configuration_error=f"Actions[{index}].{_first_error(e)}",
        )
    action_type = WorkflowActionType.parse(doc.action_type)
    try:
        configuration = _parse_configuration(doc.configuration_json)
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        return ActionSpec(
            action_type=action_type,
            order=doc.order,
            raw_action_type=doc.action_type,
            configuration_error=f"Actions[{index}].ConfigurationJson: {e}",
        )
    return ActionSpec(
        action_type=action_type,
        order=doc.order,
        configuration=configuration,
        raw_action_type=doc.action_type,
    )


def parse_actions(
    raw: str | list[Any] | None, *, workflow_id: str | None = None
) -> tuple[ActionSpec, ...]:
    """Parse a stored action list, in stored order.

    Per-action problems are kept on the ActionSpec (configuration_error) so
    that sibling actions still run.

    Raises:
        WorkflowConfigurationException: the payload as a whole is not a JSON array.
    """
    try:
        data = _load_json(raw, "Actions")
    except WorkflowConfigurationException as e:
        raise WorkflowConfigurationException(
            e.details["reason"], workflow_id=workflow_id, field="Actions"
        ) from e
    if data is None:
        return ()
    if not isinstance(data, list):
        raise WorkflowConfigurationException(
            "Actions must be a JSON array", workflow_id=workflow_id, field="Actions"
        )
    return tuple(_parse_action(item, i) for i, item in enumerate(data))


def build_definition(record: WorkflowRecord) -> WorkflowDefinition:
    """Turn a stored workflow row into an immutable definition.

    Never raises for payload problems: a bad trigger becomes trigger=None
    (never matches) and a bad action list becomes a single failing action.
    """
    trigger: WorkflowTrigger | None
    trigger_error: str | None = None
    try:
        trigger = parse_trigger(record.trigger_json, workflow_id=record.id)
    except WorkflowConfigurationException as e:
        logger.warning(
            "Workflow %s has a malformed trigger, it will not match: %s",
            record.id,
            e.message,
        )
        trigger = None
        trigger_error = e.message

    try:
        actions = parse_actions(record.actions_json, workflow_id=record.id)
    except WorkflowConfigurationException as e:
        logger.warning(
            "Workflow %s has a malformed action list: %s", record.id, e.message
        )
        actions = (
            ActionSpec(
                action_type=WorkflowActionType.UNSUPPORTED,
                order=0,
                raw_action_type=None,
                configuration_error=e.message,
            ),
        )
    for action in actions:
        if action.configuration_error:
            logger.warning(
                "Workflow %s action %s (order %s) is malformed: %s",
                record.id,
                action.type_name,
                action.order,
                action.configuration_error,
            )

    return WorkflowDefinition(
        id=record.id,
        name=record.name,
        description=record.description,
        enabled=record.enabled,
        priority=record.priority,
        trigger=trigger,
        trigger_error=trigger_error,
        actions=actions,
        created_at=record.created_at,
        updated_at=record.updated_at,
        created_by=record.created_by,
        updated_by=record.updated_by,
    )
