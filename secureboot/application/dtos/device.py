"""DTOs for devices and SecureBoot reports (read models for workflow evaluation)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DeviceResult:
    """Device read-model (result of get_device)."""

    id: str
    machine_name: str
    fleet_id: str | None
    manufacturer: str | None
    model: str | None
    last_seen_at: datetime
    tags: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ReportResult:
    """SecureBoot report read-model.

    alerts_json and certificates_json are the payloads as ingested; they are
    parsed by the fact resolver, not here.
    """

    id: str
    device_id: str
    deployment_state: str | None
    alerts_json: str | None
    certificates_json: str | None
    created_at: datetime
