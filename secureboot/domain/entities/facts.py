"""Fact bundle: the read-only snapshot a workflow evaluation pass reasons over."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CertificateFacts:
    """Certificate expiry signals derived from a report's certificate inventory.

    available is False when the report carried no (or an unreadable)
    inventory; certificate predicates never match in that case.
    """

    available: bool = False
    total: int = 0
    expired_count: int = 0
    expiring_count: int = 0
    days_until_next_expiry: int | None = None
    lookahead_days: int = 90

    @property
    def has_expired(self) -> bool:
        return self.expired_count > 0

    @property
    def has_expiring(self) -> bool:
        return self.expiring_count > 0


@dataclass(frozen=True)
class FactBundle:
    """Device snapshot, triggering report and derived signals.

    Built once per evaluation call against a single evaluated_at reference
    time and shared by every workflow evaluated in that call.
    """

    device_id: str
    machine_name: str
    fleet_id: str | None
    manufacturer: str | None
    last_seen_at: datetime
    report_id: str
    deployment_state: str | None
    alerts: tuple[str, ...]
    evaluated_at: datetime
    days_since_last_seen: int
    certificates: CertificateFacts
    model: str | None = None
    tags: dict[str, Any] = field(default_factory=dict)

    def as_template_context(self) -> dict[str, Any]:
        """Plain dict used by notification templates and webhook payloads."""
        return {
            "device_id": self.device_id,
            "machine_name": self.machine_name,
            "fleet_id": self.fleet_id,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "last_seen_at": self.last_seen_at.isoformat(),
            "days_since_last_seen": self.days_since_last_seen,
            "report_id": self.report_id,
            "deployment_state": self.deployment_state,
            "alerts": list(self.alerts),
            "evaluated_at": self.evaluated_at.isoformat(),
            "certificates": {
                "available": self.certificates.available,
                "total": self.certificates.total,
                "expired": self.certificates.expired_count,
                "expiring": self.certificates.expiring_count,
                "days_until_next_expiry": self.certificates.days_until_next_expiry,
                "lookahead_days": self.certificates.lookahead_days,
            },
        }
