"""Fact resolver: assemble the fact bundle for one workflow evaluation pass."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any

from secureboot.application.dtos.device import DeviceResult, ReportResult
from secureboot.application.interfaces.repositories import (
    IDeviceRepository,
    IReportRepository,
)
from secureboot.domain.entities.facts import CertificateFacts, FactBundle
from secureboot.domain.exceptions import ResourceNotFoundException
from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.utils.datetime import parse_utc, utc_now, whole_days_between

logger = get_logger(__name__)

# UEFI databases carried in a report's certificate inventory (db, dbx, KEK, PK).
CERTIFICATE_DATABASES = (
    "SignatureDatabase",
    "ForbiddenDatabase",
    "KeyExchangeKeys",
    "PlatformKeys",
)


def _days_until_expiry(cert: dict[str, Any], evaluated_at: datetime) -> int | None:
    not_after = parse_utc(cert.get("NotAfter"))
    if not_after is not None:
        return whole_days_between(evaluated_at, not_after)
    days = cert.get("DaysUntilExpiration")
    if isinstance(days, int) and not isinstance(days, bool):
        return days
    return None


def derive_certificate_facts(
    payload: str | None,
    evaluated_at: datetime,
    lookahead_days: int,
    *,
    report_id: str | None = None,
) -> CertificateFacts:
    """Count expired and soon-expiring certificates across the UEFI databases.

    A certificate is expired when its day count is negative or it is flagged
    IsExpired; it is expiring when 0 <= days <= lookahead_days. Unreadable
    payloads yield available=False.
    """
    unavailable = CertificateFacts(available=False, lookahead_days=lookahead_days)
    if not payload or not payload.strip():
        return unavailable
    try:
        collection = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning(
            "Report %s has unreadable certificate inventory: %s", report_id, e.msg
        )
        return unavailable
    if not isinstance(collection, dict):
        logger.warning("Report %s certificate inventory is not an object", report_id)
        return unavailable

    certs: list[dict[str, Any]] = []
    for database in CERTIFICATE_DATABASES:
        entries = collection.get(database) or []
        if not isinstance(entries, list):
            logger.warning(
                "Report %s certificate database %s is not a list", report_id, database
            )
            continue
        certs.extend(c for c in entries if isinstance(c, dict))

    if not certs and collection.get("ErrorMessage"):
        logger.info(
            "Report %s certificate enumeration failed on the client: %s",
            report_id,
            collection.get("ErrorMessage"),
        )
        return unavailable

    expired = 0
    expiring = 0
    next_expiry: int | None = None
    for cert in certs:
        days = _days_until_expiry(cert, evaluated_at)
        if cert.get("IsExpired") is True or (days is not None and days < 0):
            expired += 1
            continue
        if days is None:
            continue
        if days <= lookahead_days:
            expiring += 1
        if next_expiry is None or days < next_expiry:
            next_expiry = days

    reported_expired = collection.get("ExpiredCertificateCount")
    if isinstance(reported_expired, int) and not isinstance(reported_expired, bool):
        expired = max(expired, reported_expired)

    return CertificateFacts(
        available=True,
        total=len(certs),
        expired_count=expired,
        expiring_count=expiring,
        days_until_next_expiry=next_expiry,
        lookahead_days=lookahead_days,
    )


def parse_alerts(payload: str | None, *, report_id: str | None = None) -> tuple[str, ...]:
    """Alerts are stored as a JSON array of strings; anything else yields ()."""
    if not payload or not payload.strip():
        return ()
    try:
        alerts = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.warning("Report %s has unreadable alerts: %s", report_id, e.msg)
        return ()
    if not isinstance(alerts, list):
        logger.warning("Report %s alerts payload is not a list", report_id)
        return ()
    return tuple(a for a in alerts if isinstance(a, str))


class FactResolver:
    """Builds the immutable FactBundle for a device/report pair (read only)."""

    def __init__(
        self,
        device_repo: IDeviceRepository,
        report_repo: IReportRepository,
        *,
        lookahead_days: int = 90,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.device_repo = device_repo
        self.report_repo = report_repo
        self.lookahead_days = lookahead_days
        self._clock = clock

    async def resolve(
        self,
        device_id: str,
        report_id: str,
        *,
        evaluated_at: datetime | None = None,
    ) -> FactBundle:
        """Load device and report and derive signals against one reference time.

        Raises:
            ResourceNotFoundException: device or report missing, or the report
                belongs to another device.
        """
        device = await self.device_repo.get_device(device_id)
        if device is None:
            raise ResourceNotFoundException("device", device_id)
        report = await self.report_repo.get_report(report_id)
        if report is None or report.device_id != device_id:
            raise ResourceNotFoundException("report", report_id)
        return self.build(device, report, evaluated_at or self._clock())

    def build(
        self, device: DeviceResult, report: ReportResult, evaluated_at: datetime
    ) -> FactBundle:
        return FactBundle(
            device_id=device.id,
            machine_name=device.machine_name,
            fleet_id=device.fleet_id,
            manufacturer=device.manufacturer,
            model=device.model,
            tags=dict(device.tags),
            last_seen_at=device.last_seen_at,
            report_id=report.id,
            deployment_state=report.deployment_state,
            alerts=parse_alerts(report.alerts_json, report_id=report.id),
            evaluated_at=evaluated_at,
            days_since_last_seen=whole_days_between(device.last_seen_at, evaluated_at),
            certificates=derive_certificate_facts(
                report.certificates_json,
                evaluated_at,
                self.lookahead_days,
                report_id=report.id,
            ),
        )
