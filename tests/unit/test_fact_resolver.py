"""Tests for FactResolver (fact bundle assembly and derived signals)."""

import json
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from secureboot.application.dtos.device import DeviceResult, ReportResult
from secureboot.application.services.fact_resolver import (
    FactResolver,
    derive_certificate_facts,
    parse_alerts,
)
from secureboot.domain.exceptions import ResourceNotFoundException

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def _device(**kwargs) -> DeviceResult:
    values = {
        "id": "device-1",
        "machine_name": "PC-001",
        "fleet_id": "test-fleet",
        "manufacturer": "Contoso",
        "model": "Surface 9",
        "last_seen_at": NOW - timedelta(days=3, hours=5),
        "tags": {"owner": "it"},
    }
    values.update(kwargs)
    return DeviceResult(**values)


def _report(**kwargs) -> ReportResult:
    values = {
        "id": "report-1",
        "device_id": "device-1",
        "deployment_state": "Error",
        "alerts_json": json.dumps(["DBX update pending"]),
        "certificates_json": None,
        "created_at": NOW,
    }
    values.update(kwargs)
    return ReportResult(**values)


def _resolver(device: DeviceResult | None, report: ReportResult | None) -> FactResolver:
    device_repo = AsyncMock()
    device_repo.get_device.return_value = device
    report_repo = AsyncMock()
    report_repo.get_report.return_value = report
    return FactResolver(device_repo, report_repo, lookahead_days=90, clock=lambda: NOW)


async def test_resolve_builds_bundle() -> None:
    """Device snapshot, report fields and derived days are combined."""
    facts = await _resolver(_device(), _report()).resolve("device-1", "report-1")
    assert facts.device_id == "device-1"
    assert facts.machine_name == "PC-001"
    assert facts.fleet_id == "test-fleet"
    assert facts.report_id == "report-1"
    assert facts.deployment_state == "Error"
    assert facts.alerts == ("DBX update pending",)
    assert facts.evaluated_at == NOW
    assert facts.days_since_last_seen == 3
    assert facts.tags == {"owner": "it"}
    assert facts.certificates.available is False


async def test_resolve_uses_given_evaluated_at() -> None:
    later = NOW + timedelta(days=10)
    facts = await _resolver(_device(), _report()).resolve(
        "device-1", "report-1", evaluated_at=later
    )
    assert facts.evaluated_at == later
    assert facts.days_since_last_seen == 13


async def test_missing_device_raises_not_found() -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await _resolver(None, _report()).resolve("device-1", "report-1")
    assert exc_info.value.details["resource_type"] == "device"


async def test_missing_report_raises_not_found() -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await _resolver(_device(), None).resolve("device-1", "report-1")
    assert exc_info.value.details["resource_type"] == "report"


async def test_report_of_other_device_raises_not_found() -> None:
    with pytest.raises(ResourceNotFoundException):
        await _resolver(_device(), _report(device_id="device-2")).resolve(
            "device-1", "report-1"
        )


@pytest.mark.parametrize("payload", [None, "", "{oops", '{"a": 1}', "[1, 2]"])
def test_parse_alerts_malformed_or_empty(payload) -> None:
    """Unreadable, non-list or non-string alert payloads yield no alerts."""
    assert parse_alerts(payload) == ()


def test_certificate_facts_from_not_after_and_days() -> None:
    payload = json.dumps(
        {
            "SignatureDatabase": [
                {"Subject": "expired", "NotAfter": (NOW - timedelta(days=2)).isoformat()},
                {"Subject": "soon", "NotAfter": (NOW + timedelta(days=20, hours=1)).isoformat()},
            ],
            "KeyExchangeKeys": [{"Subject": "kek", "DaysUntilExpiration": 45}],
            "PlatformKeys": [{"Subject": "pk", "DaysUntilExpiration": 400}],
            "ForbiddenDatabase": [],
        }
    )
    facts = derive_certificate_facts(payload, NOW, 90)
    assert facts.available is True
    assert facts.total == 4
    assert facts.expired_count == 1
    assert facts.expiring_count == 2
    assert facts.days_until_next_expiry == 20
    assert facts.lookahead_days == 90


def test_certificate_is_expired_flag_counts() -> None:
    payload = json.dumps({"PlatformKeys": [{"IsExpired": True}]})
    facts = derive_certificate_facts(payload, NOW, 90)
    assert facts.expired_count == 1
    assert facts.days_until_next_expiry is None


def test_certificate_inventory_with_trailing_z_timestamps() -> None:
    payload = json.dumps({"SignatureDatabase": [{"NotAfter": "2026-01-25T12:00:00Z"}]})
    facts = derive_certificate_facts(payload, NOW, 90)
    assert facts.days_until_next_expiry == 10
    assert facts.expiring_count == 1


@pytest.mark.parametrize("payload", [None, "", "{bad json", "[]"])
def test_unreadable_certificate_inventory_is_unavailable(payload) -> None:
    facts = derive_certificate_facts(payload, NOW, 90)
    assert facts.available is False
    assert facts.expired_count == 0


def test_client_enumeration_error_is_unavailable() -> None:
    payload = json.dumps({"SignatureDatabase": [], "ErrorMessage": "access denied"})
    assert derive_certificate_facts(payload, NOW, 90).available is False


async def test_malformed_payloads_do_not_raise() -> None:
    """Bad alert and certificate payloads degrade to empty facts."""
    report = _report(alerts_json="{oops", certificates_json="not json")
    facts = await _resolver(_device(), report).resolve("device-1", "report-1")
    assert facts.alerts == ()
    assert facts.certificates.available is False
