"""Device and SecureBoot report repositories."""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from secureboot.application.dtos.device import DeviceResult, ReportResult
from secureboot.domain.exceptions import ResourceNotFoundException
from secureboot.infrastructure.persistence.models.device import Device, SecureBootReport
from secureboot.infrastructure.persistence.repositories.base import BaseRepository
from secureboot.shared.utils.datetime import ensure_utc, utc_now


def _device_to_result(d: Device) -> DeviceResult:
    return DeviceResult(
        id=d.id,
        machine_name=d.machine_name,
        fleet_id=d.fleet_id,
        manufacturer=d.manufacturer,
        model=d.model,
        last_seen_at=ensure_utc(d.last_seen_at) or utc_now(),
        tags=dict(d.tags or {}),
    )


def _report_to_result(r: SecureBootReport) -> ReportResult:
    return ReportResult(
        id=r.id,
        device_id=r.device_id,
        deployment_state=r.deployment_state,
        alerts_json=r.alerts_json,
        certificates_json=r.certificates_json,
        created_at=ensure_utc(r.created_at) or utc_now(),
    )


class DeviceRepository(BaseRepository[Device]):
    """Device repository; also the device tag store for UpdateDeviceTags actions."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Device)

    async def get_device(self, device_id: str) -> DeviceResult | None:
        device = await self.get_by_id(device_id)
        return _device_to_result(device) if device else None

    async def merge_tags(self, device_id: str, tags: dict[str, Any]) -> dict[str, Any]:
        """Merge tags into the device's existing tags (new keys win).

        Raises:
            ResourceNotFoundException: Device not found.
        """
        # Savepoint: a failed flush leaves the outer transaction usable.
        async with self.db.begin_nested():
            device = await self.get_by_id(device_id)
            if device is None:
                raise ResourceNotFoundException("device", device_id)
            merged = {**(device.tags or {}), **tags}
            # Reassign so the JSON column is marked dirty.
            device.tags = merged
            await self.update(device)
        return dict(merged)

    async def add_device(self, device: Device) -> DeviceResult:
        return _device_to_result(await self.create(device))


class ReportRepository(BaseRepository[SecureBootReport]):
    """SecureBoot report repository (read side used by the fact resolver)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, SecureBootReport)

    async def get_report(self, report_id: str) -> ReportResult | None:
        report = await self.get_by_id(report_id)
        return _report_to_result(report) if report else None

    async def add_report(self, report: SecureBootReport) -> ReportResult:
        return _report_to_result(await self.create(report))
