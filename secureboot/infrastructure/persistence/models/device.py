"""Device and SecureBoot report ORM models."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from secureboot.infrastructure.persistence.database import Base
from secureboot.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from secureboot.shared.utils.datetime import utc_now


class Device(CuidMixin, TimestampMixin, Base):
    """Reporting device. Table: device."""

    __tablename__ = "device"

    machine_name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    domain_name: Mapped[str | None] = mapped_column(String, nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String, nullable=True)
    model: Mapped[str | None] = mapped_column(String, nullable=True)
    fleet_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    tags: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    last_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )


class SecureBootReport(CuidMixin, Base):
    """Ingested SecureBoot status report. Table: secureboot_report.

    alerts_json and certificates_json keep the payloads as sent by the client.
    """

    __tablename__ = "secureboot_report"

    device_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("device.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    deployment_state: Mapped[str | None] = mapped_column(String, nullable=True)
    alerts_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    certificates_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_version: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (
        Index("ix_secureboot_report_device_created", "device_id", "created_at"),
    )
