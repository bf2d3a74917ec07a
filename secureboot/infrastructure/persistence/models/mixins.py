"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, TimestampMixin, UserAuditMixin.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from secureboot.shared.utils.datetime import utc_now
from secureboot.shared.utils.generators import generate_id


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_id."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_id)


class TimestampMixin:
    """Mixin for created_at and updated_at (timezone-aware).

    Values are set client-side as well so they are available right after a
    flush without a refresh.
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            nullable=False,
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            default=utc_now,
            server_default=func.now(),
            onupdate=utc_now,
            nullable=False,
        )


class UserAuditMixin(TimestampMixin):
    """Mixin for user audit: created_by, updated_by (free-form actor names)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(String, nullable=True)

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(String, nullable=True)
