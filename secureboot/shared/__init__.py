"""Shared utilities: enums, telemetry, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from secureboot.shared.enums import WorkflowExecutionStatus
from secureboot.shared.utils import (
    ensure_utc,
    generate_id,
    parse_utc,
    utc_now,
    whole_days_between,
)

__all__ = [
    "WorkflowExecutionStatus",
    "ensure_utc",
    "generate_id",
    "parse_utc",
    "utc_now",
    "whole_days_between",
]
