"""Shared utilities (datetime handling, identifier generation)."""

from secureboot.shared.utils.datetime import (
    ensure_utc,
    parse_utc,
    utc_now,
    whole_days_between,
)
from secureboot.shared.utils.generators import generate_id

__all__ = [
    "ensure_utc",
    "generate_id",
    "parse_utc",
    "utc_now",
    "whole_days_between",
]
