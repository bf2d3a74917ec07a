"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from secureboot.shared.telemetry.logging import get_logger, setup_logging
from secureboot.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "add_span_attributes",
    "add_span_event",
    "get_logger",
    "setup_logging",
    "traced",
]
