"""Notification sender: log-only implementation of INotificationSender."""

from __future__ import annotations

import logging

from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class LogOnlyNotificationService:
    """INotificationSender implementation that logs instead of sending email.

    Use when no mail relay is configured. Production can swap in an SMTP or
    queue-based implementation.
    """

    def __init__(self, from_address: str = "secureboot-dashboard@localhost") -> None:
        self.from_address = from_address

    async def send(self, to: list[str], subject: str, body: str) -> None:
        """Log the notification; no actual email sent."""
        recipients = list(to or [])
        logger.info(
            "Notification from %s to %d recipient(s) (subject=%r)",
            self.from_address,
            len(recipients),
            (subject or "")[:80],
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Notification recipients: %s (at %s)", recipients, utc_now().isoformat()
            )
        logger.debug("Notification body (first 500 chars): %s", (body or "")[:500])
