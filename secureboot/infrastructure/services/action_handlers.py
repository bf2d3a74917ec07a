"""Side-effecting workflow action handlers (implement IActionHandler).

LogEntry is built into the dispatcher; the handlers here need
infrastructure: the notification sender, an HTTP client, the device store.
"""

from __future__ import annotations

from typing import Any

import httpx

from secureboot.application.interfaces.services import (
    IActionHandler,
    IDeviceTagStore,
    INotificationSender,
)
from secureboot.domain.entities.execution import ActionResult
from secureboot.domain.entities.facts import FactBundle
from secureboot.domain.enums import WorkflowActionType
from secureboot.domain.exceptions import ActionExecutionException
from secureboot.infrastructure.services.notification_template_renderer import (
    NotificationTemplateRenderer,
)
from secureboot.shared.telemetry.logging import get_logger
from secureboot.shared.utils.datetime import utc_now

logger = get_logger(__name__)

_WEBHOOK_METHODS = frozenset({"POST", "PUT"})


def _recipients(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [v.strip() for v in value if isinstance(v, str) and v.strip()]


class EmailNotificationActionHandler:
    """Renders a notification from the facts and hands it to the sender.

    Configuration keys: "to" (list or comma-separated), "subject", "body"
    (Jinja templates over the device/report facts).
    """

    def __init__(
        self,
        sender: INotificationSender,
        renderer: NotificationTemplateRenderer | None = None,
        *,
        default_recipients: list[str] | None = None,
    ) -> None:
        self._sender = sender
        self._renderer = renderer or NotificationTemplateRenderer()
        self._default_recipients = list(default_recipients or [])

    async def execute(
        self,
        device_id: str,
        facts: FactBundle,
        configuration: dict[str, Any],
    ) -> ActionResult:
        to = _recipients(configuration.get("to")) or self._default_recipients
        if not to:
            return ActionResult(success=False, message="No notification recipients configured")
        context = {**facts.as_template_context(), "config": configuration}
        subject, body = self._renderer.render(
            context,
            subject_template=configuration.get("subject"),
            body_template=configuration.get("body"),
        )
        try:
            await self._sender.send(to, subject, body)
        except Exception as e:
            raise ActionExecutionException("EmailNotification", str(e)) from e
        return ActionResult(
            success=True, message=f"Notification sent to {len(to)} recipient(s)"
        )


class WebhookActionHandler:
    """POSTs (or PUTs) the device/report facts as JSON to a configured URL.

    Configuration keys: "url" (required), "method", "headers", "payload"
    (extra JSON merged under "data").
    """

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = 10.0) -> None:
        self._client = client
        self._timeout = timeout

    async def execute(
        self,
        device_id: str,
        facts: FactBundle,
        configuration: dict[str, Any],
    ) -> ActionResult:
        url = configuration.get("url")
        if not isinstance(url, str) or not url.startswith(("http://", "https://")):
            return ActionResult(success=False, message="Webhook url must be an http(s) URL")
        method = str(configuration.get("method") or "POST").upper()
        if method not in _WEBHOOK_METHODS:
            return ActionResult(success=False, message=f"Unsupported webhook method: {method}")
        headers = configuration.get("headers") or {}
        if not isinstance(headers, dict):
            return ActionResult(success=False, message="Webhook headers must be an object")

        body = {
            "event": "secureboot.workflow_action",
            "sent_at": utc_now().isoformat(),
            "device": facts.as_template_context(),
            "data": configuration.get("payload"),
        }
        try:
            response = await self._client.request(
                method,
                url,
                json=body,
                headers={str(k): str(v) for k, v in headers.items()},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise ActionExecutionException("Webhook", f"{type(e).__name__}: {e}") from e
        if response.is_success:
            return ActionResult(
                success=True, message=f"Webhook delivered (HTTP {response.status_code})"
            )
        logger.info(
            "Webhook for device %s returned HTTP %s", device_id, response.status_code
        )
        return ActionResult(
            success=False, message=f"Webhook returned HTTP {response.status_code}"
        )


class UpdateDeviceTagsActionHandler:
    """Merges the configured key/values into the device's tags.

    Either the whole configuration or its "tags" object is merged.
    """

    def __init__(self, tag_store: IDeviceTagStore) -> None:
        self._tag_store = tag_store

    async def execute(
        self,
        device_id: str,
        facts: FactBundle,
        configuration: dict[str, Any],
    ) -> ActionResult:
        tags = configuration.get("tags")
        if not isinstance(tags, dict):
            tags = configuration
        if not tags:
            return ActionResult(success=False, message="No tags configured")
        merged = await self._tag_store.merge_tags(device_id, tags)
        return ActionResult(
            success=True,
            message=f"Updated {len(tags)} tag(s); device now has {len(merged)}",
        )


def build_action_handlers(
    *,
    tag_store: IDeviceTagStore,
    sender: INotificationSender,
    http_client: httpx.AsyncClient | None,
    default_recipients: list[str] | None = None,
    webhook_timeout: float = 10.0,
) -> dict[WorkflowActionType, IActionHandler]:
    """Handler registry for the dispatcher. Webhook is omitted without a client."""
    handlers: dict[WorkflowActionType, IActionHandler] = {
        WorkflowActionType.EMAIL_NOTIFICATION: EmailNotificationActionHandler(
            sender, default_recipients=default_recipients
        ),
        WorkflowActionType.UPDATE_DEVICE_TAGS: UpdateDeviceTagsActionHandler(tag_store),
    }
    if http_client is not None:
        handlers[WorkflowActionType.WEBHOOK] = WebhookActionHandler(
            http_client, timeout=webhook_timeout
        )
    return handlers
