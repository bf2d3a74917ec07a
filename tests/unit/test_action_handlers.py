"""Tests for side-effecting action handlers (email, webhook, device tags)."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from secureboot.domain.entities.facts import CertificateFacts
from secureboot.domain.enums import WorkflowActionType
from secureboot.domain.exceptions import ActionExecutionException
from secureboot.infrastructure.services.action_handlers import (
    EmailNotificationActionHandler,
    UpdateDeviceTagsActionHandler,
    WebhookActionHandler,
    build_action_handlers,
)
from secureboot.infrastructure.services.notification_service import (
    LogOnlyNotificationService,
)
from secureboot.infrastructure.services.notification_template_renderer import (
    NotificationTemplateRenderer,
)


# ---- Email ----


async def test_email_renders_templates_and_sends(make_facts) -> None:
    sender = AsyncMock()
    handler = EmailNotificationActionHandler(sender)
    result = await handler.execute(
        "device-1",
        make_facts(),
        {
            "to": "ops@example.com, secops@example.com",
            "subject": "{{ machine_name }} is {{ deployment_state }}",
            "body": "Fleet {{ fleet_id }} / {{ config.ticket }}",
            "ticket": "INC-7",
        },
    )
    assert result.success is True
    assert result.message == "Notification sent to 2 recipient(s)"
    sender.send.assert_awaited_once_with(
        ["ops@example.com", "secops@example.com"],
        "PC-001 is Error",
        "Fleet test-fleet / INC-7",
    )


async def test_email_falls_back_to_default_recipients(make_facts) -> None:
    sender = AsyncMock()
    handler = EmailNotificationActionHandler(sender, default_recipients=["it@example.com"])
    result = await handler.execute("device-1", make_facts(), {})
    assert result.success is True
    args = sender.send.await_args.args
    assert args[0] == ["it@example.com"]
    assert "PC-001" in args[1]


async def test_email_without_recipients_fails(make_facts) -> None:
    sender = AsyncMock()
    result = await EmailNotificationActionHandler(sender).execute("device-1", make_facts(), {})
    assert result.success is False
    sender.send.assert_not_called()


async def test_email_sender_error_raises_action_execution(make_facts) -> None:
    sender = AsyncMock()
    sender.send.side_effect = ConnectionError("relay unreachable")
    handler = EmailNotificationActionHandler(sender)
    with pytest.raises(ActionExecutionException) as exc_info:
        await handler.execute("device-1", make_facts(), {"to": ["a@example.com"]})
    assert exc_info.value.error_code == "ACTION_EXECUTION_ERROR"


async def test_email_with_log_only_sender(make_facts) -> None:
    handler = EmailNotificationActionHandler(LogOnlyNotificationService("noreply@example.com"))
    result = await handler.execute("device-1", make_facts(), {"to": ["a@example.com"]})
    assert result.success is True


def test_renderer_default_body_mentions_certificates(make_facts) -> None:
    facts = make_facts(
        alerts=("DBX update pending",),
        certificates=CertificateFacts(available=True, total=4, expired_count=1, expiring_count=2),
    )
    subject, body = NotificationTemplateRenderer().render(facts.as_template_context())
    assert subject == "SecureBoot remediation: PC-001 (Error)"
    assert "DBX update pending" in body
    assert "1 expired" in body


def test_renderer_unknown_variable_raises(make_facts) -> None:
    renderer = NotificationTemplateRenderer()
    with pytest.raises(ActionExecutionException):
        renderer.render(make_facts().as_template_context(), subject_template="{{ nope }}")


# ---- Webhook ----


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def test_webhook_posts_facts(make_facts) -> None:
    seen: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(202)

    async with _client(respond) as client:
        result = await WebhookActionHandler(client).execute(
            "device-1",
            make_facts(),
            {
                "url": "https://hooks.example/secureboot",
                "headers": {"X-Token": "abc"},
                "payload": {"severity": "high"},
            },
        )
    assert result.success is True
    assert result.message == "Webhook delivered (HTTP 202)"
    (request,) = seen
    assert request.method == "POST"
    assert request.headers["X-Token"] == "abc"
    body = json.loads(request.content)
    assert body["device"]["machine_name"] == "PC-001"
    assert body["data"] == {"severity": "high"}


async def test_webhook_put_method(make_facts) -> None:
    methods: list[str] = []

    def respond(request: httpx.Request) -> httpx.Response:
        methods.append(request.method)
        return httpx.Response(200)

    async with _client(respond) as client:
        await WebhookActionHandler(client).execute(
            "device-1", make_facts(), {"url": "https://hooks.example", "method": "put"}
        )
    assert methods == ["PUT"]


async def test_webhook_non_2xx_is_failure(make_facts) -> None:
    async with _client(lambda request: httpx.Response(500)) as client:
        result = await WebhookActionHandler(client).execute(
            "device-1", make_facts(), {"url": "https://hooks.example"}
        )
    assert result.success is False
    assert result.message == "Webhook returned HTTP 500"


async def test_webhook_transport_error_raises(make_facts) -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(fail) as client:
        with pytest.raises(ActionExecutionException):
            await WebhookActionHandler(client).execute(
                "device-1", make_facts(), {"url": "https://hooks.example"}
            )


@pytest.mark.parametrize(
    "config",
    [
        {},
        {"url": "ftp://hooks.example"},
        {"url": "https://hooks.example", "method": "DELETE"},
        {"url": "https://hooks.example", "headers": ["bad"]},
    ],
)
async def test_webhook_invalid_configuration_fails(make_facts, config) -> None:
    called: list[httpx.Request] = []

    def respond(request: httpx.Request) -> httpx.Response:
        called.append(request)
        return httpx.Response(200)

    async with _client(respond) as client:
        result = await WebhookActionHandler(client).execute("device-1", make_facts(), config)
    assert result.success is False
    assert called == []


# ---- Device tags ----


async def test_update_tags_merges_configuration(make_facts) -> None:
    store = AsyncMock()
    store.merge_tags.return_value = {"owner": "it", "remediation": "pending"}
    result = await UpdateDeviceTagsActionHandler(store).execute(
        "device-1", make_facts(), {"remediation": "pending"}
    )
    assert result.success is True
    store.merge_tags.assert_awaited_once_with("device-1", {"remediation": "pending"})


async def test_update_tags_uses_tags_object_when_present(make_facts) -> None:
    store = AsyncMock()
    store.merge_tags.return_value = {"a": "1"}
    await UpdateDeviceTagsActionHandler(store).execute(
        "device-1", make_facts(), {"tags": {"a": "1"}}
    )
    store.merge_tags.assert_awaited_once_with("device-1", {"a": "1"})


async def test_update_tags_empty_configuration_fails(make_facts) -> None:
    store = AsyncMock()
    result = await UpdateDeviceTagsActionHandler(store).execute("device-1", make_facts(), {})
    assert result.success is False
    store.merge_tags.assert_not_called()


# ---- Registry ----


async def test_build_action_handlers_registry() -> None:
    async with httpx.AsyncClient() as client:
        handlers = build_action_handlers(
            tag_store=AsyncMock(), sender=AsyncMock(), http_client=client
        )
    assert set(handlers) == {
        WorkflowActionType.EMAIL_NOTIFICATION,
        WorkflowActionType.WEBHOOK,
        WorkflowActionType.UPDATE_DEVICE_TAGS,
    }


def test_build_action_handlers_without_http_client_omits_webhook() -> None:
    handlers = build_action_handlers(tag_store=AsyncMock(), sender=AsyncMock(), http_client=None)
    assert WorkflowActionType.WEBHOOK not in handlers
