"""Infrastructure services: action handlers, notification sender and templates."""

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

__all__ = [
    "EmailNotificationActionHandler",
    "LogOnlyNotificationService",
    "NotificationTemplateRenderer",
    "UpdateDeviceTagsActionHandler",
    "WebhookActionHandler",
    "build_action_handlers",
]
