"""Notification templates for EmailNotification actions (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from secureboot.domain.exceptions import ActionExecutionException

# Context: device/report facts (FactBundle.as_template_context) plus "config"
# (the action configuration).
DEFAULT_SUBJECT = "SecureBoot remediation: {{ machine_name }} ({{ deployment_state or 'unknown state' }})"
DEFAULT_BODY = (
    "A remediation workflow matched device {{ machine_name }}.\n"
    "Device ID: {{ device_id }}\n"
    "Fleet: {{ fleet_id or 'N/A' }}\n"
    "Manufacturer: {{ manufacturer or 'N/A' }}\n"
    "Deployment state: {{ deployment_state or 'N/A' }}\n"
    "Days since last report: {{ days_since_last_seen }}\n"
    "{% if alerts %}Alerts:\n{% for alert in alerts %}  - {{ alert }}\n{% endfor %}{% endif %}"
    "{% if certificates.available %}Certificates: {{ certificates.expired }} expired, "
    "{{ certificates.expiring }} expiring within {{ certificates.lookahead_days }} days\n{% endif %}"
)


class NotificationTemplateRenderer:
    """Renders subject and body from (possibly user-supplied) Jinja templates.

    Templates come from workflow configuration, so they run in a sandbox and
    unknown variables raise instead of rendering empty.
    """

    def __init__(
        self,
        default_subject: str = DEFAULT_SUBJECT,
        default_body: str = DEFAULT_BODY,
    ) -> None:
        self._env = SandboxedEnvironment(autoescape=False, undefined=StrictUndefined)
        self._default_subject = default_subject
        self._default_body = default_body

    def render(
        self,
        context: dict[str, Any],
        *,
        subject_template: str | None = None,
        body_template: str | None = None,
    ) -> tuple[str, str]:
        """Render subject and body; falls back to the default templates.

        Raises:
            ActionExecutionException: A template is invalid or references an
                unknown variable.
        """
        ctx = dict(context)
        try:
            subject = self._env.from_string(subject_template or self._default_subject).render(ctx)
            body = self._env.from_string(body_template or self._default_body).render(ctx)
        except TemplateError as e:
            raise ActionExecutionException("EmailNotification", f"template error: {e}") from e
        return subject.strip(), body
