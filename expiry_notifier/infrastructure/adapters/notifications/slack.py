"""Slack alert dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from ....application.exceptions import DeliveryError
from ....domain.value_objects import NotificationType
from .base import BaseAlertDispatcher

if TYPE_CHECKING:
    from ....domain.entities import ExpiryAlert


@dataclass(frozen=True, slots=True)
class SlackConfig:
    """Slack alert configuration."""

    enabled: bool = False
    webhook_url: str = ""


class SlackAlertDispatcher(BaseAlertDispatcher):
    """Send alerts to Slack via incoming webhook."""

    channel = "Slack"

    URGENT_TYPES = frozenset({NotificationType.SEVEN_DAYS, NotificationType.ONE_DAY})

    def __init__(self, config: SlackConfig) -> None:
        """Initialize the Slack dispatcher."""
        super().__init__()
        self._config = config

    def is_configured(self) -> bool:
        """Check if Slack is properly configured."""
        return self._config.enabled and bool(self._config.webhook_url)

    async def send(self, alert: ExpiryAlert) -> None:
        """Send Slack message using Block Kit."""
        self._require_configured()

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(
                    self._config.webhook_url,
                    json=self._build_slack_message(alert),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            msg = f"Failed to send Slack notification: {e}"
            raise DeliveryError(msg) from e

        self._logger.info("Slack notification sent")

    def _build_slack_message(self, alert: ExpiryAlert) -> dict:
        """Build a Slack message using Block Kit."""
        urgent = alert.notification.notification_type in self.URGENT_TYPES
        emoji = "🔴" if urgent else "🟡"

        return {
            "text": alert.message,
            "blocks": [
                {
                    "type": "header",
                    "text": {"type": "plain_text", "text": f"{emoji} {alert.subject}", "emoji": True},
                },
                {
                    "type": "section",
                    "text": {"type": "mrkdwn", "text": f"*{alert.message}*"},
                },
                {
                    "type": "section",
                    "fields": [
                        {"type": "mrkdwn", "text": f"*{label}:*\n{value}"}
                        for label, value in self.format_details(alert)
                    ],
                },
                {
                    "type": "context",
                    "elements": [{"type": "mrkdwn", "text": "Expiry Notifier"}],
                },
            ],
        }
