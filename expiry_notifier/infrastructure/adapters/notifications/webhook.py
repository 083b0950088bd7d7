"""Generic webhook alert dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import httpx

from ....application.exceptions import DeliveryError
from .base import BaseAlertDispatcher

if TYPE_CHECKING:
    from ....domain.entities import ExpiryAlert


@dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Webhook alert configuration."""

    enabled: bool = False
    url: str = ""


class WebhookAlertDispatcher(BaseAlertDispatcher):
    """Send alerts via generic HTTP webhook with JSON payload."""

    channel = "Webhook"

    def __init__(self, config: WebhookConfig) -> None:
        """Initialize the webhook dispatcher."""
        super().__init__()
        self._config = config

    def is_configured(self) -> bool:
        """Check if webhook is properly configured."""
        return self._config.enabled and bool(self._config.url)

    async def send(self, alert: ExpiryAlert) -> None:
        """Send webhook notification with JSON payload."""
        self._require_configured()

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.post(
                    self._config.url,
                    json=self._build_payload(alert),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            msg = f"Failed to send webhook notification: {e}"
            raise DeliveryError(msg) from e

        self._logger.info("Webhook notification sent to %s", self._config.url)

    def _build_payload(self, alert: ExpiryAlert) -> dict:
        """Build the JSON payload for the webhook."""
        notification = alert.notification
        return {
            "event_type": "expiry_reminder",
            "timestamp": datetime.now(UTC).isoformat(),
            "subject": alert.subject,
            "message": alert.message,
            "notification": {
                "id": notification.id,
                "type": notification.type.value,
                "item_id": notification.item_id,
                "item_name": notification.item_name,
                "notification_type": notification.notification_type.value,
                "expiry_date": notification.expiry_date.isoformat(),
                "days_until_expiry": alert.days_until_expiry,
                "created_at": notification.created_at.isoformat(),
            },
        }
