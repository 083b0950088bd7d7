"""Base alert dispatcher with common functionality."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ....application.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ....domain.entities import ExpiryAlert


class BaseAlertDispatcher(ABC):
    """Abstract base class for alert dispatchers."""

    channel: str = "alert"

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def send(self, alert: ExpiryAlert) -> None:
        """Deliver one alert."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if the dispatcher is properly configured."""
        ...

    def _require_configured(self) -> None:
        """Raise ConfigurationError unless the channel can send."""
        if not self.is_configured():
            msg = f"{self.channel} not configured, skipping notification"
            raise ConfigurationError(msg)

    @staticmethod
    def format_details(alert: ExpiryAlert) -> list[tuple[str, str]]:
        """Label/value pairs describing the expiring item."""
        notification = alert.notification
        return [
            ("Item", notification.item_name),
            ("Type", alert.label),
            ("Milestone", notification.notification_type.value.replace("_", " ")),
            ("Expires", notification.expiry_date.strftime("%Y-%m-%d")),
            ("Days left", str(alert.days_until_expiry)),
        ]

    @staticmethod
    def split_addresses(addresses: str) -> list[str]:
        """Split a comma-separated recipient list."""
        return [a.strip() for a in addresses.split(",") if a.strip()]
