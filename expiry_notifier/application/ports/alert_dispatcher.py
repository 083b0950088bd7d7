"""Port for alert delivery - driven/secondary port."""

from typing import Protocol

from ...domain.entities import ExpiryAlert


class AlertDispatcher(Protocol):
    """
    Port for delivering expiry alerts.

    Delivery is best effort: the scan records the notification before calling
    ``send`` and never retries.
    """

    async def send(self, alert: ExpiryAlert) -> None:
        """
        Deliver one alert message.

        Raises:
            ConfigurationError: If the channel is not configured.
            DeliveryError: If the transport fails.
        """
        ...

    def is_configured(self) -> bool:
        """
        Check if this dispatcher is properly configured.

        Returns:
            True if the dispatcher is ready to send alerts.
        """
        ...
