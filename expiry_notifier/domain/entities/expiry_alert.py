"""Human-readable alert built from a recorded notification."""

from __future__ import annotations

from dataclasses import dataclass

from .notification import Notification

ALERT_SUBJECT = "Domain/SSL Expiry Reminder"


@dataclass(frozen=True, slots=True)
class ExpiryAlert:
    """What dispatchers deliver for one notification."""

    notification: Notification
    days_until_expiry: int

    @property
    def subject(self) -> str:
        return ALERT_SUBJECT

    @property
    def label(self) -> str:
        return self.notification.type.label

    @property
    def message(self) -> str:
        """Single-line reminder text."""
        days = self.days_until_expiry
        unit = "day" if days == 1 else "days"
        return (
            f'Reminder: {self.label} "{self.notification.item_name}" '
            f"will expire in {days} {unit}."
        )
