"""Notification type value object."""

from enum import StrEnum


class NotificationType(StrEnum):
    """Milestone label stored on a notification."""

    ONE_YEAR = "1_year"
    SIX_MONTHS = "6_months"
    THIRTY_DAYS = "30_days"
    SEVEN_DAYS = "7_days"
    ONE_DAY = "1_day"

    def __str__(self) -> str:
        return self.value
