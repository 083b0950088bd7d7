"""Application layer exceptions."""


class ApplicationError(Exception):
    """Base exception for application errors."""


class StoreError(ApplicationError):
    """Raised when the item store or notification ledger fails."""


class DuplicateNotificationError(StoreError):
    """Raised when a notification with the same dedup key already exists."""

    def __init__(self, dedup_key: str) -> None:
        super().__init__(f"Notification already recorded: {dedup_key}")
        self.dedup_key = dedup_key


class DispatchError(ApplicationError):
    """Base exception for alert delivery failures."""


class ConfigurationError(DispatchError):
    """Raised when an alert channel is missing required configuration."""


class DeliveryError(DispatchError):
    """Raised when an alert channel fails to deliver a message."""
