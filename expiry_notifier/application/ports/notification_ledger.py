"""Port for the notification ledger - driven/secondary port."""

from typing import Protocol

from ...domain.entities import Notification, NotificationDraft


class NotificationLedger(Protocol):
    """Port for persisting notifications and their read state."""

    async def create_notification(self, draft: NotificationDraft) -> Notification:
        """
        Record a new unread notification.

        Returns:
            The stored notification.

        Raises:
            DuplicateNotificationError: If the draft's dedup key is already recorded.
            StoreError: If the write fails.
        """
        ...

    async def has_notification(self, draft: NotificationDraft) -> bool:
        """Check whether the draft's dedup key is already recorded."""
        ...

    async def list_notifications(self) -> list[Notification]:
        """All notifications, newest first."""
        ...

    async def list_unread(self) -> list[Notification]:
        """Unread notifications, newest first."""
        ...

    async def mark_read(self, notification_id: str) -> Notification:
        """
        Flag a notification as read.

        Raises:
            ItemNotFoundError: If the notification does not exist.
        """
        ...

    async def delete(self, notification_id: str) -> None:
        """Delete a notification. Unknown ids are ignored."""
        ...
