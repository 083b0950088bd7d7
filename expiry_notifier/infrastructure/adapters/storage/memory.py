"""In-memory item store and notification ledger."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from uuid import uuid4

from ....application.exceptions import DuplicateNotificationError
from ....domain.entities import Domain, Notification, NotificationDraft, SslCertificate, TrackableItem
from ....domain.exceptions import ItemNotFoundError
from ....domain.value_objects import ItemKind

logger = logging.getLogger(__name__)


class InMemoryItemStore:
    """
    Item store kept in process memory.

    Implements the ItemStore port. Items handed out are copies, so callers
    cannot change stored state without going through the store.
    """

    def __init__(self) -> None:
        self._items: dict[ItemKind, dict[str, TrackableItem]] = {kind: {} for kind in ItemKind}

    def add(self, item: TrackableItem) -> TrackableItem:
        """Insert or replace an item."""
        self._items[item.kind][item.id] = replace(item)
        return item

    def get(self, kind: ItemKind, item_id: str) -> TrackableItem:
        try:
            return replace(self._items[kind][item_id])
        except KeyError:
            msg = f"{kind.label} {item_id} not found"
            raise ItemNotFoundError(msg) from None

    async def list_active_domains(self) -> list[Domain]:
        return [replace(i) for i in self._items[ItemKind.DOMAIN].values() if not i.is_completed]  # type: ignore[misc]

    async def list_active_ssl_certificates(self) -> list[SslCertificate]:
        return [replace(i) for i in self._items[ItemKind.SSL].values() if not i.is_completed]  # type: ignore[misc]

    async def set_next_notification_date(
        self, kind: ItemKind, item_id: str, when: datetime | None
    ) -> None:
        item = self._stored(kind, item_id)
        item.next_notification_date = when

    async def mark_completed(self, kind: ItemKind, item_id: str) -> TrackableItem:
        item = self._stored(kind, item_id)
        item.mark_completed()
        logger.info("Marked %s %s completed", kind.label, item.display_name)
        return replace(item)

    def _stored(self, kind: ItemKind, item_id: str) -> TrackableItem:
        item = self._items[kind].get(item_id)
        if item is None:
            msg = f"{kind.label} {item_id} not found"
            raise ItemNotFoundError(msg)
        return item


class InMemoryNotificationLedger:
    """Notification ledger kept in process memory, unique per dedup key."""

    def __init__(self) -> None:
        self._notifications: dict[str, Notification] = {}
        self._by_key: dict[str, str] = {}

    async def create_notification(self, draft: NotificationDraft) -> Notification:
        key = draft.dedup_key
        if key in self._by_key:
            raise DuplicateNotificationError(key)

        notification = Notification.from_draft(str(uuid4()), draft)
        self._notifications[notification.id] = notification
        self._by_key[key] = notification.id
        return notification

    async def has_notification(self, draft: NotificationDraft) -> bool:
        return draft.dedup_key in self._by_key

    async def list_notifications(self) -> list[Notification]:
        return sorted(self._notifications.values(), key=_created_at, reverse=True)

    async def list_unread(self) -> list[Notification]:
        return [n for n in await self.list_notifications() if not n.is_read]

    async def mark_read(self, notification_id: str) -> Notification:
        notification = self._notifications.get(notification_id)
        if notification is None:
            msg = f"Notification {notification_id} not found"
            raise ItemNotFoundError(msg)
        notification = notification.mark_read()
        self._notifications[notification_id] = notification
        return notification

    async def delete(self, notification_id: str) -> None:
        notification = self._notifications.pop(notification_id, None)
        if notification is not None:
            self._by_key.pop(notification.dedup_key, None)


def _created_at(notification: Notification) -> datetime:
    return notification.created_at.astimezone(UTC)
