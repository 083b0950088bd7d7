"""Notification entity and its insert shape."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Self

from ..value_objects import ItemKind, NotificationType
from .trackable_item import ensure_aware

if TYPE_CHECKING:
    from .trackable_item import TrackableItem


def build_dedup_key(item_id: str, notification_type: NotificationType, expiry_date: datetime) -> str:
    """Key that identifies one milestone of one expiry of one item."""
    expiry_day = ensure_aware(expiry_date).astimezone(UTC).date().isoformat()
    return f"{item_id}:{notification_type.value}:{expiry_day}"


@dataclass(frozen=True, slots=True)
class NotificationDraft:
    """Fields supplied when recording a new notification."""

    type: ItemKind
    item_id: str
    item_name: str
    notification_type: NotificationType
    expiry_date: datetime

    @property
    def dedup_key(self) -> str:
        return build_dedup_key(self.item_id, self.notification_type, self.expiry_date)

    @classmethod
    def for_item(cls, item: TrackableItem, notification_type: NotificationType) -> Self:
        """Snapshot an item's name and expiry for a milestone."""
        return cls(
            type=item.kind,
            item_id=item.id,
            item_name=item.display_name,
            notification_type=notification_type,
            expiry_date=item.expiry_date,
        )


@dataclass(frozen=True, slots=True)
class Notification:
    """A recorded milestone reminder. Only ``is_read`` ever changes."""

    id: str
    type: ItemKind
    item_id: str
    item_name: str
    notification_type: NotificationType
    expiry_date: datetime
    is_read: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def dedup_key(self) -> str:
        return build_dedup_key(self.item_id, self.notification_type, self.expiry_date)

    def mark_read(self) -> Notification:
        """Return a copy flagged as read."""
        return replace(self, is_read=True)

    @classmethod
    def from_draft(cls, notification_id: str, draft: NotificationDraft) -> Self:
        return cls(
            id=notification_id,
            type=draft.type,
            item_id=draft.item_id,
            item_name=draft.item_name,
            notification_type=draft.notification_type,
            expiry_date=ensure_aware(draft.expiry_date),
        )
