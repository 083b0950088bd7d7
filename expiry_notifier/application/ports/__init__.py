"""Application ports - Interfaces for external adapters."""

from .alert_dispatcher import AlertDispatcher
from .item_store import ItemStore
from .notification_ledger import NotificationLedger

__all__ = [
    "AlertDispatcher",
    "ItemStore",
    "NotificationLedger",
]
