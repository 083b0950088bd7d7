"""Item store and notification ledger adapters."""

from .memory import InMemoryItemStore, InMemoryNotificationLedger
from .sql import SqlItemStore, SqlNotificationLedger, create_session_factory, init_schema

__all__ = [
    "InMemoryItemStore",
    "InMemoryNotificationLedger",
    "SqlItemStore",
    "SqlNotificationLedger",
    "create_session_factory",
    "init_schema",
]
