"""Infrastructure adapters - Implementations of application ports."""

from .notifications import (
    EmailAlertDispatcher,
    GraphEmailAlertDispatcher,
    SlackAlertDispatcher,
    WebhookAlertDispatcher,
)
from .storage import (
    InMemoryItemStore,
    InMemoryNotificationLedger,
    SqlItemStore,
    SqlNotificationLedger,
)

__all__ = [
    "EmailAlertDispatcher",
    "GraphEmailAlertDispatcher",
    "InMemoryItemStore",
    "InMemoryNotificationLedger",
    "SlackAlertDispatcher",
    "SqlItemStore",
    "SqlNotificationLedger",
    "WebhookAlertDispatcher",
]
