"""Domain entities - Objects with identity and lifecycle."""

from .expiry_alert import ALERT_SUBJECT, ExpiryAlert
from .notification import Notification, NotificationDraft, build_dedup_key
from .trackable_item import Domain, Registrar, SslCertificate, TrackableItem, ensure_aware

__all__ = [
    "ALERT_SUBJECT",
    "Domain",
    "ExpiryAlert",
    "Notification",
    "NotificationDraft",
    "Registrar",
    "SslCertificate",
    "TrackableItem",
    "build_dedup_key",
    "ensure_aware",
]
