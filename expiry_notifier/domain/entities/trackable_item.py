"""Trackable item entities: domains and SSL certificates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import ClassVar

from ..value_objects import ItemKind


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@dataclass(slots=True, kw_only=True)
class Registrar:
    """A domain registrar account."""

    id: str
    name: str
    login_url: str | None = None
    notes: str | None = None


@dataclass(slots=True, kw_only=True)
class TrackableItem(ABC):
    """Common shape of everything that expires and gets reminders."""

    kind: ClassVar[ItemKind]

    id: str
    expiry_date: datetime
    renewal_period_years: int = 1
    auto_renewal: bool = False
    is_completed: bool = False
    completed_at: datetime | None = None
    next_notification_date: datetime | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.expiry_date = ensure_aware(self.expiry_date)

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Name shown in notifications."""
        ...

    def mark_completed(self, at: datetime | None = None) -> None:
        """Mark the renewal as handled; the item stops receiving reminders."""
        self.is_completed = True
        self.completed_at = at or datetime.now(UTC)
        self.next_notification_date = None


@dataclass(slots=True, kw_only=True)
class Domain(TrackableItem):
    """A registered domain name."""

    kind: ClassVar[ItemKind] = ItemKind.DOMAIN

    name: str
    registrar_id: str
    registrar: Registrar | None = None

    @property
    def display_name(self) -> str:
        return self.name


@dataclass(slots=True, kw_only=True)
class SslCertificate(TrackableItem):
    """An SSL/TLS certificate issued for a domain."""

    kind: ClassVar[ItemKind] = ItemKind.SSL

    domain: str
    issuer: str

    @property
    def display_name(self) -> str:
        return self.domain
