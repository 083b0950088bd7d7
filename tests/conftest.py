"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import httpx
import pytest

from expiry_notifier.application.exceptions import ConfigurationError
from expiry_notifier.domain.entities import (
    Domain,
    ExpiryAlert,
    Notification,
    NotificationDraft,
    Registrar,
    SslCertificate,
)
from expiry_notifier.domain.value_objects import NotificationType
from expiry_notifier.infrastructure.adapters.storage import (
    InMemoryItemStore,
    InMemoryNotificationLedger,
)


class RecordingDispatcher:
    """Dispatcher that keeps every alert it is given."""

    def __init__(self, *, configured: bool = True) -> None:
        self.alerts: list[ExpiryAlert] = []
        self._configured = configured

    def is_configured(self) -> bool:
        return self._configured

    async def send(self, alert: ExpiryAlert) -> None:
        self.alerts.append(alert)


class UnconfiguredDispatcher(RecordingDispatcher):
    """Dispatcher that reports ready but lacks credentials at send time."""

    async def send(self, alert: ExpiryAlert) -> None:
        raise ConfigurationError("Email not configured, skipping notification")


@pytest.fixture
def scan_time() -> datetime:
    """Fixed scan time used across tests."""
    return datetime(2024, 6, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def registrar() -> Registrar:
    """A registrar account."""
    return Registrar(id=str(uuid4()), name="Namecheap")


@pytest.fixture
def make_domain(registrar: Registrar):
    """Factory for domains expiring a number of days after a reference time."""

    def _make(name: str, now: datetime, days: int, **kwargs) -> Domain:
        return Domain(
            id=str(uuid4()),
            name=name,
            registrar_id=registrar.id,
            registrar=registrar,
            expiry_date=now + timedelta(days=days),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_certificate():
    """Factory for SSL certificates expiring a number of days after a reference time."""

    def _make(domain: str, now: datetime, days: int, **kwargs) -> SslCertificate:
        return SslCertificate(
            id=str(uuid4()),
            domain=domain,
            issuer="Let's Encrypt",
            expiry_date=now + timedelta(days=days),
            **kwargs,
        )

    return _make


@pytest.fixture
def item_store() -> InMemoryItemStore:
    """Empty in-memory item store."""
    return InMemoryItemStore()


@pytest.fixture
def ledger() -> InMemoryNotificationLedger:
    """Empty in-memory notification ledger."""
    return InMemoryNotificationLedger()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Configured dispatcher that records alerts."""
    return RecordingDispatcher()


@pytest.fixture
def failing_dispatcher() -> UnconfiguredDispatcher:
    """Dispatcher whose sends fail with ConfigurationError."""
    return UnconfiguredDispatcher()


@pytest.fixture
def disabled_dispatcher() -> RecordingDispatcher:
    """Dispatcher that reports itself as not configured."""
    return RecordingDispatcher(configured=False)


@pytest.fixture
def alert(make_domain, scan_time) -> ExpiryAlert:
    """Thirty-day reminder for example.com."""
    domain = make_domain("example.com", scan_time, 30)
    notification = Notification.from_draft(
        "notif-1", NotificationDraft.for_item(domain, NotificationType.THIRTY_DAYS)
    )
    return ExpiryAlert(notification=notification, days_until_expiry=30)


@pytest.fixture
def mock_http(monkeypatch):
    """Route httpx.AsyncClient through a MockTransport; returns the captured requests."""
    real_client = httpx.AsyncClient
    state = {"status": 200, "requests": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["requests"].append(request)
        return httpx.Response(state["status"], json={})

    def factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", factory)
    return state


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables so defaults apply."""
    for key in (
        "DATABASE_URL",
        "RUN_MODE",
        "CRON_SCHEDULE",
        "LOG_LEVEL",
        "DRY_RUN",
        "SCAN_TIMEZONE",
        "CATCH_UP_DAYS",
        "SKIP_COMPLETED",
        "SCAN_TIMEOUT_SECONDS",
        "SMTP_ENABLED",
        "SLACK_ENABLED",
        "WEBHOOK_ENABLED",
        "GRAPH_EMAIL_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
