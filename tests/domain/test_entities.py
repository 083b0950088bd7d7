"""Tests for trackable item, notification and alert entities."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from expiry_notifier.domain.entities import (
    Domain,
    ExpiryAlert,
    Notification,
    NotificationDraft,
    SslCertificate,
    TrackableItem,
)
from expiry_notifier.domain.value_objects import ItemKind, NotificationType


@pytest.fixture
def domain() -> Domain:
    return Domain(
        id="d-1",
        name="example.com",
        registrar_id="r-1",
        expiry_date=datetime(2025, 3, 1, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def certificate() -> SslCertificate:
    return SslCertificate(
        id="c-1",
        domain="shop.example.com",
        issuer="DigiCert",
        expiry_date=datetime(2025, 3, 1, tzinfo=UTC),
    )


class TestTrackableItem:
    """Tests for Domain and SslCertificate."""

    def test_kind_and_display_name(self, domain: Domain, certificate: SslCertificate) -> None:
        """Domains show their name, certificates their domain field."""
        assert domain.kind == ItemKind.DOMAIN
        assert domain.display_name == "example.com"
        assert certificate.kind == ItemKind.SSL
        assert certificate.display_name == "shop.example.com"

    def test_base_item_is_abstract(self) -> None:
        """Only concrete item kinds can be created."""
        with pytest.raises(TypeError):
            TrackableItem(id="x", expiry_date=datetime(2025, 1, 1, tzinfo=UTC))  # type: ignore[abstract]

    def test_naive_expiry_is_utc(self) -> None:
        """Naive expiry dates are stored as UTC."""
        cert = SslCertificate(
            id="c-2", domain="a.test", issuer="x", expiry_date=datetime(2025, 1, 1)  # noqa: DTZ001
        )
        assert cert.expiry_date.tzinfo is UTC

    def test_mark_completed(self, domain: Domain) -> None:
        """Completing stamps the time and clears the next reminder."""
        domain.next_notification_date = datetime(2025, 1, 30, tzinfo=UTC)
        done_at = datetime(2024, 12, 1, tzinfo=UTC)

        domain.mark_completed(done_at)

        assert domain.is_completed is True
        assert domain.completed_at == done_at
        assert domain.next_notification_date is None


class TestNotification:
    """Tests for NotificationDraft and Notification."""

    def test_draft_snapshots_item(self, domain: Domain) -> None:
        """Drafts copy the item's kind, id, name and expiry."""
        draft = NotificationDraft.for_item(domain, NotificationType.THIRTY_DAYS)
        assert draft.type == ItemKind.DOMAIN
        assert draft.item_id == "d-1"
        assert draft.item_name == "example.com"
        assert draft.expiry_date == domain.expiry_date

    def test_dedup_key_uses_expiry_day(self, domain: Domain) -> None:
        """The dedup key combines item, milestone and expiry day."""
        draft = NotificationDraft.for_item(domain, NotificationType.SEVEN_DAYS)
        assert draft.dedup_key == "d-1:7_days:2025-03-01"

    def test_renewed_expiry_changes_key(self, domain: Domain) -> None:
        """A new expiry date yields a new dedup key for the same milestone."""
        before = NotificationDraft.for_item(domain, NotificationType.SEVEN_DAYS).dedup_key
        domain.expiry_date = datetime(2026, 3, 1, tzinfo=UTC)
        after = NotificationDraft.for_item(domain, NotificationType.SEVEN_DAYS).dedup_key
        assert before != after

    def test_notification_is_immutable_except_read(self, domain: Domain) -> None:
        """Only the read flag changes, and it changes on a copy."""
        notification = Notification.from_draft(
            "n-1", NotificationDraft.for_item(domain, NotificationType.ONE_DAY)
        )
        with pytest.raises(AttributeError):
            notification.item_name = "renamed.com"  # type: ignore[misc]

        read = notification.mark_read()
        assert read.is_read is True
        assert notification.is_read is False
        assert read.dedup_key == notification.dedup_key


class TestExpiryAlert:
    """Tests for ExpiryAlert message rendering."""

    def test_domain_message(self, domain: Domain) -> None:
        """Domain reminders use the plural for several days."""
        notification = Notification.from_draft(
            "n-1", NotificationDraft.for_item(domain, NotificationType.THIRTY_DAYS)
        )
        alert = ExpiryAlert(notification=notification, days_until_expiry=30)
        assert alert.subject == "Domain/SSL Expiry Reminder"
        assert alert.message == 'Reminder: Domain "example.com" will expire in 30 days.'

    def test_certificate_message_singular(self, certificate: SslCertificate) -> None:
        """Certificate reminders use the SSL label and the singular for one day."""
        notification = Notification.from_draft(
            "n-2", NotificationDraft.for_item(certificate, NotificationType.ONE_DAY)
        )
        alert = ExpiryAlert(notification=notification, days_until_expiry=1)
        assert alert.message == 'Reminder: SSL certificate "shop.example.com" will expire in 1 day.'
