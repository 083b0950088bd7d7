"""Tests for the composition root and run modes."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from expiry_notifier.application.use_cases import RunExpiryScan, ScanResult
from expiry_notifier.infrastructure.adapters import SqlItemStore, SqlNotificationLedger
from expiry_notifier.infrastructure.adapters.notifications import EmailAlertDispatcher, EmailConfig
from expiry_notifier.infrastructure.config import Settings
from expiry_notifier.main import Application, ApplicationContainer


def _result(items_failed: int = 0) -> ScanResult:
    return ScanResult(
        scanned_at=datetime.now(),  # noqa: DTZ005
        items_scanned=1,
        items_skipped=0,
        items_failed=items_failed,
        notifications_created=0,
        duplicates_skipped=0,
        alerts_sent=0,
        alerts_failed=0,
        dry_run=False,
    )


class FakeUseCase:
    def __init__(self, result: ScanResult | None = None) -> None:
        self.result = result or _result()
        self.calls: list[datetime] = []

    async def execute(self, now: datetime) -> ScanResult:
        self.calls.append(now)
        return self.result


class FakeContainer:
    def __init__(self, use_case: FakeUseCase | RunExpiryScan) -> None:
        self.use_case = use_case

    def create_scan_use_case(self) -> FakeUseCase | RunExpiryScan:
        return self.use_case


class TestApplication:
    """Tests for Application run modes."""

    @pytest.mark.asyncio
    async def test_run_once_success(self, clean_env) -> None:
        """A clean scan exits with 0 and scans in the configured zone."""
        use_case = FakeUseCase()
        settings = Settings(scan_timezone="Europe/Berlin")
        app = Application(settings, FakeContainer(use_case))  # type: ignore[arg-type]

        assert await app.run() == 0
        assert str(use_case.calls[0].tzinfo) == "Europe/Berlin"

    @pytest.mark.asyncio
    async def test_run_once_with_failed_items(self, clean_env) -> None:
        """Item failures give a non-zero exit code."""
        use_case = FakeUseCase(_result(items_failed=2))
        app = Application(Settings(), FakeContainer(use_case))  # type: ignore[arg-type]

        assert await app.run() == 1

    @pytest.mark.asyncio
    async def test_run_once_timeout_with_hung_smtp(
        self, clean_env, item_store, ledger, make_domain
    ) -> None:
        """A scan stuck in blocking SMTP calls is cut off at the timeout."""
        now = datetime.now(UTC)
        for name in ("a.com", "b.com", "c.com"):
            item_store.add(make_domain(name, now, 30))
        dispatcher = EmailAlertDispatcher(
            EmailConfig(
                enabled=True,
                server="smtp.example.com",
                from_address="alerts@example.com",
                to_addresses="ops@example.com",
            )
        )
        app = Application(
            Settings(scan_timeout_seconds=1),
            FakeContainer(RunExpiryScan(item_store, ledger, [dispatcher])),  # type: ignore[arg-type]
        )

        def hang(*args, **kwargs):
            time.sleep(1.5)
            raise OSError("connection timed out")

        with patch(
            "expiry_notifier.infrastructure.adapters.notifications.email.smtplib.SMTP",
            side_effect=hang,
        ):
            started = time.monotonic()
            result = await app.run_once()
            elapsed = time.monotonic() - started

        assert result is None
        assert elapsed < 1.4

    @pytest.mark.asyncio
    async def test_invalid_run_mode(self, clean_env) -> None:
        """Unknown run modes exit with 1."""
        app = Application(Settings(run_mode="weekly"), FakeContainer(FakeUseCase()))  # type: ignore[arg-type]

        assert await app.run() == 1


class TestApplicationContainer:
    """Tests for ApplicationContainer wiring."""

    def test_wires_sql_adapters(self, clean_env) -> None:
        """The container builds the scan over the SQL adapters."""
        container = ApplicationContainer(Settings(database_url="sqlite:///:memory:", dry_run=True))

        assert isinstance(container.create_item_store(), SqlItemStore)
        assert isinstance(container.create_notification_ledger(), SqlNotificationLedger)
        assert container.session_factory() is container.session_factory()
        assert isinstance(container.create_scan_use_case(), RunExpiryScan)

    def test_no_dispatchers_configured_by_default(self, clean_env) -> None:
        """Every channel is built but none reports configured without settings."""
        dispatchers = ApplicationContainer(Settings()).create_dispatchers()

        assert len(dispatchers) == 4
        assert not any(d.is_configured() for d in dispatchers)

    @pytest.mark.asyncio
    async def test_scan_against_empty_database(self, clean_env) -> None:
        """A scan over a fresh database succeeds with nothing to do."""
        settings = Settings(database_url="sqlite:///:memory:")

        result = await Application(settings).run_once()

        assert result is not None
        assert result.success is True
        assert result.items_scanned == 0
