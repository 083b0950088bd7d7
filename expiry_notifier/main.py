#!/usr/bin/env python3
"""
Expiry Notifier

Composition root and application entry point.
Wires together all layers following hexagonal architecture principles.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from croniter import croniter

from . import __version__
from .application.use_cases import RunExpiryScan
from .domain.services import MilestoneCalculator
from .infrastructure.adapters import (
    EmailAlertDispatcher,
    GraphEmailAlertDispatcher,
    SlackAlertDispatcher,
    SqlItemStore,
    SqlNotificationLedger,
    WebhookAlertDispatcher,
)
from .infrastructure.adapters.storage import create_session_factory
from .infrastructure.config import Settings, load_settings

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

    from .application.ports import AlertDispatcher
    from .application.use_cases import ScanResult

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


class ApplicationContainer:
    """
    Dependency injection container.

    Responsible for creating and wiring all application components.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize container with settings."""
        self._settings = settings
        self._session_factory: sessionmaker[Session] | None = None

    def session_factory(self) -> sessionmaker[Session]:
        """Shared SQLAlchemy session factory; tables are created on first use."""
        if self._session_factory is None:
            self._session_factory = create_session_factory(
                self._settings.database_url, create_schema=True
            )
        return self._session_factory

    def create_item_store(self) -> SqlItemStore:
        """Create the item store adapter."""
        return SqlItemStore(self.session_factory())

    def create_notification_ledger(self) -> SqlNotificationLedger:
        """Create the notification ledger adapter."""
        return SqlNotificationLedger(self.session_factory())

    def create_dispatchers(self) -> list[AlertDispatcher]:
        """Create all alert dispatcher adapters."""
        dispatchers: list[AlertDispatcher] = [
            EmailAlertDispatcher(self._settings.email_config),
            GraphEmailAlertDispatcher(self._settings.graph_email_config),
            SlackAlertDispatcher(self._settings.slack_config),
            WebhookAlertDispatcher(self._settings.webhook_config),
        ]

        configured = [d for d in dispatchers if d.is_configured()]
        logger.info(
            "Configured alert dispatchers: %s",
            [d.__class__.__name__ for d in configured] or "None",
        )

        return dispatchers

    def create_calculator(self) -> MilestoneCalculator:
        """Create the milestone calculator with the default schedule."""
        return MilestoneCalculator(catch_up_days=self._settings.catch_up_days)

    def create_scan_use_case(self) -> RunExpiryScan:
        """Create the main use case with all dependencies."""
        return RunExpiryScan(
            item_store=self.create_item_store(),
            notification_ledger=self.create_notification_ledger(),
            dispatchers=self.create_dispatchers(),
            calculator=self.create_calculator(),
            skip_completed=self._settings.skip_completed,
            dry_run=self._settings.dry_run,
        )


class Application:
    """
    Main application orchestrator.

    Handles run modes (single execution or scheduled) and lifecycle.
    """

    def __init__(self, settings: Settings, container: ApplicationContainer | None = None) -> None:
        """Initialize application with settings."""
        self._settings = settings
        self._container = container or ApplicationContainer(settings)

    async def run_once(self) -> ScanResult | None:
        """
        Execute a single expiry scan.

        Returns:
            The scan result, or None if the scan timed out.
        """
        use_case = self._container.create_scan_use_case()
        now = datetime.now(self._settings.timezone)
        timeout = self._settings.scan_timeout_seconds or None

        try:
            return await asyncio.wait_for(use_case.execute(now), timeout=timeout)
        except TimeoutError:
            logger.error("Expiry scan timed out after %d seconds", self._settings.scan_timeout_seconds)
            return None

    async def run_scheduled(self) -> None:
        """Run in scheduled mode with cron expression."""
        logger.info("Starting scheduled mode with cron: %s", self._settings.cron_schedule)

        # Run immediately on startup
        logger.info("Running initial scan on startup...")
        await self._run_guarded()

        cron = croniter(self._settings.cron_schedule, datetime.now(UTC))

        while True:
            next_run = cron.get_next(datetime)
            now = datetime.now(UTC)

            # Handle timezone-naive datetime from croniter
            if next_run.tzinfo is None:
                next_run = next_run.replace(tzinfo=UTC)

            sleep_seconds = (next_run - now).total_seconds()

            if sleep_seconds > 0:
                logger.info("Next scan scheduled for %s", next_run.isoformat())
                await asyncio.sleep(sleep_seconds)

            logger.info("Running scheduled scan...")
            await self._run_guarded()

    async def _run_guarded(self) -> None:
        """Run one scan in scheduled mode; a failed scan must not stop the loop."""
        try:
            await self.run_once()
        except Exception:
            logger.exception("Scheduled scan failed")

    async def run(self) -> int:
        """
        Run the application based on configured mode.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        match self._settings.run_mode.lower():
            case "once":
                logger.info("Running in single-execution mode")
                result = await self.run_once()
                return 0 if result is not None and result.success else 1

            case "scheduled":
                await self.run_scheduled()
                return 0  # Never reached in scheduled mode

            case _:
                logger.error(
                    "Invalid RUN_MODE: %s (use 'once' or 'scheduled')",
                    self._settings.run_mode,
                )
                return 1


async def async_main() -> int:
    """Async entry point."""
    try:
        logger.info("Expiry Notifier %s starting...", __version__)

        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level.upper())

        app = Application(settings)
        return await app.run()

    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0
    except Exception:
        logger.exception("Unexpected error")
        return 1


def main() -> None:
    """Main entry point."""
    exit_code = asyncio.run(async_main())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
