"""Use case for scanning tracked items and recording due expiry reminders."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ...domain.entities import ExpiryAlert, Notification, NotificationDraft, TrackableItem
from ...domain.exceptions import ItemNotFoundError
from ...domain.services import MilestoneCalculator
from ..exceptions import ConfigurationError, DeliveryError, DuplicateNotificationError, StoreError
from ..ports import AlertDispatcher, ItemStore, NotificationLedger

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _ItemOutcome:
    """Counters for one item within a scan."""

    skipped: bool = False
    failed: bool = False
    created: int = 0
    duplicates: int = 0
    alerts_sent: int = 0
    alerts_failed: int = 0


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Result of one expiry scan."""

    scanned_at: datetime
    items_scanned: int
    items_skipped: int
    items_failed: int
    notifications_created: int
    duplicates_skipped: int
    alerts_sent: int
    alerts_failed: int
    dry_run: bool
    created: tuple[Notification, ...] = field(default=(), repr=False)

    @property
    def success(self) -> bool:
        """A scan succeeds when every item was processed; alert failures do not count."""
        return self.items_failed == 0


class RunExpiryScan:
    """
    Use case for one pass over all trackable items.

    For every active item the milestone calculator picks the reminders due
    today. Each reminder is written to the ledger first, then offered to every
    configured dispatcher. Ledger writes are keyed, so repeating the scan on
    the same day records nothing new.
    """

    def __init__(
        self,
        item_store: ItemStore,
        notification_ledger: NotificationLedger,
        dispatchers: list[AlertDispatcher],
        calculator: MilestoneCalculator | None = None,
        *,
        skip_completed: bool = True,
        dry_run: bool = False,
    ) -> None:
        """
        Initialize the use case.

        Args:
            item_store: Adapter for reading domains and certificates.
            notification_ledger: Adapter for recording notifications.
            dispatchers: Alert channels; unconfigured ones are dropped.
            calculator: Milestone calculator, default schedule if omitted.
            skip_completed: Ignore items already marked completed.
            dry_run: If True, log what would happen without writing or sending.
        """
        self._items = item_store
        self._ledger = notification_ledger
        self._dispatchers = [d for d in dispatchers if d.is_configured()]
        self._calculator = calculator or MilestoneCalculator()
        self._skip_completed = skip_completed
        self._dry_run = dry_run

    async def execute(self, now: datetime | None = None) -> ScanResult:
        """
        Execute the expiry scan.

        Args:
            now: Scan time; its timezone defines "today". Defaults to UTC now.

        Returns:
            ScanResult with per-scan counters.

        Raises:
            StoreError: If the item lists cannot be loaded.
        """
        now = now or datetime.now(UTC)
        logger.info("Starting expiry scan for %s", now.date().isoformat())

        domains = await self._items.list_active_domains()
        certificates = await self._items.list_active_ssl_certificates()
        items: list[TrackableItem] = [*domains, *certificates]
        logger.info("Loaded %d domains and %d SSL certificates", len(domains), len(certificates))

        if not self._dispatchers and not self._dry_run:
            logger.warning("No alert dispatchers configured; notifications are recorded only")

        created: list[Notification] = []
        outcomes = await asyncio.gather(*(self._process_item(item, now, created) for item in items))

        result = ScanResult(
            scanned_at=now,
            items_scanned=len(items),
            items_skipped=sum(o.skipped for o in outcomes),
            items_failed=sum(o.failed for o in outcomes),
            notifications_created=sum(o.created for o in outcomes),
            duplicates_skipped=sum(o.duplicates for o in outcomes),
            alerts_sent=sum(o.alerts_sent for o in outcomes),
            alerts_failed=sum(o.alerts_failed for o in outcomes),
            dry_run=self._dry_run,
            created=tuple(created),
        )
        logger.info(
            "Scan complete: %d items, %d notifications created, %d duplicates, "
            "%d alerts sent, %d alerts failed, %d items failed",
            result.items_scanned,
            result.notifications_created,
            result.duplicates_skipped,
            result.alerts_sent,
            result.alerts_failed,
            result.items_failed,
        )
        return result

    async def _process_item(
        self, item: TrackableItem, now: datetime, created: list[Notification]
    ) -> _ItemOutcome:
        """Handle one item; store failures are contained here."""
        outcome = _ItemOutcome()

        if self._skip_completed and item.is_completed:
            logger.debug("Skipping completed %s %s", item.kind, item.display_name)
            outcome.skipped = True
            return outcome

        try:
            milestones = sorted(
                self._calculator.due_milestones(item.expiry_date, now),
                key=lambda m: m.offset_days,
                reverse=True,
            )
            if not milestones:
                logger.debug("No milestone due for %s", item.display_name)

            for milestone in milestones:
                draft = NotificationDraft.for_item(item, milestone.notification_type)

                if self._dry_run:
                    if await self._ledger.has_notification(draft):
                        outcome.duplicates += 1
                    else:
                        outcome.created += 1
                        logger.info(
                            "DRY RUN: Would record %s reminder for %s %s",
                            milestone, item.kind.label, item.display_name,
                        )
                    continue

                try:
                    notification = await self._ledger.create_notification(draft)
                except DuplicateNotificationError:
                    outcome.duplicates += 1
                    logger.debug("Already recorded %s for %s", milestone, item.display_name)
                    continue

                outcome.created += 1
                created.append(notification)
                logger.info("Recorded %s reminder for %s %s", milestone, item.kind.label, item.display_name)

                alert = ExpiryAlert(
                    notification=notification,
                    days_until_expiry=self._calculator.days_until_expiry(item.expiry_date, now),
                )
                sent, failed = await self._dispatch(alert)
                outcome.alerts_sent += sent
                outcome.alerts_failed += failed

            if not self._dry_run:
                await self._refresh_next_notification_date(item, now)

        except (StoreError, ItemNotFoundError):
            outcome.failed = True
            logger.exception("Store error while processing %s %s", item.kind, item.id)

        return outcome

    async def _dispatch(self, alert: ExpiryAlert) -> tuple[int, int]:
        """Send an alert through all configured dispatchers."""
        sent = 0
        failed = 0

        for dispatcher in self._dispatchers:
            name = dispatcher.__class__.__name__
            try:
                await dispatcher.send(alert)
                sent += 1
                logger.info("Alert sent via %s", name)
            except ConfigurationError as e:
                failed += 1
                logger.warning("Alert skipped via %s: %s", name, e)
            except DeliveryError as e:
                failed += 1
                logger.error("Alert delivery failed via %s: %s", name, e)
            except Exception:
                failed += 1
                logger.exception("Error sending alert via %s", name)

        return sent, failed

    async def _refresh_next_notification_date(self, item: TrackableItem, now: datetime) -> None:
        next_date = self._calculator.next_notification_date(item.expiry_date, now)
        if next_date != item.next_notification_date:
            await self._items.set_next_notification_date(item.kind, item.id, next_date)
            item.next_notification_date = next_date
