"""Domain service that decides which expiry milestones are due."""

from __future__ import annotations

from datetime import datetime, timedelta

from ..entities import ensure_aware
from ..value_objects import DEFAULT_MILESTONE_SCHEDULE, Milestone, MilestoneSchedule


class MilestoneCalculator:
    """
    Pure milestone arithmetic over a fixed schedule.

    A milestone is due on the calendar day that lies ``offset_days`` before the
    expiry date. Days are compared in the timezone of ``now`` (naive values are
    taken as UTC), so the caller decides what "today" means.
    """

    def __init__(
        self,
        schedule: MilestoneSchedule = DEFAULT_MILESTONE_SCHEDULE,
        *,
        catch_up_days: int = 0,
    ) -> None:
        """
        Initialize the calculator.

        Args:
            schedule: Milestones to evaluate.
            catch_up_days: How many past days a missed milestone may still fire.
                Zero fires each milestone only on its exact day.
        """
        if catch_up_days < 0:
            msg = f"catch_up_days must be >= 0, got {catch_up_days}"
            raise ValueError(msg)
        self._schedule = schedule
        self._catch_up_days = catch_up_days

    @property
    def schedule(self) -> MilestoneSchedule:
        return self._schedule

    @property
    def catch_up_days(self) -> int:
        return self._catch_up_days

    def due_milestones(self, expiry_date: datetime, now: datetime) -> frozenset[Milestone]:
        """
        Milestones whose trigger day matches today.

        Args:
            expiry_date: When the item expires.
            now: Current time; its timezone defines the calendar day.

        Returns:
            Set of due milestones, empty when nothing fires today.
        """
        now = ensure_aware(now)
        today = now.date()
        expiry = self._in_zone_of(expiry_date, now)
        earliest = today - timedelta(days=self._catch_up_days)

        due: set[Milestone] = set()
        for milestone in self._schedule:
            trigger_day = (expiry - timedelta(days=milestone.offset_days)).date()
            if trigger_day == today:
                due.add(milestone)
            elif earliest <= trigger_day < today < expiry.date():
                # Missed inside the lookback window and the item is still live
                due.add(milestone)
        return frozenset(due)

    def next_notification_date(self, expiry_date: datetime, now: datetime) -> datetime | None:
        """Earliest trigger time strictly after today, or None if none remain."""
        now = ensure_aware(now)
        expiry = self._in_zone_of(expiry_date, now)
        upcoming = [
            trigger
            for trigger in (expiry - timedelta(days=m.offset_days) for m in self._schedule)
            if trigger.date() > now.date()
        ]
        return min(upcoming) if upcoming else None

    def days_until_expiry(self, expiry_date: datetime, now: datetime) -> int:
        """Whole calendar days from today to the expiry day."""
        now = ensure_aware(now)
        return (self._in_zone_of(expiry_date, now).date() - now.date()).days

    @staticmethod
    def _in_zone_of(expiry_date: datetime, now: datetime) -> datetime:
        return ensure_aware(expiry_date).astimezone(now.tzinfo)
