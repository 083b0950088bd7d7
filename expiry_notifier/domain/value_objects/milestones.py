"""Milestone schedule value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import InvalidMilestoneScheduleError
from .notification_type import NotificationType

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True, order=True)
class Milestone:
    """A reminder that fires a fixed number of days before expiry."""

    offset_days: int
    notification_type: NotificationType

    def __str__(self) -> str:
        return self.notification_type.value


@dataclass(frozen=True, slots=True)
class MilestoneSchedule:
    """Immutable table of milestones, ordered from furthest to nearest."""

    milestones: tuple[Milestone, ...]

    def __post_init__(self) -> None:
        """Validate offsets and labels, then sort by offset descending."""
        if not self.milestones:
            msg = "Milestone schedule must contain at least one milestone"
            raise InvalidMilestoneScheduleError(msg)

        offsets = [m.offset_days for m in self.milestones]
        if any(offset <= 0 for offset in offsets):
            msg = f"Milestone offsets must be positive: {offsets}"
            raise InvalidMilestoneScheduleError(msg)
        if len(set(offsets)) != len(offsets):
            msg = f"Milestone offsets must be unique: {offsets}"
            raise InvalidMilestoneScheduleError(msg)

        types = [m.notification_type for m in self.milestones]
        if len(set(types)) != len(types):
            msg = f"Milestone notification types must be unique: {[str(t) for t in types]}"
            raise InvalidMilestoneScheduleError(msg)

        ordered = tuple(sorted(self.milestones, key=lambda m: m.offset_days, reverse=True))
        object.__setattr__(self, "milestones", ordered)

    def __iter__(self) -> Iterator[Milestone]:
        return iter(self.milestones)

    def __len__(self) -> int:
        return len(self.milestones)

    @classmethod
    def from_mapping(cls, offsets: dict[int, NotificationType]) -> MilestoneSchedule:
        """Build a schedule from a ``{offset_days: notification_type}`` mapping."""
        return cls(tuple(Milestone(days, label) for days, label in offsets.items()))


DEFAULT_MILESTONE_SCHEDULE = MilestoneSchedule.from_mapping(
    {
        365: NotificationType.ONE_YEAR,
        180: NotificationType.SIX_MONTHS,
        30: NotificationType.THIRTY_DAYS,
        7: NotificationType.SEVEN_DAYS,
        1: NotificationType.ONE_DAY,
    }
)
