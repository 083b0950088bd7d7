"""Domain value objects - Immutable objects defined by their attributes."""

from .item_kind import ItemKind
from .milestones import DEFAULT_MILESTONE_SCHEDULE, Milestone, MilestoneSchedule
from .notification_type import NotificationType

__all__ = [
    "DEFAULT_MILESTONE_SCHEDULE",
    "ItemKind",
    "Milestone",
    "MilestoneSchedule",
    "NotificationType",
]
