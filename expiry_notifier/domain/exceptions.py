"""Domain exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""


class ItemNotFoundError(DomainError):
    """Raised when a trackable item or notification is not found."""


class InvalidMilestoneScheduleError(DomainError):
    """Raised when a milestone schedule is invalid."""
