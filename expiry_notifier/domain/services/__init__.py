"""Domain services - Stateless operations on domain objects."""

from .milestone_calculator import MilestoneCalculator

__all__ = ["MilestoneCalculator"]
