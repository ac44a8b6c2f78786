"""SQLAlchemy ORM models."""

from distribution_engine.models.base import Base, PeriodMixin, TimestampMixin
from distribution_engine.models.distribution import Allocation, PayrollRecord
from distribution_engine.models.profile import Profile, Project

__all__ = [
    "Allocation",
    "Base",
    "PayrollRecord",
    "PeriodMixin",
    "Profile",
    "Project",
    "TimestampMixin",
]
