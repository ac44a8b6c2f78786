"""Write-time capacity check for new allocations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from distribution_engine.calculators.free_capacity import FreeCapacityCalculator
from distribution_engine.calculators.intervals import DateRange
from distribution_engine.calculators.types import HUNDRED, ZERO, AllocationData


class CapacityExceededError(Exception):
    """Raised when an allocation would push a profile above 100%."""

    def __init__(self, profile_id: UUID, percentage: Decimal, months: dict[str, Decimal]):
        self.profile_id = profile_id
        self.percentage = percentage
        self.months = months
        details = ", ".join(
            f"{month} (only {free.normalize():f}% free)" for month, free in months.items()
        )
        super().__init__(
            f"Cannot allocate {percentage.normalize():f}% to profile {profile_id}. "
            f"Months over capacity: {details}"
        )


@dataclass(frozen=True)
class ProposedAllocation:
    """An allocation not yet persisted."""

    profile_id: UUID
    percentage: Decimal
    period_start: date
    period_end: date

    def __post_init__(self) -> None:
        if not ZERO <= self.percentage <= HUNDRED:
            raise ValueError(f"percentage must be within 0..100, got {self.percentage}")


class AllocationCapacityGuard:
    """Rejects allocations that would exceed 100% on any day.

    The check is per day; the error reports the minimum free percentage
    of every affected month.
    """

    def __init__(self, calculator: FreeCapacityCalculator | None = None):
        self.calculator = calculator or FreeCapacityCalculator()

    def remaining(
        self,
        profile_id: UUID,
        existing: Sequence[AllocationData],
        period_start: date,
        period_end: date,
    ) -> dict[str, Decimal]:
        """Minimum free percentage per month over the period."""
        return self.calculator.monthly_free_percentage(
            profile_id, existing, DateRange(period_start, period_end)
        )

    def check(self, existing: Sequence[AllocationData], proposed: ProposedAllocation) -> None:
        """Raise CapacityExceededError if ``proposed`` does not fit."""
        free_by_month = self.remaining(
            proposed.profile_id, existing, proposed.period_start, proposed.period_end
        )
        short = {
            month: free
            for month, free in free_by_month.items()
            if free < proposed.percentage
        }
        if short:
            raise CapacityExceededError(proposed.profile_id, proposed.percentage, short)
