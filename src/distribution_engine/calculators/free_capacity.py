"""Free capacity of a profile over a date range."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from distribution_engine.calculators.aggregator import Aggregator
from distribution_engine.calculators.intervals import (
    DateRange,
    days_between,
    iter_days,
    month_key,
    overlaps,
)
from distribution_engine.calculators.proration import (
    occupied_percentage,
    over_allocation_warnings,
)
from distribution_engine.calculators.selection import DataSelectionPolicy
from distribution_engine.calculators.types import (
    HUNDRED,
    ZERO,
    AllocationData,
    DataMode,
    FreeCapacityResult,
    FreeRange,
    PayrollRecordData,
)


def free_percentage(occupied: Decimal) -> Decimal:
    """Free share of a day, never negative."""
    return max(ZERO, HUNDRED - occupied)


class FreeCapacityCalculator:
    """Minimum free percentage and free hours for one profile.

    The percentage figure depends on allocations only and is evaluated
    for every day in the range. Free hours need an hourly basis, so days
    without a governing payroll record (blended, per day) contribute
    no hours.
    """

    def __init__(self) -> None:
        self.policy = DataSelectionPolicy(DataMode.BLENDED)

    def calculate(
        self,
        profile_id: UUID,
        payroll_records: Sequence[PayrollRecordData],
        allocations: Sequence[AllocationData],
        date_range: DateRange,
    ) -> FreeCapacityResult:
        active = self._profile_allocations(profile_id, allocations, date_range)
        records = [
            r for r in payroll_records
            if r.profile_id == profile_id
            and overlaps(r.period_start, r.period_end, date_range.start, date_range.end)
        ]

        minimum = HUNDRED
        free_hours = ZERO
        ranges: list[FreeRange] = []
        over_allocated: dict[date, Decimal] = {}

        for day in iter_days(date_range.start, date_range.end):
            occupied = occupied_percentage(day, active)
            if occupied > HUNDRED:
                over_allocated[day] = occupied
            free = free_percentage(occupied)
            minimum = min(minimum, free)

            record = self.policy.governing_record(day, records)
            if record is not None:
                record_days = days_between(record.period_start, record.period_end)
                if record_days > 0:
                    free_hours += free / HUNDRED * record.hours / Decimal(record_days)

            if ranges and ranges[-1].percentage == free:
                last = ranges[-1]
                ranges[-1] = FreeRange(last.percentage, last.start, day)
            else:
                ranges.append(FreeRange(free, day, day))

        return FreeCapacityResult(
            profile_id=profile_id,
            minimum_free_percentage=minimum,
            total_free_hours=Aggregator.round_to_cents(free_hours),
            free_ranges=ranges,
            warnings=over_allocation_warnings(profile_id, over_allocated),
        )

    def monthly_free_percentage(
        self,
        profile_id: UUID,
        allocations: Sequence[AllocationData],
        date_range: DateRange,
    ) -> dict[str, Decimal]:
        """Minimum daily free percentage per calendar month."""
        active = self._profile_allocations(profile_id, allocations, date_range)
        result: dict[str, Decimal] = {}
        for day in iter_days(date_range.start, date_range.end):
            key = month_key(day)
            free = free_percentage(occupied_percentage(day, active))
            result[key] = min(free, result.get(key, HUNDRED))
        return result

    @staticmethod
    def _profile_allocations(
        profile_id: UUID,
        allocations: Sequence[AllocationData],
        date_range: DateRange,
    ) -> list[AllocationData]:
        return [
            a for a in allocations
            if a.profile_id == profile_id
            and overlaps(a.period_start, a.period_end, date_range.start, date_range.end)
        ]
