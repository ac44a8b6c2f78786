"""Proration of payroll records across allocations and calendar months."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID

from distribution_engine.calculators.allocation_resolver import AllocationResolver
from distribution_engine.calculators.intervals import (
    DateSpan,
    intersect,
    iter_days,
    month_key,
    month_spans,
)
from distribution_engine.calculators.selection import DataSelectionPolicy
from distribution_engine.calculators.types import (
    HUNDRED,
    ZERO,
    AllocationData,
    Amounts,
    CalculationFilters,
    PayrollRecordData,
    ProratedShare,
    ProrationOutput,
    UnassignedShare,
)

logger = logging.getLogger(__name__)


def occupied_percentage(day: date, allocations: Sequence[AllocationData]) -> Decimal:
    """Sum of the percentages of allocations active on ``day``."""
    total = ZERO
    for allocation in allocations:
        if allocation.period_start <= day <= allocation.period_end:
            total += allocation.percentage
    return total


class ProrationEngine:
    """Splits each governing payroll record across allocations per month.

    For a record clipped to the query range (``record_days`` days) and an
    allocation overlapping a month sub-span by ``overlap_days``:

        share = amount * overlap_days / record_days * percentage / 100

    The unassigned remainder of a month sub-span is the day-weighted
    percentage deficit max(0, 100 - sum of active percentages) applied to
    the same per-day rate, so assigned + unassigned equals the record's
    amounts whenever no day is over-allocated.

    Unassigned amounts always use every allocation of the profile; filters
    only narrow which project shares are emitted.

    No rounding happens here.
    """

    def __init__(self, resolver: AllocationResolver, policy: DataSelectionPolicy):
        self.resolver = resolver
        self.policy = policy

    def prorate_profile(
        self,
        profile_id: UUID,
        records: Sequence[PayrollRecordData],
        query: DateSpan,
        filters: CalculationFilters | None = None,
    ) -> ProrationOutput:
        """Prorate every record of one profile over ``query``."""
        output = ProrationOutput()
        profile_records = [r for r in records if r.profile_id == profile_id]

        selection = self.policy.governed_spans(profile_records, query)
        output.warnings.extend(selection.warnings)

        over_allocated: dict[date, Decimal] = {}
        for governed in selection.spans:
            self._prorate_span(
                profile_id,
                governed.record,
                governed.span,
                query,
                filters,
                output,
                over_allocated,
            )

        output.warnings.extend(over_allocation_warnings(profile_id, over_allocated))
        return output

    def _prorate_span(
        self,
        profile_id: UUID,
        record: PayrollRecordData,
        governed: DateSpan,
        query: DateSpan,
        filters: CalculationFilters | None,
        output: ProrationOutput,
        over_allocated: dict[date, Decimal],
    ) -> None:
        # 1) Clip the record to the query range
        clipped = intersect(record.period_start, record.period_end, query.start, query.end)
        if clipped is None:
            return

        # 2) Rates are derived from the clipped span
        record_days = clipped.days
        if record_days <= 0:
            return
        base = Amounts(
            wage=record.wage,
            contribution=record.employer_contribution,
            hours=record.hours,
        )
        divisor = Decimal(record_days)

        span = intersect(governed.start, governed.end, clipped.start, clipped.end)
        if span is None:
            return

        # 3) Walk the governed days month by month
        for month in month_spans(span.start, span.end):
            key = month_key(month.start)
            every_active = self.resolver.resolve(profile_id, month.start, month.end)
            if filters is None:
                shown = every_active
            else:
                shown = self.resolver.resolve(
                    profile_id, month.start, month.end, filters, company=record.company
                )

            # 4) Assigned shares
            for allocation in shown:
                overlap = intersect(
                    allocation.period_start, allocation.period_end, month.start, month.end
                )
                if overlap is None:
                    continue
                factor = Decimal(overlap.days) / divisor * (allocation.percentage / HUNDRED)
                output.shares.append(
                    ProratedShare(
                        profile_id=profile_id,
                        month=key,
                        project=allocation.project,
                        company=record.company,
                        contract_status=allocation.contract_status,
                        amounts=base.scaled(factor),
                    )
                )

            # 5) Unassigned remainder from the full allocation picture
            deficit_days = ZERO
            for day in iter_days(month.start, month.end):
                occupied = occupied_percentage(day, every_active)
                if occupied > HUNDRED:
                    over_allocated[day] = max(occupied, over_allocated.get(day, ZERO))
                    continue
                deficit_days += (HUNDRED - occupied) / HUNDRED

            if deficit_days > 0:
                output.unassigned.append(
                    UnassignedShare(
                        profile_id=profile_id,
                        month=key,
                        amounts=base.scaled(deficit_days / divisor),
                    )
                )


def over_allocation_warnings(
    profile_id: UUID, over_allocated: dict[date, Decimal]
) -> list[str]:
    """One warning per month containing over-allocated days."""
    by_month: dict[str, list[date]] = defaultdict(list)
    for day in sorted(over_allocated):
        by_month[month_key(day)].append(day)

    warnings: list[str] = []
    for key, days in by_month.items():
        peak = max(over_allocated[d] for d in days)
        message = (
            f"Profile {profile_id}: allocations exceed 100% on {len(days)} day(s) "
            f"in {key} (peak {peak.normalize():f}%); unassigned clamped to zero"
        )
        logger.warning(message)
        warnings.append(message)
    return warnings
