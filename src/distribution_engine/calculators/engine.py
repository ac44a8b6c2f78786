"""Distribution calculation engine - main orchestrator."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Sequence
from uuid import UUID

from distribution_engine.calculators.aggregator import Aggregator
from distribution_engine.calculators.allocation_resolver import AllocationResolver
from distribution_engine.calculators.free_capacity import FreeCapacityCalculator
from distribution_engine.calculators.intervals import DateRange
from distribution_engine.calculators.proration import ProrationEngine
from distribution_engine.calculators.selection import DataSelectionPolicy
from distribution_engine.calculators.types import (
    AllocationData,
    CalculationFilters,
    CalculationResult,
    DataMode,
    FreeCapacityResult,
    PayrollRecordData,
    ProfileData,
    ProfileResult,
)
from distribution_engine.config import get_settings

logger = logging.getLogger(__name__)


class DistributionEngine:
    """Distributes payroll amounts across projects per month.

    Calculation pipeline (per profile, in caller order):
    1) Select the governing payroll record for each day (data mode)
    2) Prorate governed days across overlapping allocations per month
    3) Accumulate the unassigned remainder
    4) Fold shares into month buckets with leaf rounding
    5) Drop profiles without free capacity if requested
    6) Global totals as the sum of profile totals

    The engine holds no state between calls; all inputs are an immutable
    snapshot supplied by the caller.
    """

    def __init__(self, engine_version: str | None = None):
        self.engine_version = engine_version or get_settings().engine_version
        self.aggregator = Aggregator()
        self.free_capacity_calculator = FreeCapacityCalculator()

    def calculate(
        self,
        profiles: Sequence[ProfileData],
        payroll_records: Sequence[PayrollRecordData],
        allocations: Sequence[AllocationData],
        query_range: DateRange,
        data_mode: DataMode | str,
        filters: CalculationFilters | None = None,
    ) -> CalculationResult:
        """Calculate the distribution for every profile in ``profiles``."""
        mode = DataMode(data_mode)
        filters = filters or CalculationFilters()

        proration = ProrationEngine(AllocationResolver(allocations), DataSelectionPolicy(mode))

        records_by_profile: dict[UUID, list[PayrollRecordData]] = defaultdict(list)
        for record in payroll_records:
            records_by_profile[record.profile_id].append(record)

        results: list[ProfileResult] = []
        warnings: list[str] = []

        for profile in profiles:
            if filters.profile_ids is not None and profile.profile_id not in filters.profile_ids:
                continue

            output = proration.prorate_profile(
                profile.profile_id,
                records_by_profile.get(profile.profile_id, []),
                query_range.span,
                filters,
            )
            warnings.extend(output.warnings)
            results.append(
                self.aggregator.build_profile(profile, output.shares, output.unassigned)
            )
            logger.debug(
                "Profile %s: %d shares, %d unassigned segments",
                profile.profile_id,
                len(output.shares),
                len(output.unassigned),
            )

        if filters.only_with_free_capacity:
            results = [p for p in results if p.has_free_capacity]

        return CalculationResult(
            start=query_range.start,
            end=query_range.end,
            data_mode=mode,
            profiles=results,
            total=self.aggregator.build_totals(results),
            warnings=warnings,
            engine_version=self.engine_version,
        )

    def free_capacity(
        self,
        profile_id: UUID,
        payroll_records: Sequence[PayrollRecordData],
        allocations: Sequence[AllocationData],
        date_range: DateRange,
    ) -> FreeCapacityResult:
        """Minimum free percentage and free hours for one profile."""
        return self.free_capacity_calculator.calculate(
            profile_id, payroll_records, allocations, date_range
        )
