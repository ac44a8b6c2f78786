"""Allocation lookup by profile and time window."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable
from uuid import UUID

from distribution_engine.calculators.intervals import overlaps
from distribution_engine.calculators.types import AllocationData, CalculationFilters


class AllocationResolver:
    """Resolves the allocations active for a profile in a window.

    Filter matching:
    - project_ids: allocation's project
    - contract_statuses: allocation's contract status
    - companies: the payroll record's company (passed by the caller),
      not a property of the allocation

    Result order follows the input order; callers impose their own
    ordering for output.
    """

    def __init__(self, allocations: Iterable[AllocationData]):
        self._by_profile: dict[UUID, list[AllocationData]] = defaultdict(list)
        for allocation in allocations:
            self._by_profile[allocation.profile_id].append(allocation)

    def resolve(
        self,
        profile_id: UUID,
        window_start: date,
        window_end: date,
        filters: CalculationFilters | None = None,
        company: str | None = None,
    ) -> list[AllocationData]:
        """Return the profile's allocations overlapping [window_start, window_end]."""
        if filters is not None and filters.companies is not None:
            if company is None or company not in filters.companies:
                return []

        active: list[AllocationData] = []
        for allocation in self._by_profile.get(profile_id, ()):
            if not overlaps(
                allocation.period_start, allocation.period_end, window_start, window_end
            ):
                continue
            if filters is not None and not self._matches(allocation, filters):
                continue
            active.append(allocation)
        return active

    @staticmethod
    def _matches(allocation: AllocationData, filters: CalculationFilters) -> bool:
        if (
            filters.project_ids is not None
            and allocation.project.project_id not in filters.project_ids
        ):
            return False
        if (
            filters.contract_statuses is not None
            and allocation.contract_status not in filters.contract_statuses
        ):
            return False
        return True
