"""Distribution service: loads snapshots and runs the engine."""

from __future__ import annotations

import logging
from uuid import UUID

from distribution_engine.api.schemas import (
    AllocationCreate,
    AllocationCreatedResponse,
    CalculationQuery,
    FreeCapacityQuery,
)
from distribution_engine.calculators.engine import DistributionEngine
from distribution_engine.calculators.intervals import DateRange
from distribution_engine.calculators.types import (
    CalculationFilters,
    CalculationResult,
    FreeCapacityResult,
)
from distribution_engine.config import Settings, get_settings
from distribution_engine.services.allocation_guard import (
    AllocationCapacityGuard,
    ProposedAllocation,
)
from distribution_engine.services.repository import DistributionStore

logger = logging.getLogger(__name__)


class QueryRangeTooLargeError(Exception):
    """Raised when a query range exceeds the configured maximum."""

    def __init__(self, days: int, max_days: int):
        self.days = days
        self.max_days = max_days
        super().__init__(f"Query range of {days} days exceeds the maximum of {max_days}")


class ProfileNotFoundError(Exception):
    """Raised when a profile id does not exist."""

    def __init__(self, profile_id: UUID):
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id} not found")


class ProjectNotFoundError(Exception):
    """Raised when a project id does not exist."""

    def __init__(self, project_id: UUID):
        self.project_id = project_id
        super().__init__(f"Project {project_id} not found")


class DistributionService:
    """Entry points used by the presentation layer.

    The snapshot for one call is read with independent queries. A writer
    committing between them can make the records and allocations of a
    single result slightly inconsistent; callers needing a consistent
    view must run the service inside a repeatable-read transaction.
    """

    def __init__(
        self,
        store: DistributionStore,
        engine: DistributionEngine | None = None,
        settings: Settings | None = None,
        guard: AllocationCapacityGuard | None = None,
    ):
        self.store = store
        self.settings = settings or get_settings()
        self.engine = engine or DistributionEngine(self.settings.engine_version)
        self.guard = guard or AllocationCapacityGuard(self.engine.free_capacity_calculator)

    async def calculate(self, query: CalculationQuery) -> CalculationResult:
        """Calculate the distribution described by ``query``.

        Profile and project filters are given by name; unknown names match
        nothing. Allocations are loaded unfiltered because unassigned
        amounts always reflect every allocation of a profile.
        """
        date_range = query.date_range
        self._check_range(date_range)

        if query.profiles is not None:
            profiles = await self.store.find_profiles_by_names(query.profiles)
        else:
            profiles = await self.store.list_profiles()

        project_ids = None
        if query.projects is not None:
            projects = await self.store.find_projects_by_names(query.projects)
            project_ids = frozenset(p.project_id for p in projects)

        filters = CalculationFilters(
            project_ids=project_ids,
            companies=frozenset(query.companies) if query.companies is not None else None,
            contract_statuses=(
                frozenset(query.contract_statuses)
                if query.contract_statuses is not None
                else None
            ),
            only_with_free_capacity=query.only_with_free_capacity,
        )

        profile_ids = [p.profile_id for p in profiles]
        if profile_ids:
            records = await self.store.find_payroll_records(
                profile_ids, date_range.start, date_range.end
            )
            allocations = await self.store.find_allocations(
                profile_ids, date_range.start, date_range.end
            )
        else:
            records, allocations = [], []

        result = self.engine.calculate(
            profiles, records, allocations, date_range, query.data_mode, filters
        )
        logger.info(
            "Calculated %s distribution %s..%s for %d profile(s), %d warning(s)",
            result.data_mode.value,
            date_range.start,
            date_range.end,
            len(result.profiles),
            len(result.warnings),
        )
        return result

    async def free_capacity(self, query: FreeCapacityQuery) -> FreeCapacityResult:
        """Free capacity of one profile.

        Raises:
            QueryRangeTooLargeError: If the range exceeds max_query_days
            ProfileNotFoundError: If the profile does not exist
        """
        date_range = query.date_range
        self._check_range(date_range)

        profile_id = query.profile_id
        profile = await self.store.get_profile(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)

        records = await self.store.find_payroll_records(
            [profile_id], date_range.start, date_range.end
        )
        allocations = await self.store.find_allocations(
            [profile_id], date_range.start, date_range.end
        )
        return self.engine.free_capacity(profile_id, records, allocations, date_range)

    async def create_allocation(self, data: AllocationCreate) -> AllocationCreatedResponse:
        """Persist an allocation after checking the profile's capacity.

        Raises:
            QueryRangeTooLargeError: If the period exceeds max_query_days
            ProfileNotFoundError: If the profile does not exist
            ProjectNotFoundError: If the project does not exist
            CapacityExceededError: If any day would exceed 100%
        """
        self._check_range(DateRange(data.period_start, data.period_end))

        if await self.store.get_profile(data.profile_id) is None:
            raise ProfileNotFoundError(data.profile_id)
        if await self.store.get_project(data.project_id) is None:
            raise ProjectNotFoundError(data.project_id)

        existing = await self.store.find_allocations(
            [data.profile_id], data.period_start, data.period_end
        )
        self.guard.check(
            existing,
            ProposedAllocation(
                profile_id=data.profile_id,
                percentage=data.percentage,
                period_start=data.period_start,
                period_end=data.period_end,
            ),
        )

        allocation = await self.store.add_allocation(
            profile_id=data.profile_id,
            project_id=data.project_id,
            percentage=data.percentage,
            period_start=data.period_start,
            period_end=data.period_end,
            contract_status=data.contract_status,
        )
        logger.info(
            "Allocated %s%% of profile %s to project %s (%s..%s)",
            allocation.percentage,
            allocation.profile_id,
            allocation.project.project_id,
            allocation.period_start,
            allocation.period_end,
        )

        remaining = self.guard.remaining(
            data.profile_id, [*existing, allocation], data.period_start, data.period_end
        )
        return AllocationCreatedResponse(
            allocation_id=allocation.allocation_id,
            profile_id=allocation.profile_id,
            project_id=allocation.project.project_id,
            percentage=allocation.percentage,
            period_start=allocation.period_start,
            period_end=allocation.period_end,
            contract_status=allocation.contract_status,
            remaining_free_percentage=remaining,
        )

    def _check_range(self, date_range: DateRange) -> None:
        if date_range.days > self.settings.max_query_days:
            raise QueryRangeTooLargeError(date_range.days, self.settings.max_query_days)
