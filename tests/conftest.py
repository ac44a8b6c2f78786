"""Pytest fixtures for distribution engine tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from distribution_engine.calculators.engine import DistributionEngine
from distribution_engine.calculators.types import (
    AllocationData,
    ContractStatus,
    PayrollRecordData,
    ProfileData,
    ProjectData,
)
from distribution_engine.config import Settings
from tests.factories import make_allocation, make_profile, make_project, make_record


@dataclass
class SplitScenario:
    """Ten-day record split 50% / 30% across two projects.

    Record 2025-01-01..2025-01-10: wage 1000, contribution 200, hours 80.
    Project X 50% on days 1-5 (legacy), project Y 30% on days 6-10 (new).
    """

    profile: ProfileData
    project_x: ProjectData
    project_y: ProjectData
    record: PayrollRecordData
    allocation_x: AllocationData
    allocation_y: AllocationData

    @property
    def records(self) -> list[PayrollRecordData]:
        return [self.record]

    @property
    def allocations(self) -> list[AllocationData]:
        return [self.allocation_x, self.allocation_y]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        engine_version="test-1",
        max_query_days=400,
        log_level="DEBUG",
    )


@pytest.fixture
def engine(settings: Settings) -> DistributionEngine:
    return DistributionEngine(settings.engine_version)


@pytest.fixture
def split_scenario() -> SplitScenario:
    profile = make_profile("Ana Torres")
    project_x = make_project("Project X")
    project_y = make_project("Project Y")
    record = make_record(
        profile,
        date(2025, 1, 1),
        date(2025, 1, 10),
        wage="1000",
        hours="80",
        contribution="200",
    )
    return SplitScenario(
        profile=profile,
        project_x=project_x,
        project_y=project_y,
        record=record,
        allocation_x=make_allocation(
            profile, project_x, "50", date(2025, 1, 1), date(2025, 1, 5),
            status=ContractStatus.LEGACY,
        ),
        allocation_y=make_allocation(
            profile, project_y, "30", date(2025, 1, 6), date(2025, 1, 10),
        ),
    )
