"""Storage collaborator: loads typed snapshots for the engine."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Collection, Protocol
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from distribution_engine.calculators.types import (
    AllocationData,
    ContractStatus,
    PayrollRecordData,
    ProfileData,
    ProjectData,
    RecordKind,
)
from distribution_engine.models import Allocation, PayrollRecord, Profile, Project


class DistributionStore(Protocol):
    """Queries the engine needs from storage.

    Implementations must return the full matching set, never a page.
    """

    async def list_profiles(self) -> list[ProfileData]: ...

    async def get_profile(self, profile_id: UUID) -> ProfileData | None: ...

    async def find_profiles_by_names(self, names: Collection[str]) -> list[ProfileData]: ...

    async def find_projects_by_names(self, names: Collection[str]) -> list[ProjectData]: ...

    async def find_payroll_records(
        self, profile_ids: Collection[UUID], start: date, end: date
    ) -> list[PayrollRecordData]: ...

    async def find_allocations(
        self,
        profile_ids: Collection[UUID],
        start: date,
        end: date,
        project_ids: Collection[UUID] | None = None,
        contract_statuses: Collection[ContractStatus] | None = None,
    ) -> list[AllocationData]: ...

    async def add_allocation(
        self,
        profile_id: UUID,
        project_id: UUID,
        percentage: Decimal,
        period_start: date,
        period_end: date,
        contract_status: ContractStatus,
    ) -> AllocationData: ...

    async def get_project(self, project_id: UUID) -> ProjectData | None: ...


class DistributionRepository:
    """SQLAlchemy implementation of :class:`DistributionStore`.

    ORM rows are converted into frozen engine dataclasses here, once, so
    the engine never touches ORM objects.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_profiles(self) -> list[ProfileData]:
        """Every profile, ordered by name."""
        result = await self.session.execute(
            select(Profile).order_by(Profile.name, Profile.profile_id)
        )
        return [_to_profile(p) for p in result.scalars().all()]

    async def get_profile(self, profile_id: UUID) -> ProfileData | None:
        profile = await self.session.get(Profile, profile_id)
        return _to_profile(profile) if profile is not None else None

    async def find_profiles_by_names(self, names: Collection[str]) -> list[ProfileData]:
        result = await self.session.execute(
            select(Profile)
            .where(Profile.name.in_(list(names)))
            .order_by(Profile.name, Profile.profile_id)
        )
        return [_to_profile(p) for p in result.scalars().all()]

    async def get_project(self, project_id: UUID) -> ProjectData | None:
        project = await self.session.get(Project, project_id)
        return _to_project(project) if project is not None else None

    async def find_projects_by_names(self, names: Collection[str]) -> list[ProjectData]:
        result = await self.session.execute(
            select(Project)
            .where(Project.name.in_(list(names)))
            .order_by(Project.name, Project.project_id)
        )
        return [_to_project(p) for p in result.scalars().all()]

    async def find_payroll_records(
        self, profile_ids: Collection[UUID], start: date, end: date
    ) -> list[PayrollRecordData]:
        """Payroll records of the profiles overlapping [start, end].

        Ordered by period start so record selection ties resolve the same
        way on every call.
        """
        result = await self.session.execute(
            select(PayrollRecord)
            .where(
                PayrollRecord.profile_id.in_(list(profile_ids)),
                PayrollRecord.overlapping(start, end),
            )
            .order_by(PayrollRecord.period_start, PayrollRecord.payroll_record_id)
        )
        return [_to_record(r) for r in result.scalars().all()]

    async def find_allocations(
        self,
        profile_ids: Collection[UUID],
        start: date,
        end: date,
        project_ids: Collection[UUID] | None = None,
        contract_statuses: Collection[ContractStatus] | None = None,
    ) -> list[AllocationData]:
        """Allocations of the profiles overlapping [start, end]."""
        stmt = (
            select(Allocation)
            .where(
                Allocation.profile_id.in_(list(profile_ids)),
                Allocation.overlapping(start, end),
            )
            .options(selectinload(Allocation.project))
            .order_by(Allocation.period_start, Allocation.allocation_id)
        )
        if project_ids is not None:
            stmt = stmt.where(Allocation.project_id.in_(list(project_ids)))
        if contract_statuses is not None:
            stmt = stmt.where(
                Allocation.contract_status.in_(
                    [ContractStatus(s).value for s in contract_statuses]
                )
            )
        result = await self.session.execute(stmt)
        return [_to_allocation(a) for a in result.scalars().all()]

    async def add_allocation(
        self,
        profile_id: UUID,
        project_id: UUID,
        percentage: Decimal,
        period_start: date,
        period_end: date,
        contract_status: ContractStatus,
    ) -> AllocationData:
        allocation = Allocation(
            profile_id=profile_id,
            project_id=project_id,
            percentage=percentage,
            period_start=period_start,
            period_end=period_end,
            contract_status=ContractStatus(contract_status).value,
        )
        self.session.add(allocation)
        await self.session.flush()
        await self.session.refresh(allocation, attribute_names=["project"])
        return _to_allocation(allocation)


# === Row conversion ===


def _to_profile(row: Profile) -> ProfileData:
    return ProfileData(profile_id=row.profile_id, name=row.name, national_id=row.national_id)


def _to_project(row: Project) -> ProjectData:
    return ProjectData(project_id=row.project_id, name=row.name)


def _to_record(row: PayrollRecord) -> PayrollRecordData:
    return PayrollRecordData(
        record_id=row.payroll_record_id,
        profile_id=row.profile_id,
        kind=RecordKind(row.kind),
        wage=Decimal(row.wage),
        employer_contribution=Decimal(row.employer_contribution),
        hours=Decimal(row.hours),
        period_start=row.period_start,
        period_end=row.period_end,
        company=row.company,
        lower_multiplier=row.lower_multiplier,
        upper_multiplier=row.upper_multiplier,
    )


def _to_allocation(row: Allocation) -> AllocationData:
    return AllocationData(
        allocation_id=row.allocation_id,
        profile_id=row.profile_id,
        project=_to_project(row.project),
        percentage=Decimal(row.percentage),
        period_start=row.period_start,
        period_end=row.period_end,
        contract_status=ContractStatus(row.contract_status),
    )
