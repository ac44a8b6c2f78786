"""Integration fixtures backed by an in-memory SQLite database."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from distribution_engine.database import create_session_factory
from distribution_engine.models import Allocation, Base, PayrollRecord, Profile, Project

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@dataclass
class SeedData:
    """Rows created by the ``seeded`` fixture."""

    ana: Profile
    luis: Profile
    alpha: Project
    beta: Project


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh schema per test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    factory = create_session_factory(db_engine)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded(session: AsyncSession) -> SeedData:
    """Two profiles, two projects, January payroll and allocations.

    Ana: actual record Jan 1-10 (1000 / 200 / 80 h),
         Alpha 50% Jan 1-5 (legacy), Beta 30% Jan 6-10 (new).
    Luis: estimated record Jan 1-31 (3100 / 0 / 155 h), no allocations.
    """
    ana = Profile(name="Ana Torres", national_id="12345678A")
    luis = Profile(name="Luis Gómez", national_id="87654321B")
    alpha = Project(name="Alpha")
    beta = Project(name="Beta")
    session.add_all([ana, luis, alpha, beta])
    await session.flush()

    session.add_all([
        PayrollRecord(
            profile_id=ana.profile_id,
            kind="actual",
            wage=Decimal("1000.00"),
            employer_contribution=Decimal("200.00"),
            hours=Decimal("80.00"),
            period_start=date(2025, 1, 1),
            period_end=date(2025, 1, 10),
            company="Acme",
            lower_multiplier=Decimal("1.0000"),
            upper_multiplier=Decimal("1.5000"),
        ),
        PayrollRecord(
            profile_id=luis.profile_id,
            kind="estimated",
            wage=Decimal("3100.00"),
            employer_contribution=Decimal("0.00"),
            hours=Decimal("155.00"),
            period_start=date(2025, 1, 1),
            period_end=date(2025, 1, 31),
            company="Globex",
        ),
        Allocation(
            profile_id=ana.profile_id,
            project_id=alpha.project_id,
            percentage=Decimal("50"),
            period_start=date(2025, 1, 1),
            period_end=date(2025, 1, 5),
            contract_status="legacy",
        ),
        Allocation(
            profile_id=ana.profile_id,
            project_id=beta.project_id,
            percentage=Decimal("30"),
            period_start=date(2025, 1, 6),
            period_end=date(2025, 1, 10),
            contract_status="new",
        ),
    ])
    await session.flush()
    return SeedData(ana=ana, luis=luis, alpha=alpha, beta=beta)
