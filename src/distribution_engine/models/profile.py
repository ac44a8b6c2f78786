"""Profile and project models."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from distribution_engine.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from distribution_engine.models.distribution import Allocation, PayrollRecord


class Profile(Base, TimestampMixin):
    """A tracked worker."""

    __tablename__ = "profile"

    profile_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)

    # Relationships
    payroll_records: Mapped[list[PayrollRecord]] = relationship(back_populates="profile")
    allocations: Mapped[list[Allocation]] = relationship(back_populates="profile")


class Project(Base, TimestampMixin):
    """A cost center or work stream."""

    __tablename__ = "project"

    project_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    allocations: Mapped[list[Allocation]] = relationship(back_populates="project")
