"""Payroll record and allocation models."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from distribution_engine.models.base import Base, PeriodMixin, TimestampMixin

if TYPE_CHECKING:
    from distribution_engine.models.profile import Profile, Project


class PayrollRecord(Base, PeriodMixin, TimestampMixin):
    """Wage, employer contribution and hours for one reporting period."""

    __tablename__ = "payroll_record"

    payroll_record_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    profile_id: Mapped[UUID] = mapped_column(
        ForeignKey("profile.profile_id", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    wage: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    employer_contribution: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    hours: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    lower_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)
    upper_multiplier: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)

    __table_args__ = (
        CheckConstraint("kind IN ('actual', 'estimated')", name="payroll_record_kind_check"),
        CheckConstraint(
            "wage >= 0 AND employer_contribution >= 0 AND hours >= 0",
            name="payroll_record_non_negative_check",
        ),
        CheckConstraint("period_start <= period_end", name="payroll_record_period_check"),
        Index("payroll_record_profile_period_idx", "profile_id", "period_start", "period_end"),
    )

    profile: Mapped[Profile] = relationship(back_populates="payroll_records")


class Allocation(Base, PeriodMixin, TimestampMixin):
    """Percentage of a profile's effort assigned to a project."""

    __tablename__ = "allocation"

    allocation_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    profile_id: Mapped[UUID] = mapped_column(
        ForeignKey("profile.profile_id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("project.project_id", ondelete="RESTRICT"),
        nullable=False,
    )
    percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    contract_status: Mapped[str] = mapped_column(String(10), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "percentage >= 0 AND percentage <= 100", name="allocation_percentage_check"
        ),
        CheckConstraint(
            "contract_status IN ('legacy', 'new')", name="allocation_contract_status_check"
        ),
        CheckConstraint("period_start <= period_end", name="allocation_period_check"),
        Index("allocation_profile_period_idx", "profile_id", "period_start", "period_end"),
    )

    profile: Mapped[Profile] = relationship(back_populates="allocations")
    project: Mapped[Project] = relationship(back_populates="allocations")
