"""Type definitions for the distribution pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class RecordKind(str, Enum):
    """Payroll record data quality."""

    ACTUAL = "actual"
    ESTIMATED = "estimated"


class DataMode(str, Enum):
    """Which payroll records a calculation may use."""

    ACTUAL = "actual"
    ESTIMATED = "estimated"
    BLENDED = "blended"


class ContractStatus(str, Enum):
    """Contract status of an allocation."""

    LEGACY = "legacy"
    NEW = "new"


@dataclass(frozen=True)
class ProfileData:
    """A tracked worker."""

    profile_id: UUID
    name: str
    national_id: str


@dataclass(frozen=True)
class ProjectData:
    """A cost center a profile can be allocated to."""

    project_id: UUID
    name: str


@dataclass(frozen=True)
class PayrollRecordData:
    """Recorded wage/contribution/hours for one profile over one period."""

    record_id: UUID
    profile_id: UUID
    kind: RecordKind
    wage: Decimal
    employer_contribution: Decimal
    hours: Decimal
    period_start: date
    period_end: date
    company: str
    # Carried through, not used by the arithmetic
    lower_multiplier: Decimal | None = None
    upper_multiplier: Decimal | None = None


@dataclass(frozen=True)
class AllocationData:
    """Percentage of a profile's effort assigned to a project for a period."""

    allocation_id: UUID
    profile_id: UUID
    project: ProjectData
    percentage: Decimal
    period_start: date
    period_end: date
    contract_status: ContractStatus


@dataclass(frozen=True)
class CalculationFilters:
    """Optional restrictions for a calculation.

    ``None`` means "no restriction"; an empty set matches nothing.
    """

    profile_ids: frozenset[UUID] | None = None
    project_ids: frozenset[UUID] | None = None
    companies: frozenset[str] | None = None
    contract_statuses: frozenset[ContractStatus] | None = None
    only_with_free_capacity: bool = False


@dataclass(frozen=True)
class Amounts:
    """Wage, employer contribution and hours triple."""

    wage: Decimal = ZERO
    contribution: Decimal = ZERO
    hours: Decimal = ZERO

    def __add__(self, other: Amounts) -> Amounts:
        return Amounts(
            wage=self.wage + other.wage,
            contribution=self.contribution + other.contribution,
            hours=self.hours + other.hours,
        )

    def scaled(self, factor: Decimal) -> Amounts:
        """Return every quantity multiplied by ``factor``."""
        return Amounts(
            wage=self.wage * factor,
            contribution=self.contribution * factor,
            hours=self.hours * factor,
        )

    @property
    def is_zero(self) -> bool:
        return self.wage == 0 and self.contribution == 0 and self.hours == 0


@dataclass(frozen=True)
class ProratedShare:
    """Unrounded portion of one record attributed to one allocation in one month."""

    profile_id: UUID
    month: str  # YYYY-MM
    project: ProjectData
    company: str
    contract_status: ContractStatus
    amounts: Amounts


@dataclass(frozen=True)
class UnassignedShare:
    """Unrounded portion of one record not covered by any allocation in one month."""

    profile_id: UUID
    month: str
    amounts: Amounts


@dataclass
class ProrationOutput:
    """Everything the proration engine produced for one profile."""

    shares: list[ProratedShare] = field(default_factory=list)
    unassigned: list[UnassignedShare] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


# ===== Results =====


@dataclass
class ProjectEntry:
    """One project's rounded amounts in one month."""

    project_id: UUID
    project: str
    company: str
    contract_status: ContractStatus
    wage: Decimal
    contribution: Decimal
    hours: Decimal


@dataclass
class MonthBucket:
    """Project entries and totals for one calendar month."""

    month: str
    projects: list[ProjectEntry]
    total_wage: Decimal
    total_contribution: Decimal
    total_hours: Decimal
    unassigned_wage: Decimal
    unassigned_contribution: Decimal
    unassigned_hours: Decimal


@dataclass
class ProfileResult:
    """Distribution of one profile over the query range."""

    profile_id: UUID
    profile: str
    months: list[MonthBucket]
    total_wage: Decimal
    total_contribution: Decimal
    total_hours: Decimal
    unassigned_wage: Decimal
    unassigned_contribution: Decimal
    unassigned_hours: Decimal

    @property
    def has_free_capacity(self) -> bool:
        return self.unassigned_hours > 0


@dataclass
class GlobalTotals:
    """Sum of every profile result."""

    wage: Decimal = ZERO
    contribution: Decimal = ZERO
    hours: Decimal = ZERO
    unassigned_wage: Decimal = ZERO
    unassigned_contribution: Decimal = ZERO
    unassigned_hours: Decimal = ZERO


@dataclass
class CalculationResult:
    """Result of a distribution calculation."""

    start: date
    end: date
    data_mode: DataMode
    profiles: list[ProfileResult]
    total: GlobalTotals
    warnings: list[str] = field(default_factory=list)
    engine_version: str = ""

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass(frozen=True)
class FreeRange:
    """Consecutive days sharing the same free percentage."""

    percentage: Decimal
    start: date
    end: date


@dataclass
class FreeCapacityResult:
    """Free capacity of one profile over a date range."""

    profile_id: UUID
    minimum_free_percentage: Decimal
    total_free_hours: Decimal
    free_ranges: list[FreeRange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
