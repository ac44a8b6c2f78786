"""Pydantic schemas for calculation queries and results."""

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from distribution_engine.calculators.intervals import DateRange
from distribution_engine.calculators.types import ContractStatus, DataMode


def _split_names(value: Any) -> Any:
    """Accept "A,B" as well as ["A", "B"]; blanks are dropped.

    Nothing left after splitting means no filter, so `?profiles=` behaves
    like an absent parameter.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    items = [v.strip() if isinstance(v, str) else v for v in value]
    names = [v for v in items if v != ""]
    return names or None


# ============================================================================
# Query schemas
# ============================================================================


class CalculationQuery(BaseModel):
    """Schema for a distribution calculation request."""

    start: date
    end: date
    data_mode: DataMode
    profiles: list[str] | None = Field(default=None, description="Profile names")
    projects: list[str] | None = Field(default=None, description="Project names")
    companies: list[str] | None = None
    contract_statuses: list[ContractStatus] | None = None
    only_with_free_capacity: bool = False

    @field_validator("profiles", "projects", "companies", "contract_statuses", mode="before")
    @classmethod
    def split_comma_separated(cls, value: Any) -> Any:
        return _split_names(value)

    @model_validator(mode="after")
    def check_range(self) -> "CalculationQuery":
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start, self.end)


class FreeCapacityQuery(BaseModel):
    """Schema for a free capacity request."""

    profile_id: UUID
    start: date
    end: date

    @model_validator(mode="after")
    def check_range(self) -> "FreeCapacityQuery":
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start, self.end)


class AllocationCreate(BaseModel):
    """Schema for creating an allocation."""

    profile_id: UUID
    project_id: UUID
    percentage: Decimal = Field(ge=0, le=100)
    period_start: date
    period_end: date
    contract_status: ContractStatus

    @model_validator(mode="after")
    def check_period(self) -> "AllocationCreate":
        if self.period_start > self.period_end:
            raise ValueError(
                f"period_start {self.period_start} is after period_end {self.period_end}"
            )
        return self


# ============================================================================
# Result schemas
# ============================================================================


class ProjectEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: UUID
    project: str
    company: str
    contract_status: ContractStatus
    wage: Decimal
    contribution: Decimal
    hours: Decimal


class MonthBucketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    projects: list[ProjectEntryResponse]
    total_wage: Decimal
    total_contribution: Decimal
    total_hours: Decimal
    unassigned_wage: Decimal
    unassigned_contribution: Decimal
    unassigned_hours: Decimal


class ProfileResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    profile_id: UUID
    profile: str
    months: list[MonthBucketResponse]
    total_wage: Decimal
    total_contribution: Decimal
    total_hours: Decimal
    unassigned_wage: Decimal
    unassigned_contribution: Decimal
    unassigned_hours: Decimal


class GlobalTotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    wage: Decimal
    contribution: Decimal
    hours: Decimal
    unassigned_wage: Decimal
    unassigned_contribution: Decimal
    unassigned_hours: Decimal


class CalculationResponse(BaseModel):
    """Schema for a distribution calculation result."""

    model_config = ConfigDict(from_attributes=True)

    start: date
    end: date
    data_mode: DataMode
    profiles: list[ProfileResultResponse]
    total: GlobalTotalsResponse
    warnings: list[str] = []
    engine_version: str


class FreeRangeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    percentage: Decimal
    start: date
    end: date


class FreeCapacityResponse(BaseModel):
    """Schema for a free capacity result."""

    model_config = ConfigDict(from_attributes=True)

    profile_id: UUID
    minimum_free_percentage: Decimal
    total_free_hours: Decimal
    free_ranges: list[FreeRangeResponse] = []
    warnings: list[str] = []


class AllocationCreatedResponse(BaseModel):
    """Schema returned after creating an allocation."""

    allocation_id: UUID
    profile_id: UUID
    project_id: UUID
    percentage: Decimal
    period_start: date
    period_end: date
    contract_status: ContractStatus
    remaining_free_percentage: dict[str, Decimal]
