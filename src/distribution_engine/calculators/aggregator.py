"""Folds prorated shares into month buckets and totals."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator, Sequence

from distribution_engine.calculators.types import (
    ZERO,
    Amounts,
    ContractStatus,
    GlobalTotals,
    MonthBucket,
    ProfileData,
    ProfileResult,
    ProjectEntry,
    ProratedShare,
    ProjectData,
    UnassignedShare,
)


@dataclass(frozen=True)
class _EntryKey:
    month: str
    project: ProjectData
    company: str
    contract_status: ContractStatus

    def sort_key(self) -> tuple[str, str, str, str]:
        return (
            self.project.name,
            str(self.project.project_id),
            self.company,
            self.contract_status.value,
        )


class Aggregator:
    """Builds the nested calculation result.

    Rounding:
    - Leaves (one project entry in one month, one month's unassigned
      amounts) are summed unrounded first
    - The leaves of a profile are rounded together to cents by largest
      remainder: every leaf is floored, then the cents missing from the
      half-up rounded profile total go to the leaves with the largest
      remainders, earlier leaves first on ties
    - Each leaf ends within one cent of its exact value and the leaves
      add up to the rounded profile total, so assigned plus unassigned
      equals the governing records' amounts
    - Month, profile and global totals are sums of rounded leaves

    Ordering:
    - Months chronological
    - Entries within a month by project name, project id, company,
      contract status
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places."""
        return amount.quantize(Aggregator.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @classmethod
    def allocate_cents(cls, values: Sequence[Decimal]) -> list[Decimal]:
        """Round ``values`` to cents so they add up to their rounded sum."""
        rounded = [v.quantize(cls.OUTPUT_PRECISION, rounding=ROUND_FLOOR) for v in values]
        target = cls.round_to_cents(sum(values, ZERO))
        missing = int((target - sum(rounded, ZERO)) / cls.OUTPUT_PRECISION)

        # sorted() is stable, so ties keep leaf order
        by_remainder = sorted(
            range(len(values)), key=lambda i: values[i] - rounded[i], reverse=True
        )
        for i in by_remainder[:missing]:
            rounded[i] += cls.OUTPUT_PRECISION
        return rounded

    @classmethod
    def allocate_amounts(cls, leaves: Sequence[Amounts]) -> list[Amounts]:
        """Apply :meth:`allocate_cents` to each quantity independently."""
        wages = cls.allocate_cents([a.wage for a in leaves])
        contributions = cls.allocate_cents([a.contribution for a in leaves])
        hours = cls.allocate_cents([a.hours for a in leaves])
        return [
            Amounts(wage=w, contribution=c, hours=h)
            for w, c, h in zip(wages, contributions, hours)
        ]

    def build_profile(
        self,
        profile: ProfileData,
        shares: Iterable[ProratedShare],
        unassigned: Iterable[UnassignedShare],
    ) -> ProfileResult:
        """Fold one profile's shares into month buckets."""
        entries: dict[_EntryKey, Amounts] = {}
        for share in shares:
            key = _EntryKey(share.month, share.project, share.company, share.contract_status)
            entries[key] = entries.get(key, Amounts()) + share.amounts

        free: dict[str, Amounts] = {}
        for share in unassigned:
            free[share.month] = free.get(share.month, Amounts()) + share.amounts

        by_month: dict[str, list[_EntryKey]] = {}
        for key in entries:
            by_month.setdefault(key.month, []).append(key)

        # Leaves in output order: a month's entries, then its unassigned amounts
        layout: list[tuple[str, list[_EntryKey]]] = []
        leaves: list[Amounts] = []
        for month in sorted(set(by_month) | set(free)):
            keys = sorted(by_month.get(month, []), key=_EntryKey.sort_key)
            layout.append((month, keys))
            leaves.extend(entries[key] for key in keys)
            leaves.append(free.get(month, Amounts()))

        rounded = iter(self.allocate_amounts(leaves))
        months = [self._build_month(month, keys, rounded) for month, keys in layout]

        return ProfileResult(
            profile_id=profile.profile_id,
            profile=profile.name,
            months=months,
            total_wage=sum((m.total_wage for m in months), ZERO),
            total_contribution=sum((m.total_contribution for m in months), ZERO),
            total_hours=sum((m.total_hours for m in months), ZERO),
            unassigned_wage=sum((m.unassigned_wage for m in months), ZERO),
            unassigned_contribution=sum((m.unassigned_contribution for m in months), ZERO),
            unassigned_hours=sum((m.unassigned_hours for m in months), ZERO),
        )

    def _build_month(
        self,
        month: str,
        keys: list[_EntryKey],
        rounded: Iterator[Amounts],
    ) -> MonthBucket:
        projects: list[ProjectEntry] = []
        for key in keys:
            amounts = next(rounded)
            projects.append(
                ProjectEntry(
                    project_id=key.project.project_id,
                    project=key.project.name,
                    company=key.company,
                    contract_status=key.contract_status,
                    wage=amounts.wage,
                    contribution=amounts.contribution,
                    hours=amounts.hours,
                )
            )

        free = next(rounded)
        return MonthBucket(
            month=month,
            projects=projects,
            total_wage=sum((p.wage for p in projects), ZERO),
            total_contribution=sum((p.contribution for p in projects), ZERO),
            total_hours=sum((p.hours for p in projects), ZERO),
            unassigned_wage=free.wage,
            unassigned_contribution=free.contribution,
            unassigned_hours=free.hours,
        )

    @staticmethod
    def build_totals(profiles: Iterable[ProfileResult]) -> GlobalTotals:
        """Global total as the sum of profile totals."""
        totals = GlobalTotals()
        for profile in profiles:
            totals.wage += profile.total_wage
            totals.contribution += profile.total_contribution
            totals.hours += profile.total_hours
            totals.unassigned_wage += profile.unassigned_wage
            totals.unassigned_contribution += profile.unassigned_contribution
            totals.unassigned_hours += profile.unassigned_hours
        return totals
