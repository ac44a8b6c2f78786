"""Actual/estimated payroll record selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from distribution_engine.calculators.intervals import DateSpan, iter_days
from distribution_engine.calculators.types import DataMode, PayrollRecordData, RecordKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GovernedSpan:
    """Consecutive days whose figures come from a single record."""

    record: PayrollRecordData
    span: DateSpan


@dataclass
class SelectionOutcome:
    spans: list[GovernedSpan] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class DataSelectionPolicy:
    """Chooses which payroll record governs each day.

    Decisions are made per day:
    - ACTUAL: only actual records are eligible
    - ESTIMATED: only estimated records are eligible
    - BLENDED: an actual record covering the day wins, otherwise an
      estimated record covering the day

    An actual record covering part of a month does not suppress the
    estimate for the remaining days of that month.

    When several eligible records of the same kind cover a day, the first
    one in input order wins and the overlap is reported as a warning.
    """

    def __init__(self, mode: DataMode):
        self.mode = DataMode(mode)

    @property
    def eligible_kinds(self) -> tuple[RecordKind, ...]:
        """Record kinds in priority order."""
        if self.mode == DataMode.ACTUAL:
            return (RecordKind.ACTUAL,)
        if self.mode == DataMode.ESTIMATED:
            return (RecordKind.ESTIMATED,)
        return (RecordKind.ACTUAL, RecordKind.ESTIMATED)

    def governing_record(
        self, day: date, records: Sequence[PayrollRecordData]
    ) -> PayrollRecordData | None:
        """Return the record that governs ``day``, or None."""
        for kind in self.eligible_kinds:
            for record in records:
                if record.kind == kind and record.period_start <= day <= record.period_end:
                    return record
        return None

    def governed_spans(
        self, records: Sequence[PayrollRecordData], window: DateSpan
    ) -> SelectionOutcome:
        """Collapse the per-day decision over ``window`` into runs.

        Returns runs in chronological order. Days without a governing
        record are absent from the output.
        """
        outcome = SelectionOutcome()
        candidates = [
            r for r in records
            if r.kind in self.eligible_kinds
            and r.period_start <= window.end
            and r.period_end >= window.start
        ]
        if not candidates:
            return outcome

        reported: set[tuple[str, str]] = set()
        current: PayrollRecordData | None = None
        run_start: date | None = None
        previous: date | None = None

        for day in iter_days(window.start, window.end):
            record = self.governing_record(day, candidates)
            if record is not None:
                self._check_same_kind_overlap(day, record, candidates, reported, outcome)

            if record is not current:
                if current is not None and run_start is not None and previous is not None:
                    outcome.spans.append(GovernedSpan(current, DateSpan(run_start, previous)))
                current = record
                run_start = day
            previous = day

        if current is not None and run_start is not None:
            outcome.spans.append(GovernedSpan(current, DateSpan(run_start, window.end)))

        return outcome

    def _check_same_kind_overlap(
        self,
        day: date,
        winner: PayrollRecordData,
        candidates: Sequence[PayrollRecordData],
        reported: set[tuple[str, str]],
        outcome: SelectionOutcome,
    ) -> None:
        for other in candidates:
            if other is winner or other.kind != winner.kind:
                continue
            if not other.period_start <= day <= other.period_end:
                continue
            key = (str(winner.record_id), str(other.record_id))
            if key in reported:
                continue
            reported.add(key)
            message = (
                f"Profile {winner.profile_id}: overlapping {winner.kind.value} records "
                f"{winner.record_id} and {other.record_id} from {day.isoformat()}; "
                f"using {winner.record_id}"
            )
            logger.warning(message)
            outcome.warnings.append(message)
