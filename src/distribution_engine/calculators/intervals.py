"""Day-granular interval arithmetic over closed date ranges."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator


class InvalidDateRangeError(Exception):
    """Raised when a caller supplies an unparsable or inverted date range."""

    def __init__(self, start: object, end: object, reason: str):
        self.start = start
        self.end = end
        self.reason = reason
        super().__init__(f"Invalid date range {start!r} .. {end!r}: {reason}")


def _as_date(value: date | datetime) -> date:
    """Strip time-of-day so comparisons are midnight-normalized."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Inclusive number of days in [start, end]; 0 when end < start."""
    delta = (_as_date(end) - _as_date(start)).days
    if delta < 0:
        return 0
    return delta + 1


def overlaps(
    start1: date | datetime,
    end1: date | datetime,
    start2: date | datetime,
    end2: date | datetime,
) -> bool:
    """True when the two closed ranges share at least one day."""
    return _as_date(start1) <= _as_date(end2) and _as_date(end1) >= _as_date(start2)


@dataclass(frozen=True)
class DateSpan:
    """A non-empty closed range of calendar days."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return days_between(self.start, self.end)


def intersect(
    start1: date | datetime,
    end1: date | datetime,
    start2: date | datetime,
    end2: date | datetime,
) -> DateSpan | None:
    """Intersection of two closed ranges, or None when it is empty."""
    start = max(_as_date(start1), _as_date(start2))
    end = min(_as_date(end1), _as_date(end2))
    if start > end:
        return None
    return DateSpan(start, end)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in [start, end]."""
    day = _as_date(start)
    last = _as_date(end)
    step = timedelta(days=1)
    while day <= last:
        yield day
        day += step


def month_key(day: date) -> str:
    """Calendar month of a day as YYYY-MM."""
    return f"{day.year:04d}-{day.month:02d}"


def _month_end(day: date) -> date:
    if day.month == 12:
        return date(day.year, 12, 31)
    return date(day.year, day.month + 1, 1) - timedelta(days=1)


def month_spans(start: date, end: date) -> list[DateSpan]:
    """Partition [start, end] into calendar-month sub-spans, in order."""
    spans: list[DateSpan] = []
    cursor = _as_date(start)
    last = _as_date(end)
    while cursor <= last:
        span_end = min(_month_end(cursor), last)
        spans.append(DateSpan(cursor, span_end))
        cursor = span_end + timedelta(days=1)
    return spans


@dataclass(frozen=True)
class DateRange:
    """Validated query range, start <= end."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end, "start is after end")

    @property
    def days(self) -> int:
        return days_between(self.start, self.end)

    @property
    def span(self) -> DateSpan:
        return DateSpan(self.start, self.end)

    @classmethod
    def parse(cls, start: str | date, end: str | date) -> DateRange:
        """Build a range from ISO strings or dates.

        Raises:
            InvalidDateRangeError: If a value cannot be parsed or start > end
        """
        return cls(_parse_date(start, start, end), _parse_date(end, start, end))


def _parse_date(value: str | date, start: object, end: object) -> date:
    if isinstance(value, (date, datetime)):
        return _as_date(value)
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateRangeError(start, end, f"missing date value {value!r}")
    text = value.strip()
    try:
        if "T" in text or " " in text:
            return datetime.fromisoformat(text).date()
        return date.fromisoformat(text)
    except ValueError as e:
        raise InvalidDateRangeError(start, end, f"cannot parse {value!r}") from e
