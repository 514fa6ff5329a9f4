from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Protocol, Tuple

from ..core.exceptions import InvalidRangeError, ValidationError

DateInterval = Tuple[date, date]


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Local wall clock. Services accept an explicit ``now`` so tests can pin time."""

    def now(self) -> datetime:
        return now_local()


def now_local() -> datetime:
    return datetime.now()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}") from exc


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Invalid time (expected HH:MM): {value!r}")
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError as exc:
        raise ValidationError(f"Invalid time (expected HH:MM): {value!r}") from exc


def check_range(start: date, end: date) -> None:
    if end < start:
        raise InvalidRangeError(f"End date {end.isoformat()} is before start date {start.isoformat()}")


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from start to end, both inclusive."""
    check_range(start, end)
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def day_count(start: date, end: date) -> int:
    check_range(start, end)
    return (end - start).days + 1


def last_n_days(today: date, n: int) -> DateInterval:
    """Interval of the n days ending on (and including) today."""
    if n < 1:
        raise ValidationError("n must be at least 1")
    return today - timedelta(days=n - 1), today


def overlap(a: DateInterval, b: DateInterval) -> Optional[DateInterval]:
    """Clamp interval a to interval b; None when they do not intersect."""
    start = max(a[0], b[0])
    end = min(a[1], b[1])
    if end < start:
        return None
    return start, end


def overlap_days(a: DateInterval, b: DateInterval) -> int:
    clamped = overlap(a, b)
    if clamped is None:
        return 0
    return (clamped[1] - clamped[0]).days + 1


def covers(interval: DateInterval, day: date) -> bool:
    return interval[0] <= day <= interval[1]
