"""
Calendar-day normalization.

Every calendar day is stored as a single reference instant (12:00 UTC) and
queried through its full UTC span, never by exact instant.  All month/day
arithmetic happens in UTC, never in the server's local time.
"""

from __future__ import annotations

import calendar as cal_mod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union

from worktrack.core.exceptions import ValidationError

REFERENCE_TZ = timezone.utc
STORAGE_TIME = time(12, 0, tzinfo=REFERENCE_TZ)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

DateLike = Union[date, datetime, str]


@dataclass(frozen=True)
class Today:
    year: int
    month: int
    day: int
    weekday: str

    @property
    def as_date(self) -> date:
        return date(self.year, self.month, self.day)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=REFERENCE_TZ)
    return dt.astimezone(REFERENCE_TZ)


def parse_day(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` wire date."""
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def calendar_day(value: DateLike) -> date:
    """Reduce any date-like input to its calendar day in the reference zone."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) > 10:
            try:
                return ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00"))).date()
            except ValueError:
                raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")
        return parse_day(text)
    raise ValidationError(f"Unsupported date value: {value!r}")


def storage_instant(value: DateLike) -> datetime:
    """Canonical stored instant for the calendar day of *value*."""
    return datetime.combine(calendar_day(value), STORAGE_TIME)


def day_span(value: DateLike) -> tuple[datetime, datetime]:
    """Inclusive ``[00:00:00.000, 23:59:59.999]`` UTC span of the calendar day."""
    d = calendar_day(value)
    start = datetime(d.year, d.month, d.day, tzinfo=REFERENCE_TZ)
    end = start + timedelta(days=1) - timedelta(milliseconds=1)
    return start, end


def range_span(start: DateLike, end: DateLike) -> tuple[datetime, datetime]:
    return day_span(start)[0], day_span(end)[1]


def month_span(year: int, month: int) -> tuple[datetime, datetime]:
    check_month(year, month)
    return range_span(date(year, month, 1), date(year, month, days_in_month(year, month)))


def year_span(year: int) -> tuple[datetime, datetime]:
    check_year(year)
    return range_span(date(year, 1, 1), date(year, 12, 31))


def is_weekend(value: DateLike) -> bool:
    return calendar_day(value).weekday() >= 5


def weekday_name(value: DateLike) -> str:
    return DAY_NAMES[calendar_day(value).weekday()]


def format_day(value: DateLike) -> str:
    return calendar_day(value).strftime("%Y-%m-%d")


def today_in_reference(now: datetime) -> Today:
    d = ensure_utc(now).date()
    return Today(year=d.year, month=d.month, day=d.day, weekday=DAY_NAMES[d.weekday()])


def check_year(year: int) -> None:
    if not 1 <= year <= 9999:
        raise ValidationError("Year is out of range")


def check_month(year: int, month: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    check_year(year)


def days_in_month(year: int, month: int) -> int:
    return cal_mod.monthrange(year, month)[1]


def iter_days(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def weekdays_between(start: DateLike, end: DateLike) -> list[date]:
    """Chronological weekdays in ``[start, end]``."""
    return [d for d in iter_days(calendar_day(start), calendar_day(end)) if d.weekday() < 5]


def month_days(year: int, month: int) -> list[date]:
    check_month(year, month)
    return list(iter_days(date(year, month, 1), date(year, month, days_in_month(year, month))))
