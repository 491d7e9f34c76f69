"""Wall-clock helpers for splitting shifts in a local timezone.

Instants are carried in UTC internally; a timezone is only consulted to find
local midnights, local clock times and local calendar dates.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shift_ledger.calculators.errors import InvalidInputError

WEEKDAY_TAGS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

MICROSECONDS_PER_HOUR = 3_600_000_000


def parse_clock(value: str, field: str = "time") -> int:
    """Parse zero-padded ``HH:MM`` into minutes since midnight."""
    # strptime alone would also accept "8:00"
    if not isinstance(value, str) or len(value) != 5:
        raise InvalidInputError(field, value, "expected HH:MM")
    try:
        parsed = datetime.strptime(value, "%H:%M").time()
    except ValueError as exc:
        raise InvalidInputError(field, value, "expected HH:MM") from exc
    return parsed.hour * 60 + parsed.minute


def format_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def resolve_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError("timezone", name, "unknown timezone") from exc


def to_utc(value: datetime, tz: ZoneInfo) -> datetime:
    """Return an aware UTC datetime; naive values are read as local to ``tz``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=tz)
    return value.astimezone(timezone.utc)


def at_local_clock(day: date, minutes: int, tz: ZoneInfo) -> datetime:
    """The UTC instant at which the local clock on ``day`` reads ``minutes``.

    A clock time skipped by a forward transition maps to the transition
    itself, the first instant at or after that wall-clock reading.
    """
    local = datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=tz)
    instant = local.astimezone(timezone.utc)
    if instant.astimezone(tz).replace(tzinfo=None) == local.replace(tzinfo=None):
        return instant
    earliest = local.replace(fold=1).astimezone(timezone.utc)
    return _first_instant_with_offset(earliest, instant, tz)


def _first_instant_with_offset(before: datetime, after: datetime, tz: ZoneInfo) -> datetime:
    """Bisect whole seconds in ``(before, after]`` for the offset change."""
    target = after.astimezone(tz).utcoffset()
    lo, hi = 0, int((after - before).total_seconds())
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if (before + timedelta(seconds=mid)).astimezone(tz).utcoffset() == target:
            hi = mid
        else:
            lo = mid
    return before + timedelta(seconds=hi)


def local_date(instant: datetime, tz: ZoneInfo) -> date:
    return instant.astimezone(tz).date()


def local_minutes(instant: datetime, tz: ZoneInfo) -> int:
    local = instant.astimezone(tz)
    return local.hour * 60 + local.minute


def weekday_tag(instant: datetime, tz: ZoneInfo) -> str:
    return WEEKDAY_TAGS[instant.astimezone(tz).weekday()]


def split_at_local_midnights(
    start: datetime, end: datetime, tz: ZoneInfo
) -> Iterator[tuple[datetime, datetime]]:
    """Yield day-bounded ``(start, end)`` pieces covering ``[start, end)``.

    Both arguments must be aware; pieces are UTC.
    """
    current = start.astimezone(timezone.utc)
    end = end.astimezone(timezone.utc)
    while current < end:
        next_day = local_date(current, tz) + timedelta(days=1)
        midnight = at_local_clock(next_day, 0, tz)
        piece_end = midnight if midnight < end else end
        yield current, piece_end
        current = piece_end


def duration_microseconds(start: datetime, end: datetime) -> int:
    """Exact elapsed microseconds between two aware instants."""
    delta = end.astimezone(timezone.utc) - start.astimezone(timezone.utc)
    return delta // timedelta(microseconds=1)


def duration_hours(start: datetime, end: datetime) -> float:
    return duration_microseconds(start, end) / MICROSECONDS_PER_HOUR
