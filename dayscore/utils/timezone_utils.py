from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Tuple, Union

import pytz

from dayscore.config import settings
from dayscore.exceptions import InputValidationError
from dayscore.utils.rounding import round_half_up

LocalDateLike = Union[str, date]

# Matches 7:05, 07:05, 23:59
LOCAL_TIME_PATTERN = re.compile(r'^([01]?[0-9]|2[0-3]):([0-5][0-9])$')
LOCAL_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def get_reference_timezone() -> pytz.BaseTzInfo:
    """Zone in which every local date and local time is interpreted."""
    return pytz.timezone(settings.REFERENCE_TIMEZONE)


def get_local_now() -> datetime:
    """Current wall-clock time in the reference timezone."""
    return datetime.now(timezone.utc).astimezone(get_reference_timezone())


def today() -> str:
    """
    Today's date in the reference timezone as YYYY-MM-DD.

    The host's system timezone is never consulted.
    """
    return get_local_now().date().isoformat()


def parse_local_date(value: LocalDateLike) -> date:
    """
    Parse a YYYY-MM-DD string (or pass a date through).

    Raises:
        InputValidationError: malformed string or impossible calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not LOCAL_DATE_PATTERN.match(value):
        raise InputValidationError(f"Invalid date format (YYYY-MM-DD): {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InputValidationError(f"Invalid calendar date: {value}") from e


def parse_local_time(value: str) -> time:
    """Parse an HH:MM (24-hour) string."""
    match = LOCAL_TIME_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise InputValidationError(f"Invalid time format (HH:MM): {value!r}")
    return time(int(match.group(1)), int(match.group(2)))


def local_time_to_instant(local_date: LocalDateLike, local_time: str) -> datetime:
    """
    Convert a local date and wall time into an aware UTC instant.

    pytz ``localize`` picks the offset in force at that wall time, so DST
    transitions of the reference zone are honoured. A wall time repeated by
    a fall-back resolves to its earlier (daylight) instant; a wall time
    skipped by a spring-forward is read with the offset before the gap,
    landing one hour later on the clock.
    """
    naive = datetime.combine(parse_local_date(local_date), parse_local_time(local_time))
    tz = get_reference_timezone()
    try:
        localized = tz.localize(naive, is_dst=None)
    except pytz.exceptions.AmbiguousTimeError:
        localized = tz.localize(naive, is_dst=True)
    except pytz.exceptions.NonExistentTimeError:
        localized = tz.localize(naive, is_dst=False)
    return localized.astimezone(timezone.utc)


def overnight_window(start_time: str, end_time: str, local_date: LocalDateLike) -> Tuple[datetime, datetime]:
    """
    UTC instants of a span that starts on ``local_date``.

    If the end is at or before the start, the end is moved to the next
    calendar day (sleep crossing midnight). Identical times therefore span
    a full day.
    """
    start_instant = local_time_to_instant(local_date, start_time)
    end_instant = local_time_to_instant(local_date, end_time)

    if end_instant <= start_instant:
        next_day = parse_local_date(local_date) + timedelta(days=1)
        end_instant = local_time_to_instant(next_day, end_time)

    return start_instant, end_instant


def duration_minutes(start_time: str, end_time: str, local_date: LocalDateLike) -> int:
    """Whole minutes between two local times, crossing midnight when needed."""
    start_instant, end_instant = overnight_window(start_time, end_time, local_date)
    return round_half_up((end_instant - start_instant).total_seconds() / 60)


def format_duration(duration_mins: int) -> str:
    """Format minutes as "7h 30m", "7h" or "45m"."""
    hours, minutes = divmod(duration_mins, 60)

    if hours == 0:
        return f"{minutes}m"
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes}m"


def instant_to_local_time(instant: datetime) -> str:
    """HH:MM wall time of an aware instant in the reference timezone."""
    return instant.astimezone(get_reference_timezone()).strftime("%H:%M")


def instant_to_local_date(instant: datetime) -> str:
    """YYYY-MM-DD of an aware instant in the reference timezone."""
    return instant.astimezone(get_reference_timezone()).date().isoformat()


def date_range(start: LocalDateLike, end: LocalDateLike) -> Iterator[date]:
    """Yield every calendar date from ``start`` to ``end`` inclusive."""
    current = parse_local_date(start)
    last = parse_local_date(end)
    while current <= last:
        yield current
        current += timedelta(days=1)
