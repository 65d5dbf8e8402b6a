"""Boundary: wall-clock strings and query values <-> absolute instants.

Every instant the engine compares is an aware datetime in UTC. Values enter
through to_instant() and resolve(); nothing downstream branches on the input
variant or compares datetimes that carry different wall-clock zones.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from opening_times.types import InvalidClockTimeError, UnknownTimezoneError

UTC = timezone.utc

_CLOCK_RE = re.compile(r"^(\d{2}):(\d{2})$")


def parse_clock(value: str) -> time:
    """Parse a 24-hour 'HH:MM' string to a time object.

    Raises InvalidClockTimeError for anything else, including '24:00',
    seconds, or single-digit hours.
    """
    if not isinstance(value, str):
        raise InvalidClockTimeError(value)
    match = _CLOCK_RE.match(value)
    if match is None:
        raise InvalidClockTimeError(value)
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidClockTimeError(value)
    return time(hour, minute)


def get_zone(tz: str | tzinfo | None) -> tzinfo | None:
    """Resolve a timezone name to a tzinfo. None stays None (local zone)."""
    if tz is None or isinstance(tz, tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except ZoneInfoNotFoundError as exc:
        raise UnknownTimezoneError(tz) from exc
    except (ValueError, TypeError) as exc:
        raise UnknownTimezoneError(tz, reason=str(exc)) from exc


def _localize(naive: datetime, zone: tzinfo | None) -> datetime:
    """Attach a zone to a naive wall-clock datetime and return it in UTC.

    With zone=None the naive value is read as local system time.
    """
    if zone is None:
        return naive.astimezone().astimezone(UTC)
    return naive.replace(tzinfo=zone).astimezone(UTC)


def to_instant(value: datetime | str, zone: tzinfo | None = None) -> datetime:
    """Normalise a query value to an aware UTC datetime.

    - aware datetime: converted as-is
    - naive datetime: wall-clock time in `zone` (local time if None)
    - str: ISO 8601, with or without offset (a trailing 'Z' means UTC)
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid instant: {value!r} - {exc}") from exc
    if not isinstance(value, datetime):
        raise TypeError(
            f"instant must be a datetime or ISO string, got {type(value).__name__}"
        )
    if value.tzinfo is None:
        return _localize(value, zone)
    return value.astimezone(UTC)


def calendar_day(instant: datetime, zone: tzinfo | None = None) -> date:
    """Calendar date on which `instant` falls in `zone` (local time if None)."""
    return instant.astimezone(zone).date()


def resolve(clock: str, day: date, zone: tzinfo | None) -> datetime:
    """Anchor an 'HH:MM' string to `day` in `zone`. Returns UTC."""
    return _localize(datetime.combine(day, parse_clock(clock)), zone)


def start_of_day(day: date, zone: tzinfo | None) -> datetime:
    """Midnight opening `day` in `zone`, in UTC."""
    return _localize(datetime.combine(day, time(0, 0)), zone)


def end_of_day(day: date, zone: tzinfo | None) -> datetime:
    """Midnight closing `day` (the next day's 00:00) in `zone`, in UTC."""
    return start_of_day(day + timedelta(days=1), zone)


def resolve_clock_time(
    clock: str,
    day: date | datetime,
    timezone: str | tzinfo | None = None,
) -> datetime:
    """Convert a rule's 'HH:MM' string to an absolute instant on `day`.

    If `day` is a datetime, its own wall-clock date is used, so an evening
    in New York stays on the New York date even when UTC has rolled over.
    The result is expressed in `timezone` (local time if None).
    """
    zone = get_zone(timezone)
    if isinstance(day, datetime):
        day = day.date()
    return resolve(clock, day, zone).astimezone(zone)
