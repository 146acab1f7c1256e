"""Wall-clock parsing of event date/time strings.

parse_date_time() never raises on string input: anything that does not name a
real calendar moment comes back as INVALID so callers can branch on
``instant.is_valid`` instead of catching exceptions.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from eventcal.core.models import INVALID, DateRange, Event, Instant, ValidInstant

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


def parse_date(value: str) -> date | None:
    match = _DATE_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date_time(date_value: str, time_value: str) -> Instant:
    day = parse_date(date_value)
    if day is None:
        return INVALID
    match = _TIME_RE.match(time_value.strip()) if isinstance(time_value, str) else None
    if match is None:
        return INVALID
    hour, minute = (int(part) for part in match.groups())
    if hour > 23 or minute > 59:
        return INVALID
    return ValidInstant(datetime(day.year, day.month, day.day, hour, minute))


def convert_event_to_date_range(event: Event) -> DateRange:
    return DateRange(
        start=parse_date_time(event.date, event.start_time),
        end=parse_date_time(event.date, event.end_time),
    )
