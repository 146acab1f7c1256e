"""Calendar helpers shared by the week and month views.

Weeks run Sunday to Saturday everywhere in this package.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable

from eventcal.core.date_time import parse_date
from eventcal.core.models import Event

DAYS_IN_WEEK = 7


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def get_days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def get_week_start(anchor: date | datetime) -> date:
    day = as_date(anchor)
    # date.weekday(): Monday=0 .. Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % DAYS_IN_WEEK)


def get_week_dates(anchor: date | datetime) -> list[date]:
    start = get_week_start(anchor)
    return [start + timedelta(days=offset) for offset in range(DAYS_IN_WEEK)]


def get_weeks_at_month(anchor: date | datetime) -> list[list[int | None]]:
    """Month grid as rows of seven day numbers, padded with None."""
    day = as_date(anchor)
    first = day.replace(day=1)
    leading = (first.weekday() + 1) % DAYS_IN_WEEK
    cells: list[int | None] = [None] * leading
    cells.extend(range(1, get_days_in_month(day.year, day.month) + 1))
    while len(cells) % DAYS_IN_WEEK:
        cells.append(None)
    return [cells[i : i + DAYS_IN_WEEK] for i in range(0, len(cells), DAYS_IN_WEEK)]


def get_events_for_day(events: Iterable[Event], day: int) -> list[Event]:
    result = []
    for event in events:
        parsed = parse_date(event.date)
        if parsed is not None and parsed.day == day:
            result.append(event)
    return result


def format_week(anchor: date | datetime) -> str:
    # A week belongs to the month that holds its Thursday.
    thursday = get_week_start(anchor) + timedelta(days=4)
    first_of_month = thursday.replace(day=1)
    first_thursday = first_of_month + timedelta(days=(3 - first_of_month.weekday()) % DAYS_IN_WEEK)
    week_number = (thursday - first_thursday).days // DAYS_IN_WEEK + 1
    return f"{thursday.year}년 {thursday.month}월 {week_number}주"


def format_month(anchor: date | datetime) -> str:
    day = as_date(anchor)
    return f"{day.year}년 {day.month}월"


def is_date_in_range(value: date | datetime, range_start: date | datetime, range_end: date | datetime) -> bool:
    return as_date(range_start) <= as_date(value) <= as_date(range_end)


def fill_zero(value: int, size: int = 2) -> str:
    return str(value).zfill(size)


def format_date(anchor: date | datetime, day: int | None = None) -> str:
    value = as_date(anchor)
    return "-".join(
        [
            str(value.year),
            fill_zero(value.month),
            fill_zero(day if day is not None else value.day),
        ]
    )
