from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from eventcal.core.date_time import parse_date
from eventcal.core.date_utils import as_date, get_week_dates, is_date_in_range
from eventcal.core.models import Event, ViewMode


def _contains_term(target: str, term: str) -> bool:
    return term.lower() in target.lower()


def _matches_search(event: Event, term: str) -> bool:
    if not term:
        return True
    return (
        _contains_term(event.title, term)
        or _contains_term(event.description, term)
        or _contains_term(event.location, term)
    )


def _in_view_range(event: Event, anchor: date, view: ViewMode) -> bool:
    event_date = parse_date(event.date)
    if event_date is None:
        return False
    if view == "week":
        week = get_week_dates(anchor)
        return is_date_in_range(event_date, week[0], week[-1])
    if view == "month":
        return event_date.year == anchor.year and event_date.month == anchor.month
    raise ValueError(f"Unknown view: {view!r}")


def get_filtered_events(
    events: Iterable[Event],
    search_term: str,
    anchor: date | datetime,
    view: ViewMode,
) -> list[Event]:
    """Events visible in the week/month around ``anchor`` that match ``search_term``.

    Search is a case-insensitive substring match on title, description or
    location. Source order is preserved.
    """
    anchor_date = as_date(anchor)
    return [
        event
        for event in events
        if _in_view_range(event, anchor_date, view) and _matches_search(event, search_term)
    ]
