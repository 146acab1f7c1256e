from __future__ import annotations

from typing import Iterable

from eventcal.core.date_time import convert_event_to_date_range
from eventcal.core.models import Event, ValidInstant


def is_overlapping(first: Event, second: Event) -> bool:
    """Half-open overlap check: back-to-back events do not overlap.

    Events with any unparseable endpoint never overlap with anything.
    """
    a = convert_event_to_date_range(first)
    b = convert_event_to_date_range(second)
    if not (
        isinstance(a.start, ValidInstant)
        and isinstance(a.end, ValidInstant)
        and isinstance(b.start, ValidInstant)
        and isinstance(b.end, ValidInstant)
    ):
        return False
    return a.start.at < b.end.at and b.start.at < a.end.at


def find_overlapping_events(candidate: Event, pool: Iterable[Event]) -> list[Event]:
    # The candidate's own id is not skipped; editors exclude it from the pool.
    return [event for event in pool if is_overlapping(candidate, event)]
