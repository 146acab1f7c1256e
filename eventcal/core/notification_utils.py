from __future__ import annotations

from datetime import datetime
from typing import Collection, Iterable

from eventcal.core.date_time import parse_date_time
from eventcal.core.models import Event, ValidInstant

_SECONDS_PER_MINUTE = 60


def minutes_until_start(event: Event, now: datetime) -> float | None:
    start = parse_date_time(event.date, event.start_time)
    if not isinstance(start, ValidInstant):
        return None
    return (start.at - now).total_seconds() / _SECONDS_PER_MINUTE


def get_upcoming_events(
    events: Iterable[Event],
    now: datetime,
    notified_ids: Collection[str],
) -> list[Event]:
    """Events whose notification window ``[start - notification_time, start]`` holds ``now``."""
    upcoming = []
    for event in events:
        if event.id in notified_ids:
            continue
        minutes = minutes_until_start(event, now)
        if minutes is None:
            continue
        if 0 <= minutes <= event.notification_time:
            upcoming.append(event)
    return upcoming


def create_notification_message(event: Event) -> str:
    return f"{event.notification_time}분 후 {event.title} 일정이 시작됩니다."
