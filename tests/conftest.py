import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from eventcal.core.models import Event, RepeatInfo  # noqa: E402


def make_event(
    event_id: str,
    *,
    title: str = "기존 회의",
    date: str = "2024-10-01",
    start_time: str = "09:00",
    end_time: str = "10:00",
    description: str = "기존 팀 미팅",
    location: str = "회의실 B",
    category: str = "업무",
    repeat: RepeatInfo | None = None,
    notification_time: int = 10,
) -> Event:
    return Event(
        id=event_id,
        title=title,
        date=date,
        start_time=start_time,
        end_time=end_time,
        description=description,
        location=location,
        category=category,
        repeat=repeat or RepeatInfo(),
        notification_time=notification_time,
    )


@pytest.fixture
def july_events() -> list[Event]:
    return [
        make_event("1", title="이벤트 1", date="2024-07-01", start_time="09:00", end_time="10:00",
                   description="이벤트 1 설명", location="위치 1"),
        make_event("2", title="이벤트 2", date="2024-07-02", start_time="10:00", end_time="11:00",
                   description="이벤트 2 설명", location="위치 2", category="개인"),
        make_event("3", title="event 3", date="2024-07-03", start_time="11:00", end_time="12:00",
                   description="event 3 설명", location="위치 3"),
        make_event("4", title="이벤트 4", date="2024-07-24", start_time="12:00", end_time="13:00",
                   description="이벤트 4 설명", location="위치 4", category="개인"),
        make_event("5", title="event 5", date="2024-08-01", start_time="13:00", end_time="14:00",
                   description="event 5 설명", location="위치 5"),
    ]
