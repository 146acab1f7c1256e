"""NotificationScheduler: tick dedup, dismissal, and timer lifecycle."""

from __future__ import annotations

import asyncio
import threading
from datetime import datetime, timedelta

import pytest

from conftest import make_event
from eventcal.core.models import NotificationRecord, RepeatInfo
from eventcal.core.notification_scheduler import JOB_ID, NotificationScheduler


def _events():
    weekly = RepeatInfo(type="weekly", interval=1)
    return [
        make_event("1", title="이벤트 1", date="2024-07-01", start_time="10:00", end_time="11:00",
                   repeat=weekly, notification_time=30),
        make_event("2", title="이벤트 2", date="2024-07-02", start_time="11:00", end_time="12:00",
                   repeat=weekly, notification_time=30),
        make_event("3", title="event 3", date="2024-07-03", start_time="12:00", end_time="13:00",
                   repeat=weekly, notification_time=30),
    ]


def test_initial_state_is_empty() -> None:
    scheduler = NotificationScheduler(_events())
    assert scheduler.notifications == []
    assert scheduler.notified_events == frozenset()
    assert scheduler.running is False


def test_tick_creates_notification_when_window_opens() -> None:
    scheduler = NotificationScheduler(_events())
    created = scheduler.tick(datetime(2024, 7, 1, 9, 30))
    assert created == [NotificationRecord(id="1", message="30분 후 이벤트 1 일정이 시작됩니다.")]
    assert scheduler.notifications == created
    assert scheduler.notified_events == {"1"}


def test_remove_notification_by_index() -> None:
    scheduler = NotificationScheduler(_events())
    scheduler.tick(datetime(2024, 7, 1, 9, 30))
    scheduler.remove_notification(0)
    assert scheduler.notifications == []


def test_remove_notification_out_of_range_is_ignored() -> None:
    scheduler = NotificationScheduler(_events())
    scheduler.tick(datetime(2024, 7, 1, 9, 30))
    scheduler.remove_notification(5)
    scheduler.remove_notification(-1)
    assert len(scheduler.notifications) == 1


def test_no_duplicate_notification_on_later_ticks() -> None:
    scheduler = NotificationScheduler(_events())
    start = datetime(2024, 7, 1, 9, 30)
    scheduler.tick(start)
    assert scheduler.tick(start + timedelta(seconds=1)) == []
    assert scheduler.tick(start + timedelta(minutes=10)) == []
    assert len(scheduler.notifications) == 1
    assert "1" in scheduler.notified_events


def test_dismissed_notification_is_not_recreated() -> None:
    scheduler = NotificationScheduler(_events())
    scheduler.tick(datetime(2024, 7, 1, 9, 30))
    scheduler.remove_notification(0)
    assert scheduler.tick(datetime(2024, 7, 1, 9, 45)) == []
    assert scheduler.notifications == []
    assert scheduler.notified_events == {"1"}


def test_tick_reads_current_events_from_callable() -> None:
    events = []
    scheduler = NotificationScheduler(lambda: events)
    assert scheduler.tick(datetime(2024, 7, 1, 9, 30)) == []
    events.extend(_events())
    assert [record.id for record in scheduler.tick(datetime(2024, 7, 1, 9, 31))] == ["1"]


def test_tick_uses_clock_and_reports_to_callback() -> None:
    received: list[NotificationRecord] = []
    scheduler = NotificationScheduler(
        _events(),
        clock=lambda: datetime(2024, 7, 2, 10, 45),
        on_notify=received.append,
    )
    scheduler.tick()
    assert [record.id for record in received] == ["2"]


def test_failing_callback_does_not_lose_state() -> None:
    def boom(record: NotificationRecord) -> None:
        raise RuntimeError("ui gone")

    scheduler = NotificationScheduler(_events(), on_notify=boom)
    scheduler.tick(datetime(2024, 7, 1, 9, 30))
    assert scheduler.notified_events == {"1"}


def test_tick_seconds_from_env(monkeypatch) -> None:
    monkeypatch.setenv("NOTIFICATION_TICK_SECONDS", "5")
    assert NotificationScheduler(_events())._tick_seconds == 5
    monkeypatch.setenv("NOTIFICATION_TICK_SECONDS", "oops")
    assert NotificationScheduler(_events())._tick_seconds == 1


def test_explicit_tick_seconds_is_clamped_not_replaced(monkeypatch) -> None:
    monkeypatch.setenv("NOTIFICATION_TICK_SECONDS", "5")
    assert NotificationScheduler(_events(), tick_seconds=0)._tick_seconds == 1
    assert NotificationScheduler(_events(), tick_seconds=3)._tick_seconds == 3


def test_start_outside_event_loop_raises() -> None:
    scheduler = NotificationScheduler(_events())
    result: list[BaseException | None] = []

    def run_in_thread_without_loop() -> None:
        try:
            scheduler.start()
            result.append(None)
        except RuntimeError as e:
            result.append(e)

    t = threading.Thread(target=run_in_thread_without_loop)
    t.start()
    t.join()
    assert len(result) == 1
    assert isinstance(result[0], RuntimeError)
    assert scheduler.running is False


def test_interval_job_fires_ticks_and_stops_on_exit() -> None:
    now = datetime(2024, 7, 1, 9, 30)

    async def run() -> NotificationScheduler:
        scheduler = NotificationScheduler(_events(), tick_seconds=1, clock=lambda: now)
        async with scheduler:
            assert scheduler.running
            assert scheduler._scheduler.get_job(JOB_ID) is not None
            await asyncio.sleep(1.5)
        assert scheduler.running is False
        return scheduler

    scheduler = asyncio.run(run())
    assert [record.id for record in scheduler.notifications] == ["1"]


def test_shutdown_is_idempotent_and_releases_job() -> None:
    ticks: list[datetime] = []

    def clock() -> datetime:
        ticks.append(datetime(2024, 7, 1, 9, 30))
        return ticks[-1]

    async def run() -> None:
        scheduler = NotificationScheduler(_events(), tick_seconds=1, clock=clock)
        scheduler.start()
        scheduler.start()
        await asyncio.sleep(1.2)
        scheduler.shutdown()
        scheduler.shutdown()
        fired = len(ticks)
        await asyncio.sleep(1.2)
        assert len(ticks) == fired
        assert scheduler._scheduler.get_jobs() == []

    asyncio.run(run())
    assert ticks


def test_scope_exit_on_error_still_stops_timer() -> None:
    async def run() -> NotificationScheduler:
        scheduler = NotificationScheduler(_events(), tick_seconds=1)
        with pytest.raises(ValueError):
            async with scheduler:
                raise ValueError("session torn down")
        return scheduler

    assert asyncio.run(run()).running is False
