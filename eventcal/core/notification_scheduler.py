"""Polling loop that turns upcoming events into one-shot notifications.

A NotificationScheduler owns two collections for the lifetime of a session:
``notifications`` (what the user currently sees) and ``notified_events``
(ids that already fired). Dismissing a notification only touches the first,
so an event can never alert twice in one session.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime
from typing import Callable, Iterable, Sequence

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from eventcal.core.models import Event, NotificationRecord
from eventcal.core.notification_utils import create_notification_message, get_upcoming_events

LOGGER = logging.getLogger(__name__)

JOB_ID = "notifications:tick"
DEFAULT_TICK_SECONDS = 1

EventsSource = Sequence[Event] | Callable[[], Iterable[Event]]
NotifyCallback = Callable[[NotificationRecord], None]


def _get_tick_seconds() -> int:
    try:
        value = int(os.getenv("NOTIFICATION_TICK_SECONDS", str(DEFAULT_TICK_SECONDS)))
    except ValueError:
        return DEFAULT_TICK_SECONDS
    return max(1, value)


class NotificationScheduler:
    def __init__(
        self,
        events: EventsSource,
        *,
        tick_seconds: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
        on_notify: NotifyCallback | None = None,
    ) -> None:
        self._events = events
        self._tick_seconds = max(1, tick_seconds) if tick_seconds is not None else _get_tick_seconds()
        self._clock = clock
        self._on_notify = on_notify
        self._notifications: list[NotificationRecord] = []
        self._notified_events: set[str] = set()
        self._scheduler = AsyncIOScheduler()
        self._active = False

    @property
    def notifications(self) -> list[NotificationRecord]:
        return list(self._notifications)

    @property
    def notified_events(self) -> frozenset[str]:
        return frozenset(self._notified_events)

    @property
    def running(self) -> bool:
        return self._active

    def set_events(self, events: EventsSource) -> None:
        self._events = events

    def _current_events(self) -> Iterable[Event]:
        if callable(self._events):
            return self._events()
        return self._events

    def tick(self, now: datetime | None = None) -> list[NotificationRecord]:
        """Run one poll: record every newly upcoming event once, in source order."""
        current = now or self._clock()
        upcoming = get_upcoming_events(self._current_events(), current, self._notified_events)
        created: list[NotificationRecord] = []
        for event in upcoming:
            record = NotificationRecord(id=event.id, message=create_notification_message(event))
            self._notifications.append(record)
            self._notified_events.add(event.id)
            created.append(record)
            LOGGER.info(
                "Notification fired: event_id=%s start=%s %s notification_time=%s",
                event.id,
                event.date,
                event.start_time,
                event.notification_time,
            )
        if self._on_notify is not None:
            for record in created:
                try:
                    self._on_notify(record)
                except Exception:
                    LOGGER.exception("Notification callback failed: event_id=%s", record.id)
        return created

    def remove_notification(self, index: int) -> None:
        """Dismiss a visible notification; the event stays suppressed."""
        if not 0 <= index < len(self._notifications):
            LOGGER.warning(
                "Notification remove skipped (out of range): index=%s size=%s",
                index,
                len(self._notifications),
            )
            return
        record = self._notifications.pop(index)
        LOGGER.info("Notification dismissed: event_id=%s index=%s", record.id, index)

    async def _run_tick(self) -> None:
        try:
            self.tick()
        except Exception:
            LOGGER.exception("Notification tick failed")

    def start(self) -> None:
        if self._active:
            LOGGER.info("NotificationScheduler already started, skipping")
            return
        # Ticks run as coroutines on the session loop, never on worker threads.
        loop = asyncio.get_running_loop()
        # APScheduler finishes shutdown on a later loop pass; restart on a fresh instance.
        self._scheduler = AsyncIOScheduler()
        self._scheduler._eventloop = loop
        self._scheduler.add_job(
            self._run_tick,
            trigger=IntervalTrigger(seconds=self._tick_seconds),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        self._active = True
        LOGGER.info("NotificationScheduler started (tick=%s)", self._tick_seconds)

    def shutdown(self) -> None:
        if not self._active:
            return
        self._active = False
        # Removing the job is synchronous: no tick can fire after this point.
        try:
            self._scheduler.remove_job(JOB_ID)
        except Exception:
            LOGGER.debug("Notification job already removed")
        try:
            self._scheduler.shutdown(wait=False)
            LOGGER.info("NotificationScheduler shutdown")
        except Exception:
            LOGGER.exception("NotificationScheduler shutdown error")

    async def __aenter__(self) -> NotificationScheduler:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
