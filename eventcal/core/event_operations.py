"""Current event list backed by an EventStore.

Store failures never escape: they are logged and reported to the
presentation layer as error alerts, and the current list is left as it was.
"""

from __future__ import annotations

import logging
from typing import Callable

from eventcal.core.error_messages import (
    EVENT_ADDED_TEXT,
    EVENT_DELETED_TEXT,
    EVENT_UPDATED_TEXT,
    LOAD_COMPLETE_TEXT,
    map_store_error_text,
)
from eventcal.core.event_store import EventStore, EventStoreError
from eventcal.core.models import Alert, AlertStatus, Event, EventForm

LOGGER = logging.getLogger(__name__)

AlertCallback = Callable[[Alert], None]
EventsListener = Callable[[list[Event]], None]


class EventOperations:
    def __init__(
        self,
        store: EventStore,
        *,
        editing: bool = False,
        on_alert: AlertCallback | None = None,
        on_events_changed: EventsListener | None = None,
    ) -> None:
        self._store = store
        self.editing = editing
        self._on_alert = on_alert
        self._on_events_changed = on_events_changed
        self._events: list[Event] = []

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    def _alert(self, title: str, status: AlertStatus, *, duration: int = 3000) -> None:
        if self._on_alert is None:
            return
        self._on_alert(Alert(title=title, status=status, duration=duration, is_closable=True))

    def _set_events(self, events: list[Event]) -> None:
        self._events = list(events)
        if self._on_events_changed is not None:
            self._on_events_changed(self.events)

    async def fetch_events(self) -> bool:
        try:
            events = await self._store.list_events()
        except EventStoreError as exc:
            LOGGER.exception("Events fetch failed: status=%s", exc.status_code)
            self._alert(map_store_error_text("fetch"), "error")
            return False
        self._set_events(events)
        LOGGER.info("Events fetched: count=%s", len(events))
        return True

    async def init(self) -> None:
        if await self.fetch_events():
            self._alert(LOAD_COMPLETE_TEXT, "info", duration=1000)

    async def save_event(self, event: Event | EventForm) -> Event | None:
        try:
            if self.editing:
                if not isinstance(event, Event):
                    raise EventStoreError(400, "Editing requires an event with an id")
                saved = await self._store.update_event(event)
            else:
                saved = await self._store.create_event(event)
        except EventStoreError as exc:
            LOGGER.exception("Event save failed: editing=%s status=%s", self.editing, exc.status_code)
            self._alert(map_store_error_text("save"), "error")
            return None
        await self.fetch_events()
        self._alert(EVENT_UPDATED_TEXT if self.editing else EVENT_ADDED_TEXT, "success")
        return saved

    async def delete_event(self, event_id: str) -> bool:
        try:
            await self._store.delete_event(event_id)
        except EventStoreError as exc:
            LOGGER.exception("Event delete failed: event_id=%s status=%s", event_id, exc.status_code)
            self._alert(map_store_error_text("delete"), "error")
            return False
        await self.fetch_events()
        self._alert(EVENT_DELETED_TEXT, "info")
        return True
