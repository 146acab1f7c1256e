from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Sequence

from eventcal.core.error_messages import REQUIRED_FIELDS_TEXT, TIME_SETTINGS_TEXT
from eventcal.core.event_overlap import find_overlapping_events
from eventcal.core.models import Alert, Event, EventForm

LOGGER = logging.getLogger(__name__)

SaveCallback = Callable[[Event | EventForm], Awaitable[Any]]
AlertCallback = Callable[[Alert], None]

_DRAFT_ID = ""


class EventSubmitter:
    """Validate a form and save it, stopping at an overlap dialog on conflicts."""

    def __init__(
        self,
        save_event: SaveCallback,
        reset_form: Callable[[], None],
        *,
        on_alert: AlertCallback | None = None,
    ) -> None:
        self._save_event = save_event
        self._reset_form = reset_form
        self._on_alert = on_alert
        self.is_overlap_dialog_open = False
        self.overlapping_events: list[Event] = []
        self._pending: Event | EventForm | None = None

    def _alert_error(self, title: str) -> None:
        if self._on_alert is not None:
            self._on_alert(Alert(title=title, status="error", duration=3000, is_closable=True))

    async def add_or_update_event(
        self,
        form: Event | EventForm,
        events: Sequence[Event],
        start_time_error: str | None,
        end_time_error: str | None,
        editing_event: Event | None = None,
    ) -> bool:
        """Return True when the event was saved right away."""
        if not form.title or not form.date or not form.start_time or not form.end_time:
            self._alert_error(REQUIRED_FIELDS_TEXT)
            return False
        if start_time_error or end_time_error:
            self._alert_error(TIME_SETTINGS_TEXT)
            return False

        payload: Event | EventForm
        if editing_event is not None:
            base = form.to_form() if isinstance(form, Event) else form
            payload = Event.from_form(base, editing_event.id)
        else:
            payload = form
        candidate = payload if isinstance(payload, Event) else Event.from_form(payload, _DRAFT_ID)

        pool = events
        if editing_event is not None:
            pool = [event for event in events if event.id != editing_event.id]
        overlapping = find_overlapping_events(candidate, pool)
        if overlapping:
            LOGGER.info(
                "Overlap detected: date=%s %s-%s conflicts=%s",
                candidate.date,
                candidate.start_time,
                candidate.end_time,
                [event.id for event in overlapping],
            )
            self._pending = payload
            self.overlapping_events = overlapping
            self.is_overlap_dialog_open = True
            return False

        await self._save_event(payload)
        self._reset_form()
        return True

    async def confirm_overlap(self) -> bool:
        """Save the event held by the overlap dialog despite the conflicts."""
        pending = self._pending
        self._close_dialog()
        if pending is None:
            return False
        await self._save_event(pending)
        self._reset_form()
        return True

    def cancel_overlap(self) -> None:
        self._close_dialog()

    def _close_dialog(self) -> None:
        self.is_overlap_dialog_open = False
        self.overlapping_events = []
        self._pending = None
