from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Sequence

from eventcal.core.event_utils import get_filtered_events
from eventcal.core.models import Event, ViewMode

LOGGER = logging.getLogger(__name__)

Subscriber = Callable[[list[Event]], None]


class SearchState:
    """Search term plus the inputs of the visible event list.

    Every setter recomputes ``filtered_events`` right away and pushes the new
    list to subscribers, so readers never see a view built from old inputs.
    """

    def __init__(
        self,
        events: Sequence[Event],
        current_date: date | datetime,
        view: ViewMode,
        search_term: str = "",
    ) -> None:
        self._events = list(events)
        self._current_date = current_date
        self._view: ViewMode = view
        self._search_term = search_term
        self._subscribers: list[Subscriber] = []
        self._filtered: list[Event] = []
        self._recompute()

    @property
    def search_term(self) -> str:
        return self._search_term

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    @property
    def current_date(self) -> date | datetime:
        return self._current_date

    @property
    def view(self) -> ViewMode:
        return self._view

    @property
    def filtered_events(self) -> list[Event]:
        return list(self._filtered)

    def set_search_term(self, term: str) -> None:
        self._search_term = term
        self._recompute()

    def set_events(self, events: Sequence[Event]) -> None:
        self._events = list(events)
        self._recompute()

    def set_current_date(self, current_date: date | datetime) -> None:
        self._current_date = current_date
        self._recompute()

    def set_view(self, view: ViewMode) -> None:
        self._view = view
        self._recompute()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _recompute(self) -> None:
        self._filtered = get_filtered_events(
            self._events,
            self._search_term,
            self._current_date,
            self._view,
        )
        LOGGER.debug(
            "Search recomputed: term=%r view=%s anchor=%s visible=%s",
            self._search_term,
            self._view,
            self._current_date,
            len(self._filtered),
        )
        for callback in list(self._subscribers):
            callback(self.filtered_events)
