"""Event persistence abstraction.

Provides EventStore interface with two implementations:
- LocalEventStore: keeps events in a local JSON file
- HttpEventStore: talks to a REST events API (``/api/events``)

Factory ``get_store()`` selects implementation based on EVENTS_BACKEND.
"""

from __future__ import annotations

import abc
import asyncio
import json
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from eventcal.core.models import Event, EventForm

LOGGER = logging.getLogger(__name__)

DEFAULT_EVENTS_PATH = Path("data/events.json")
DEFAULT_API_BASE_URL = "http://localhost:3000"


@dataclass(frozen=True)
class EventStoreError(RuntimeError):
    status_code: int
    message: str

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Abstract interface
# ---------------------------------------------------------------------------

class EventStore(abc.ABC):
    """Abstract store of events."""

    @abc.abstractmethod
    async def list_events(self) -> list[Event]:
        ...

    @abc.abstractmethod
    async def create_event(self, event: EventForm | Event) -> Event:
        """Persist a new event. A store-assigned id replaces any id passed in."""
        ...

    @abc.abstractmethod
    async def update_event(self, event: Event) -> Event:
        ...

    @abc.abstractmethod
    async def delete_event(self, event_id: str) -> None:
        ...


# ---------------------------------------------------------------------------
# Local (JSON file) store
# ---------------------------------------------------------------------------

class LocalEventStore(EventStore):
    def __init__(self, path: Path | str = DEFAULT_EVENTS_PATH) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[dict[str, Any]]:
        try:
            if not self._path.exists():
                return []
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError:
            LOGGER.warning("Events file is not valid JSON, starting empty: path=%s", self._path)
            return []
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Events file read failed: path=%s error=%s", self._path, exc)
            raise EventStoreError(500, f"Events file read failed: {exc}") from exc
        items = payload.get("events") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    def _save_atomic(self, items: list[dict[str, Any]]) -> None:
        tmp_path = self._path.with_suffix(".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump({"events": items}, handle, ensure_ascii=False, indent=2)
            tmp_path.replace(self._path)
        except OSError as exc:
            LOGGER.warning("Events file write failed: path=%s error=%s", self._path, exc)
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError:
                LOGGER.debug("Temp events file cleanup failed: path=%s", tmp_path)
            raise EventStoreError(500, f"Events file write failed: {exc}") from exc

    async def list_events(self) -> list[Event]:
        async with self._lock:
            items = self._load()
        events: list[Event] = []
        for index, item in enumerate(items):
            try:
                events.append(Event.from_dict(item))
            except ValueError:
                LOGGER.warning("Skipping stored event without id: index=%s path=%s", index, self._path)
        return events

    async def create_event(self, event: EventForm | Event) -> Event:
        form = event.to_form() if isinstance(event, Event) else event
        async with self._lock:
            items = self._load()
            existing_ids = {item.get("id") for item in items}
            event_id = _generate_id(existing_ids)
            created = Event.from_form(form, event_id)
            items.append(created.to_dict())
            self._save_atomic(items)
        LOGGER.info("Event created: event_id=%s date=%s backend=local", created.id, created.date)
        return created

    async def update_event(self, event: Event) -> Event:
        async with self._lock:
            items = self._load()
            for index, item in enumerate(items):
                if item.get("id") == event.id:
                    items[index] = event.to_dict()
                    break
            else:
                raise EventStoreError(404, f"Event not found: {event.id}")
            self._save_atomic(items)
        LOGGER.info("Event updated: event_id=%s backend=local", event.id)
        return event

    async def delete_event(self, event_id: str) -> None:
        async with self._lock:
            items = self._load()
            remaining = [item for item in items if item.get("id") != event_id]
            if len(remaining) == len(items):
                raise EventStoreError(404, f"Event not found: {event_id}")
            self._save_atomic(remaining)
        LOGGER.info("Event deleted: event_id=%s backend=local", event_id)


# ---------------------------------------------------------------------------
# REST store
# ---------------------------------------------------------------------------

class HttpEventStore(EventStore):
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def _request(self, method: str, path: str, *, json_body: dict[str, Any] | None = None) -> httpx.Response:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            try:
                response = await client.request(method, url, json=json_body)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                LOGGER.warning("Events API request failed: method=%s path=%s error=%s", method, path, exc)
                raise EventStoreError(0, f"Events API request failed: {exc}") from exc
        if response.status_code >= 400:
            LOGGER.warning(
                "Events API error: method=%s path=%s status=%s",
                method,
                path,
                response.status_code,
            )
            raise EventStoreError(
                response.status_code,
                f"Events API error {response.status_code}: {response.text[:200]}",
            )
        return response

    async def list_events(self) -> list[Event]:
        response = await self._request("GET", "/api/events")
        payload = _json_or_error(response)
        items = payload.get("events") if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise EventStoreError(response.status_code, "Events API returned no event list")
        try:
            return [Event.from_dict(item) for item in items if isinstance(item, dict)]
        except ValueError as exc:
            raise EventStoreError(response.status_code, str(exc)) from exc

    async def create_event(self, event: EventForm | Event) -> Event:
        form = event.to_form() if isinstance(event, Event) else event
        response = await self._request("POST", "/api/events", json_body=form.to_dict())
        created = _event_from_response(response)
        LOGGER.info("Event created: event_id=%s date=%s backend=http", created.id, created.date)
        return created

    async def update_event(self, event: Event) -> Event:
        response = await self._request("PUT", f"/api/events/{event.id}", json_body=event.to_dict())
        LOGGER.info("Event updated: event_id=%s backend=http", event.id)
        if not response.content:
            return event
        return _event_from_response(response)

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", f"/api/events/{event_id}")
        LOGGER.info("Event deleted: event_id=%s backend=http", event_id)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def get_store(settings: Any = None) -> EventStore:
    """Return the configured EventStore.

    * ``EVENTS_BACKEND=http`` → HttpEventStore against EVENTS_API_BASE_URL
    * otherwise → LocalEventStore at EVENTS_PATH
    """
    if settings is not None:
        backend = settings.events_backend
        base_url = settings.events_api_base_url
        timeout_seconds = settings.events_api_timeout_seconds
        path = settings.events_path
    else:
        backend = os.getenv("EVENTS_BACKEND", "local").strip().lower()
        base_url = os.getenv("EVENTS_API_BASE_URL", DEFAULT_API_BASE_URL).strip()
        timeout_seconds = 10.0
        path = Path(os.getenv("EVENTS_PATH", str(DEFAULT_EVENTS_PATH)))
    if backend == "http":
        LOGGER.info("Events backend: http base_url=%s", base_url)
        return HttpEventStore(base_url=base_url, timeout_seconds=timeout_seconds)
    LOGGER.info("Events backend: local path=%s", path)
    return LocalEventStore(path)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _generate_id(existing_ids: set[object]) -> str:
    while True:
        candidate = uuid.uuid4().hex[:8]
        if candidate not in existing_ids:
            return candidate


def _json_or_error(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise EventStoreError(response.status_code, "Events API returned invalid JSON") from exc


def _event_from_response(response: httpx.Response) -> Event:
    payload = _json_or_error(response)
    if not isinstance(payload, dict):
        raise EventStoreError(response.status_code, "Events API returned no event")
    try:
        return Event.from_dict(payload)
    except ValueError as exc:
        raise EventStoreError(response.status_code, str(exc)) from exc
