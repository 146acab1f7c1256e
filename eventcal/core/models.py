from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Literal


RepeatType = Literal["none", "daily", "weekly", "monthly", "yearly"]
ViewMode = Literal["week", "month"]
AlertStatus = Literal["info", "success", "warning", "error"]

REPEAT_TYPES: frozenset[str] = frozenset({"none", "daily", "weekly", "monthly", "yearly"})


@dataclass(frozen=True)
class RepeatInfo:
    type: RepeatType = "none"
    interval: int = 0
    end_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type, "interval": self.interval}
        if self.end_date:
            payload["endDate"] = self.end_date
        return payload

    @classmethod
    def from_dict(cls, value: object) -> RepeatInfo:
        if not isinstance(value, dict):
            return cls()
        repeat_type = value.get("type")
        if repeat_type not in REPEAT_TYPES:
            repeat_type = "none"
        interval = value.get("interval")
        if not isinstance(interval, int) or interval < 0:
            interval = 0
        end_date = value.get("endDate")
        return cls(
            type=repeat_type,
            interval=interval,
            end_date=end_date if isinstance(end_date, str) and end_date else None,
        )


@dataclass(frozen=True)
class EventForm:
    """Event fields as entered by the user, before the store assigns an id."""

    title: str
    date: str
    start_time: str
    end_time: str
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatInfo = field(default_factory=RepeatInfo)
    notification_time: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "repeat": self.repeat.to_dict(),
            "notificationTime": self.notification_time,
        }


@dataclass(frozen=True)
class Event:
    """One scheduled occurrence. Treated as immutable; edits produce a new Event."""

    id: str
    title: str
    date: str
    start_time: str
    end_time: str
    description: str = ""
    location: str = ""
    category: str = ""
    repeat: RepeatInfo = field(default_factory=RepeatInfo)
    notification_time: int = 10

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.to_form().to_dict()}

    def to_form(self) -> EventForm:
        return EventForm(
            title=self.title,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            description=self.description,
            location=self.location,
            category=self.category,
            repeat=self.repeat,
            notification_time=self.notification_time,
        )

    def with_changes(self, **changes: Any) -> Event:
        return replace(self, **changes)

    @classmethod
    def from_form(cls, form: EventForm, event_id: str) -> Event:
        return cls(
            id=event_id,
            title=form.title,
            date=form.date,
            start_time=form.start_time,
            end_time=form.end_time,
            description=form.description,
            location=form.location,
            category=form.category,
            repeat=form.repeat,
            notification_time=form.notification_time,
        )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Event:
        event_id = payload.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise ValueError("Event payload is missing a non-empty id")
        notification_time = payload.get("notificationTime", 10)
        if not isinstance(notification_time, int) or notification_time < 0:
            notification_time = 10
        return cls(
            id=event_id,
            title=str(payload.get("title") or ""),
            date=str(payload.get("date") or ""),
            start_time=str(payload.get("startTime") or ""),
            end_time=str(payload.get("endTime") or ""),
            description=str(payload.get("description") or ""),
            location=str(payload.get("location") or ""),
            category=str(payload.get("category") or ""),
            repeat=RepeatInfo.from_dict(payload.get("repeat")),
            notification_time=notification_time,
        )


@dataclass(frozen=True)
class ValidInstant:
    at: datetime

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class InvalidInstant:
    """Result of parsing a date/time pair that does not name a real moment."""

    @property
    def is_valid(self) -> bool:
        return False


Instant = ValidInstant | InvalidInstant

INVALID = InvalidInstant()


@dataclass(frozen=True)
class DateRange:
    start: Instant
    end: Instant

    @property
    def is_valid(self) -> bool:
        return self.start.is_valid and self.end.is_valid


@dataclass(frozen=True)
class NotificationRecord:
    id: str
    message: str


@dataclass(frozen=True)
class Alert:
    """User-facing toast payload handed to the presentation layer."""

    title: str
    status: AlertStatus
    description: str | None = None
    duration: int = 3000
    is_closable: bool = True
