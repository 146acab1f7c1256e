from __future__ import annotations

from dataclasses import dataclass

from eventcal.core.error_messages import END_TIME_ERROR_TEXT, START_TIME_ERROR_TEXT


@dataclass(frozen=True)
class TimeErrorRecord:
    start_time_error: str | None = None
    end_time_error: str | None = None

    @property
    def has_error(self) -> bool:
        return bool(self.start_time_error or self.end_time_error)


def get_time_error_message(start: str, end: str) -> TimeErrorRecord:
    if not start or not end:
        return TimeErrorRecord()
    # HH:MM compares correctly as text
    if start >= end:
        return TimeErrorRecord(
            start_time_error=START_TIME_ERROR_TEXT,
            end_time_error=END_TIME_ERROR_TEXT,
        )
    return TimeErrorRecord()
