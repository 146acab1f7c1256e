from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

LOGGER = logging.getLogger(__name__)

DEFAULT_EVENTS_PATH = Path("data/events.json")
DEFAULT_EVENTS_API_BASE_URL = "http://localhost:3000"
_BACKENDS = {"local", "http"}


@dataclass(frozen=True)
class Settings:
    events_backend: str
    events_api_base_url: str
    events_api_timeout_seconds: float
    events_path: Path
    notification_tick_seconds: int
    events_refresh_seconds: int
    notifications_enabled: bool


_DEV_ENVS = {"dev", "development", "local"}


def resolve_env_label(raw_env: dict[str, str] | None = None) -> str:
    source = raw_env if raw_env is not None else os.environ
    env = source.get("APP_ENV", "prod").strip().lower()
    return "dev" if env in _DEV_ENVS else "prod"


def load_settings() -> Settings:
    _load_dotenv()

    env = os.environ
    events_backend = env.get("EVENTS_BACKEND", "local").strip().lower()
    if events_backend not in _BACKENDS:
        LOGGER.warning("Unknown EVENTS_BACKEND=%s; falling back to local", events_backend)
        events_backend = "local"
    events_api_base_url = env.get("EVENTS_API_BASE_URL", DEFAULT_EVENTS_API_BASE_URL).strip()
    if not events_api_base_url:
        events_api_base_url = DEFAULT_EVENTS_API_BASE_URL
    events_api_timeout_seconds = _parse_optional_float(env.get("EVENTS_API_TIMEOUT_SECONDS"), 10.0)
    events_path = Path(env.get("EVENTS_PATH", DEFAULT_EVENTS_PATH))
    notification_tick_seconds = max(1, _parse_int_with_default(env.get("NOTIFICATION_TICK_SECONDS"), 1))
    events_refresh_seconds = max(1, _parse_int_with_default(env.get("EVENTS_REFRESH_SECONDS"), 60))
    notifications_enabled = _parse_optional_bool(env.get("NOTIFICATIONS_ENABLED"))
    if notifications_enabled is None:
        notifications_enabled = True
    return Settings(
        events_backend=events_backend,
        events_api_base_url=events_api_base_url,
        events_api_timeout_seconds=events_api_timeout_seconds,
        events_path=events_path,
        notification_tick_seconds=notification_tick_seconds,
        events_refresh_seconds=events_refresh_seconds,
        notifications_enabled=notifications_enabled,
    )


def _load_dotenv() -> None:
    # .env is looked up from the working directory, not from the package location
    load_dotenv(find_dotenv(usecwd=True))


def _parse_optional_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    return float(trimmed)


def _parse_optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    trimmed = value.strip().lower()
    if not trimmed:
        return None
    return trimmed in {"1", "true", "yes", "on"}


def _parse_int_with_default(value: str | None, default: int) -> int:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    return int(trimmed)
