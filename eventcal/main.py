from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime

from eventcal.core.date_time import parse_date
from eventcal.core.date_utils import format_month, format_week
from eventcal.core.event_operations import EventOperations
from eventcal.core.event_overlap import find_overlapping_events
from eventcal.core.event_store import get_store
from eventcal.core.models import Alert, Event, NotificationRecord
from eventcal.core.notification_scheduler import NotificationScheduler
from eventcal.core.search import SearchState
from eventcal.infra.config import Settings, load_settings, resolve_env_label
from eventcal.infra.logging_config import configure_logging

LOGGER = logging.getLogger(__name__)


def _format_event(event: Event) -> str:
    return f"{event.date} {event.start_time}-{event.end_time} [{event.id}] {event.title}"


def _log_alert(alert: Alert) -> None:
    LOGGER.log(logging.ERROR if alert.status == "error" else logging.INFO, "alert: %s", alert.title)


def _print_notification(record: NotificationRecord) -> None:
    print(f"🔔 {record.message}", flush=True)


def _parse_anchor(value: str | None) -> date:
    if not value:
        return date.today()
    parsed = parse_date(value)
    if parsed is None:
        raise SystemExit(f"Invalid date: {value}")
    return parsed


async def _load_events(settings: Settings) -> EventOperations:
    operations = EventOperations(get_store(settings), on_alert=_log_alert)
    await operations.init()
    return operations


async def _run_list(settings: Settings, args: argparse.Namespace) -> int:
    operations = await _load_events(settings)
    anchor = _parse_anchor(args.date)
    search = SearchState(operations.events, anchor, args.view, search_term=args.search or "")
    label = format_week(anchor) if args.view == "week" else format_month(anchor)
    print(label)
    for event in search.filtered_events:
        print(_format_event(event))
    return 0


async def _run_check(settings: Settings, args: argparse.Namespace) -> int:
    operations = await _load_events(settings)
    candidate = Event(
        id=args.exclude or "",
        title=args.title or "",
        date=args.date,
        start_time=args.start,
        end_time=args.end,
    )
    pool = [event for event in operations.events if event.id != args.exclude]
    overlapping = find_overlapping_events(candidate, pool)
    for event in overlapping:
        print(_format_event(event))
    return 1 if overlapping else 0


async def _refresh_events(operations: EventOperations, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        await operations.fetch_events()


async def _run_watch(settings: Settings, args: argparse.Namespace) -> int:
    if not settings.notifications_enabled:
        LOGGER.info("Notifications disabled by config")
        return 0
    operations = await _load_events(settings)
    scheduler = NotificationScheduler(
        lambda: operations.events,
        tick_seconds=settings.notification_tick_seconds,
        on_notify=_print_notification,
    )
    async with scheduler:
        refresh_seconds = args.refresh or settings.events_refresh_seconds
        refresher = asyncio.create_task(_refresh_events(operations, refresh_seconds))
        try:
            if args.duration:
                await asyncio.sleep(args.duration)
            else:
                await asyncio.Event().wait()
        except asyncio.CancelledError:
            LOGGER.info("Notification watch cancelled")
            raise
        finally:
            refresher.cancel()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="eventcal", description="Calendar events engine")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="Show events of a week or month")
    list_cmd.add_argument("--date", help="Anchor date YYYY-MM-DD (default: today)")
    list_cmd.add_argument("--view", choices=("week", "month"), default="week")
    list_cmd.add_argument("--search", default="")

    check_cmd = sub.add_parser("check", help="List events overlapping a proposed time slot")
    check_cmd.add_argument("--date", required=True)
    check_cmd.add_argument("--start", required=True)
    check_cmd.add_argument("--end", required=True)
    check_cmd.add_argument("--title")
    check_cmd.add_argument("--exclude", help="Event id being edited")

    watch_cmd = sub.add_parser("watch", help="Run the notification loop")
    watch_cmd.add_argument("--duration", type=float, help="Stop after N seconds")
    watch_cmd.add_argument("--refresh", type=float, help="Refetch events every N seconds")
    return parser


_COMMANDS = {
    "list": _run_list,
    "check": _run_check,
    "watch": _run_watch,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()
    settings = load_settings()
    LOGGER.info(
        "eventcal started: command=%s env=%s backend=%s at=%s",
        args.command,
        resolve_env_label(),
        settings.events_backend,
        datetime.now().isoformat(timespec="seconds"),
    )
    try:
        return asyncio.run(_COMMANDS[args.command](settings, args))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
