from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date
from typing import List, Optional, Sequence

from rapla_ics.config import Settings, get_settings
from rapla_ics.ics_export import write_calendar
from rapla_ics.models import Event
from rapla_ics.schedule import ScheduleClient
from rapla_ics.transport import PlaywrightTransport


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a Rapla schedule to an iCalendar file")
    parser.add_argument("--url", type=str, help="Rapla week view URL (overrides RAPLA_URL)", default=None)
    parser.add_argument("--start", type=str, help="Start date YYYY-MM-DD", default=None)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--end", type=str, help="End date YYYY-MM-DD, fetch every week up to it", default=None)
    mode.add_argument("--all", action="store_true", help="Fetch weeks until no more events show up")
    parser.add_argument("--max-empty", type=int, default=None, help="Empty weeks tolerated by --all")
    parser.add_argument("--type", type=str, default=None, help="Only keep events whose type contains TYPE")
    parser.add_argument("--upcoming", action="store_true", help="Drop events before today")
    parser.add_argument("--output", type=str, default=None, help="Output .ics path")
    parser.add_argument("--verbose", action="store_true", help="Log every request")
    return parser.parse_args(argv)


async def collect_events(args: argparse.Namespace, settings: Settings) -> List[Event]:
    start_date = date.fromisoformat(args.start) if args.start else date.today()
    async with PlaywrightTransport(timeout_ms=settings.request_timeout_ms) as transport:
        client = ScheduleClient(settings.base_url, transport.fetch)
        if args.all:
            max_empty = settings.max_empty_weeks if args.max_empty is None else args.max_empty
            return await client.fetch_all(start_date, max_empty_weeks=max_empty)
        if args.end:
            return await client.fetch_weeks(start_date, date.fromisoformat(args.end))
        return await client.fetch_week(start_date)


def filter_events(events: List[Event], event_type: Optional[str], upcoming: bool) -> List[Event]:
    if event_type:
        events = [e for e in events if e.is_type(event_type)]
    if upcoming:
        events = [e for e in events if e.is_current()]
    return events


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    settings = get_settings()
    if args.url:
        settings.base_url = args.url
    if not settings.base_url:
        logging.error("No Rapla URL given; set RAPLA_URL or pass --url")
        return 2

    events = asyncio.run(collect_events(args, settings))
    events = filter_events(events, args.type, args.upcoming)
    if not events:
        logging.warning("No events parsed; writing empty calendar")

    write_calendar(events, args.output or settings.output_file, settings.timezone)
    logging.info("Done")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
