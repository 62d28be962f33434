from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, List, Optional, Union

from .config import DEFAULT_MAX_EMPTY_WEEKS, week_mondays
from .models import Event
from .parser import parse_events_from_html
from .transport import TransportError

Fetch = Callable[[str], Awaitable[str]]


def monday_of(day: Union[date, datetime]) -> date:
    """Monday of the Sunday-based week containing ``day``; Sundays map forward."""
    if isinstance(day, datetime):
        day = day.date()
    # Rapla weeks start on Sunday, but data is keyed on the Monday
    sunday_index = (day.weekday() + 1) % 7
    return day + timedelta(days=1 - sunday_index)


class ScheduleClient:
    def __init__(self, base_url: str, fetch: Fetch):
        self.base_url = base_url
        self.fetch = fetch

    def build_week_url(self, monday: date) -> str:
        return f"{self.base_url}&day={monday.day}&month={monday.month}&year={monday.year}"

    async def fetch_week(self, day: Union[date, datetime]) -> List[Event]:
        monday = monday_of(day)
        url = self.build_week_url(monday)
        logging.info("Fetching schedule %s", url)
        html = await self.fetch(url)
        events = parse_events_from_html(html, monday)
        logging.info("Parsed %d events for week of %s", len(events), monday)
        return events

    async def fetch_weeks(self, start: Union[date, datetime], end: Union[date, datetime]) -> List[Event]:
        mondays = week_mondays(monday_of(start), monday_of(end))
        tasks = [asyncio.ensure_future(self.fetch_week(monday)) for monday in mondays]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # let cancelled fetches settle before the transport goes away
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [event for week in results for event in week]

    async def fetch_all(
        self,
        start: Optional[Union[date, datetime]] = None,
        max_empty_weeks: int = DEFAULT_MAX_EMPTY_WEEKS,
    ) -> List[Event]:
        monday = monday_of(start or date.today())
        events: List[Event] = []
        empty_weeks = 0
        while empty_weeks <= max_empty_weeks:
            try:
                week = await self.fetch_week(monday)
            except (TransportError, OSError, asyncio.TimeoutError) as exc:
                logging.warning("Stopping scan at week of %s: %s", monday, exc)
                break
            empty_weeks = 0 if week else empty_weeks + 1
            events.extend(week)
            monday += timedelta(days=7)
        logging.info("Scan finished with %d events", len(events))
        return events
