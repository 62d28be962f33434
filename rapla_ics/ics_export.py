from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union
from zoneinfo import ZoneInfo

from ics import Calendar
from ics import Event as IcsEvent

from .config import NOT_AVAILABLE
from .models import Event
from .utils import event_key, event_uid


def to_ics_event(event: Event, tz: ZoneInfo) -> IcsEvent:
    description_lines = [
        f"Typ: {event.type or NOT_AVAILABLE}",
        f"Personen: {event.persons or NOT_AVAILABLE}",
    ]
    ev = IcsEvent(uid=event_uid(event))
    ev.name = event.title or NOT_AVAILABLE
    ev.begin = event.start.replace(tzinfo=tz)
    ev.end = event.end.replace(tzinfo=tz)
    ev.description = "\n".join(description_lines)
    if event.resources:
        ev.location = ", ".join(event.resources)
    if event.type:
        ev.categories = {event.type}
    return ev


def build_calendar(events: Iterable[Event], tz: ZoneInfo) -> Calendar:
    cal = Calendar()
    seen = set()
    for event in events:
        key = event_key(event)
        if key in seen:
            logging.debug("Dropping duplicate event %s at %s", event.title, event.start)
            continue
        seen.add(key)
        cal.events.add(to_ics_event(event, tz))
    return cal


def write_calendar(events: Iterable[Event], path: Union[str, Path], tz: ZoneInfo) -> int:
    cal = build_calendar(events, tz)
    with open(path, "w", encoding="utf-8") as f:
        f.writelines(cal.serialize_iter())
    logging.info("Wrote %d events to %s", len(cal.events), path)
    return len(cal.events)
