from __future__ import annotations

import hashlib
from datetime import date, datetime, time
from typing import Iterable

from .models import Event


def build_datetime(day: date, time_str: str) -> datetime:
    hour, minute = [int(x, 10) for x in time_str.split(":", 1)]
    return datetime.combine(day, time(hour, minute))


def hash_source(parts: Iterable[str]) -> str:
    hasher = hashlib.sha1()
    joined = "|".join(parts)
    hasher.update(joined.encode("utf-8"))
    return hasher.hexdigest()


def event_key(event: Event) -> tuple:
    return (event.start, event.end, event.title or "", event.resources)


def event_uid(event: Event) -> str:
    return hash_source(
        [
            event.start.isoformat(),
            event.end.isoformat(),
            (event.title or "").strip(),
            ",".join(event.resources),
        ]
    ) + "@rapla-ics"
