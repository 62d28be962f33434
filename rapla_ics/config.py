from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date, time, timedelta
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIMEZONE = "Europe/Berlin"
DEFAULT_MAX_EMPTY_WEEKS = 15


@dataclass
class Settings:
    base_url: str
    timezone: ZoneInfo
    max_empty_weeks: int = DEFAULT_MAX_EMPTY_WEEKS
    request_timeout_ms: float = 30_000
    output_file: str = "schedule.ics"


# Tooltip label -> Event field
FIELD_LABELS = {
    "Titel:": "title",
    "Personen:": "persons",
    "Ressourcen:": "resources",
}

DEFAULT_START = time(8, 0)
DEFAULT_END = time(20, 0)
DEFAULT_TIME_TEXT = "08:00-20:00"

NOT_AVAILABLE = "N/A"


def get_timezone() -> ZoneInfo:
    tz_name = os.getenv("TIMEZONE", DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(tz_name)
    except Exception:
        logging.warning("Invalid TIMEZONE %s, falling back to %s", tz_name, DEFAULT_TIMEZONE)
        return ZoneInfo(DEFAULT_TIMEZONE)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.warning("Invalid %s %r, using %d", name, raw, default)
        return default


def get_settings() -> Settings:
    settings = Settings(
        base_url=os.getenv("RAPLA_URL", ""),
        timezone=get_timezone(),
        max_empty_weeks=_get_int("MAX_EMPTY_WEEKS", DEFAULT_MAX_EMPTY_WEEKS),
        request_timeout_ms=_get_int("REQUEST_TIMEOUT_MS", 30_000),
        output_file=os.getenv("OUTPUT_FILE", "schedule.ics"),
    )
    if not settings.base_url:
        logging.warning("RAPLA_URL is not set")
    return settings


def week_mondays(start: date, end: date) -> list[date]:
    mondays: list[date] = []
    current = start
    while True:
        mondays.append(current)
        current += timedelta(days=7)
        if current > end:
            break
    return mondays
