from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .config import DEFAULT_END, DEFAULT_START, DEFAULT_TIME_TEXT, FIELD_LABELS
from .models import Event
from .utils import build_datetime

WHITESPACE_REGEX = re.compile(r"\s")

BLOCK_CLASS = "week_block"
SEPARATOR_CLASSES = {"week_separatorcell", "week_separatorcell_black"}


class ParseError(Exception):
    pass


class MalformedTimeText(ParseError, ValueError):
    pass


def _week_rows(soup: BeautifulSoup) -> List[Tag]:
    return soup.select("table.week_table > tbody > tr, table.week_table > tr")


def iter_day_cells(rows: Iterable[Tag], monday: date) -> Iterator[Tuple[date, Tag]]:
    """Yield (day, cell) for every event block, deriving the day from the
    number of separator cells seen so far in the row."""
    for row in rows:
        day = monday
        for cell in row.find_all(["td", "th"], recursive=False):
            classes = set(cell.get("class", []))
            if BLOCK_CLASS in classes:
                yield day, cell
            elif classes & SEPARATOR_CLASSES:
                day += timedelta(days=1)


def _time_text(anchor: Tag) -> Optional[str]:
    first = next(iter(anchor.children), None)
    if isinstance(first, NavigableString) and not isinstance(first, Comment):
        return WHITESPACE_REGEX.sub("", str(first))
    return None


def parse_times(anchor: Tag, day: date) -> Tuple[datetime, datetime]:
    text = _time_text(anchor)
    if not text or text == DEFAULT_TIME_TEXT:
        return datetime.combine(day, DEFAULT_START), datetime.combine(day, DEFAULT_END)

    parts = text.split("-")
    try:
        start = build_datetime(day, parts[0])
    except ValueError as exc:
        raise MalformedTimeText(f"Cannot parse start time from '{text}'") from exc

    # Some events carry no end time
    try:
        end = build_datetime(day, parts[1])
    except (IndexError, ValueError):
        end = datetime.combine(day, DEFAULT_END)

    # Late starts without an end collapse to a zero-length interval
    if end < start:
        end = start
    return start, end


def _text(node: Optional[Tag]) -> Optional[str]:
    if node is None:
        return None
    text = node.get_text(" ", strip=True)
    return text or None


def _resource_text(node: Tag) -> Optional[str]:
    for br in node.find_all("br"):
        br.replace_with(",")
    return _text(node)


def _split_resources(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def parse_event(anchor: Tag, day: date, scope: Optional[Tag] = None) -> Event:
    """Build an Event from an anchor and its tooltip.

    ``scope`` is the element searched for tooltip fields, normally the block
    cell holding the anchor. Lenient HTML parsers may close an open ``<a>``
    when they meet a ``<table>``, moving the info table out of the anchor.
    """
    start, end = parse_times(anchor, day)
    scope = scope if scope is not None else anchor
    fields: dict = {}

    labels = scope.select("table.infotable td.label")
    values = scope.select("table.infotable td.value")
    for label, value in zip(labels, values):
        name = FIELD_LABELS.get(label.get_text(strip=True))
        if name is None:
            continue
        if name == "resources":
            fields[name] = _split_resources(_resource_text(value))
        else:
            fields[name] = _text(value)

    return Event(
        start=start,
        end=end,
        resources=fields.get("resources", ()),
        persons=fields.get("persons"),
        title=fields.get("title"),
        type=_text(scope.select_one("span.tooltip strong")),
    )


def parse_events_from_html(html: str, monday: date) -> List[Event]:
    soup = BeautifulSoup(html, "lxml")
    rows = _week_rows(soup)
    if not rows:
        logging.debug("No week table rows found for week of %s", monday)
        return []

    events: List[Event] = []
    for day, cell in iter_day_cells(rows, monday):
        anchor = cell.find("a")
        if anchor is None:
            continue
        try:
            events.append(parse_event(anchor, day, scope=cell))
        except MalformedTimeText as exc:
            logging.warning("Skipping event on %s: %s", day, exc)
    return events
