"""
Pytest configuration and shared fixtures.

The builders below produce the subset of Rapla's week view markup that the
parser reads: a ``week_table`` whose rows hold ``week_block`` cells and day
separator cells, with a tooltip ``infotable`` inside each anchor.
"""

from datetime import date

import pytest

SEPARATOR = '<td class="week_separatorcell"></td>'
BLACK_SEPARATOR = '<td class="week_separatorcell_black"></td>'
EMPTY_CELL = '<td class="week_emptycell_black"></td>'

ALGEBRA_FIELDS = [
    ("Titel:", "Algebra"),
    ("Personen:", "Prof. X"),
    ("Ressourcen:", "Room 1,Room 2"),
]


def make_anchor(time_text="10:15-11:45", fields=None, event_type="Vorlesung"):
    fields = ALGEBRA_FIELDS if fields is None else fields
    rows = "".join(
        f'<tr><td class="label">{label}</td><td class="value">{value}</td></tr>'
        for label, value in fields
    )
    strong = f"<strong>{event_type}</strong><br/>" if event_type else ""
    return (
        f'<a href="#">{time_text}'
        f'<span class="tooltip">{strong}'
        f'<table class="infotable"><tbody>{rows}</tbody></table>'
        f"</span></a>"
    )


def make_block(anchor=None):
    anchor = make_anchor() if anchor is None else anchor
    return f'<td class="week_block" rowspan="4">{anchor}</td>'


def make_week(*rows, tbody=True):
    body = "".join(f"<tr>{''.join(cells)}</tr>" for cells in rows)
    if tbody:
        body = f"<tbody>{body}</tbody>"
    return f'<html><body><table class="week_table">{body}</table></body></html>'


@pytest.fixture
def monday():
    """Monday 2024-01-01, the reference date used across tests."""
    return date(2024, 1, 1)


@pytest.fixture
def algebra_week():
    """A week holding the single Algebra lecture on Monday."""
    return make_week([EMPTY_CELL, make_block()])


@pytest.fixture
def html_builders():
    """Markup builders, exposed as a fixture so test modules need no imports."""

    class Builders:
        anchor = staticmethod(make_anchor)
        block = staticmethod(make_block)
        week = staticmethod(make_week)
        separator = SEPARATOR
        black_separator = BLACK_SEPARATOR
        empty = EMPTY_CELL

    return Builders
