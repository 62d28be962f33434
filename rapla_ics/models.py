from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Tuple, Union

from .config import NOT_AVAILABLE


@dataclass(frozen=True)
class Event:
    start: datetime
    end: datetime
    resources: Tuple[str, ...] = field(default_factory=tuple)
    persons: Optional[str] = None
    title: Optional[str] = None
    type: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Event ends before it starts: {self.start} > {self.end}")
        if not isinstance(self.resources, tuple):
            object.__setattr__(self, "resources", tuple(self.resources))

    @property
    def interval(self) -> tuple[datetime, datetime]:
        return self.start, self.end

    def with_times(self, start: Optional[datetime] = None, end: Optional[datetime] = None) -> "Event":
        return replace(
            self,
            start=self.start if start is None else start,
            end=self.end if end is None else end,
        )

    def _matching(self, pattern: Union[str, re.Pattern[str]]) -> list[str]:
        regex = re.compile(pattern)
        return [resource for resource in self.resources if regex.search(resource)]

    def courses(self, pattern: Union[str, re.Pattern[str]]) -> list[str]:
        """Resources matching a course-code pattern."""
        return self._matching(pattern)

    def rooms(self, pattern: Union[str, re.Pattern[str]]) -> list[str]:
        """Resources matching a room pattern."""
        return self._matching(pattern)

    def is_current(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return self.start >= datetime.combine(today, datetime.min.time())

    def is_type(self, name: str) -> bool:
        if self.type is None:
            return False
        return name in self.type

    def as_dict(self) -> dict:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "resources": list(self.resources),
            "persons": self.persons or NOT_AVAILABLE,
            "title": self.title or NOT_AVAILABLE,
            "type": self.type or NOT_AVAILABLE,
        }
