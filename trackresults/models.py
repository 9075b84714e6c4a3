from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .util import Distance


DIVISION_MEN = "M"
DIVISION_WOMEN = "F"
DIVISION_UNKNOWN = " "


@dataclass(frozen=True)
class Result:
    name: str
    division: str  # "M" | "F" | " "
    age: int  # 0 = not available
    time: Optional[timedelta] = None
    distance: Optional[Distance] = None
    event: Optional[str] = None  # only set by tables with an Event column


@dataclass(frozen=True)
class Race:
    name: str
    date: date
    events: dict[str, list[Result]] = field(default_factory=dict)
    url: Optional[str] = None


def result_sort_key(result: Result) -> tuple[bool, float, bool, float]:
    """Fastest time first, then longest distance; missing values sort last."""
    time_s = result.time.total_seconds() if result.time is not None else 0.0
    distance_in = result.distance.total_inches if result.distance is not None else 0.0
    return (result.time is None, time_s, result.distance is None, -distance_in)


def sort_results(results: list[Result]) -> list[Result]:
    return sorted(results, key=result_sort_key)
