from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from .event_mapping import unit_type
from .models import Race, Result
from .util import format_time


TOTAL_WIDTH = 72
NAME_WIDTH = 32
DIVISION_WIDTH = 8
AGE_WIDTH = 4
RESULT_WIDTH = 12
GAP_WIDTH = 4

_GAP = " " * GAP_WIDTH
_HALF_GAP = " " * (GAP_WIDTH // 2)


def render_event_report(race: Race, event: str, results: Iterable[Result]) -> str:
    lines = [
        _center(race.date.isoformat()),
        _center(event),
        _center(""),
        _HALF_GAP
        + "Name".ljust(NAME_WIDTH)
        + _GAP
        + "Division".ljust(DIVISION_WIDTH)
        + _GAP
        + "Age".rjust(AGE_WIDTH)
        + _GAP
        + unit_type(event).rjust(RESULT_WIDTH)
        + _HALF_GAP,
        "-" * TOTAL_WIDTH,
    ]
    lines.extend(_result_line(r) for r in results)
    return "\n".join(lines) + "\n"


def write_race_reports(race: Race, *, out_dir: Path) -> list[Path]:
    directory = out_dir / race.date.isoformat()
    directory.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for event, results in race.events.items():
        path = directory / f"{_safe_filename(event)}.txt"
        path.write_text(render_event_report(race, event, results), encoding="utf-8")
        written.append(path)
    return written


def write_all(races: Iterable[Race], *, out_dir: Path) -> list[Path]:
    written: list[Path] = []
    for race in races:
        written.extend(write_race_reports(race, out_dir=out_dir))
    return written


def _result_line(result: Result) -> str:
    # At most one of time/distance is normally set; an empty mark collapses to "".
    time = format_time(result.time).rjust(RESULT_WIDTH).rstrip()
    distance = (str(result.distance) if result.distance else "").rjust(RESULT_WIDTH).rstrip()
    return (
        _HALF_GAP
        + result.name.ljust(NAME_WIDTH)
        + _GAP
        + result.division.ljust(DIVISION_WIDTH)
        + _GAP
        + str(result.age).rjust(AGE_WIDTH)
        + _GAP
        + time
        + distance
        + _HALF_GAP
    )


def _center(text: str) -> str:
    return text.rjust((len(text) + TOTAL_WIDTH) // 2).ljust(TOTAL_WIDTH)


def _safe_filename(event: str) -> str:
    return re.sub(r"[\\/:*?\"<>|]+", "-", event).strip() or "event"
