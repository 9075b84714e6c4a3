from __future__ import annotations

import re
from typing import Optional

from lxml import html

from .columns import (
    ROLE_AGE,
    ROLE_EVENT,
    ROLE_FIRST_NAME,
    ROLE_LAST_NAME,
    ROLE_NAME,
    ROLE_TIME,
    ColumnMap,
    resolve_columns,
)
from .models import DIVISION_MEN, DIVISION_UNKNOWN, DIVISION_WOMEN, Result
from .util import norm_text, parse_distance, parse_time


_DIVISION_MARKERS_RE = re.compile(r"[MFW]")


def parse_results_table(table: Optional[html.HtmlElement]) -> list[Result]:
    if table is None:
        return []

    columns = resolve_columns(table.xpath(".//th"))
    out: list[Result] = []
    for tr in table.xpath(".//tr[td][not(ancestor::thead)]"):
        result = parse_result_row(tr, columns)
        if result is not None:
            out.append(result)
    return out


def parse_result_row(row: html.HtmlElement, columns: ColumnMap) -> Optional[Result]:
    if not norm_text(row.text_content()):
        return None

    event = _text(row, columns, ROLE_EVENT)
    distance_loc = columns.distance

    return Result(
        event=event or None,
        name=_parse_name(row, columns),
        division=_parse_division(row, columns),
        age=parse_age(_text(row, columns, ROLE_AGE)),
        time=parse_time(_text(row, columns, ROLE_TIME)),
        distance=parse_distance(distance_loc.text(row)) if distance_loc else None,
    )


def normalize_division(text: Optional[str]) -> str:
    # Only the first character counts, so "F3" (sex/place) and "M45" (sex/age) work too
    value = norm_text(text).upper()
    if not value:
        return DIVISION_UNKNOWN
    first = value[0]
    if first == "W":
        return DIVISION_WOMEN
    if first in (DIVISION_MEN, DIVISION_WOMEN):
        return first
    return DIVISION_UNKNOWN


def parse_age(text: Optional[str]) -> int:
    value = _DIVISION_MARKERS_RE.sub("", norm_text(text).upper()).strip()
    if not value.isdigit():
        return 0
    return int(value)


def reorder_name(name: str) -> str:
    """``"Last, First"`` -> ``"First Last"``; other names are only trimmed."""
    parts = name.split(",")
    if len(parts) > 1:
        return f"{parts[1].strip()} {parts[0].strip()}".strip()
    return name.strip()


def _parse_name(row: html.HtmlElement, columns: ColumnMap) -> str:
    if columns.has_split_name:
        first = _text(row, columns, ROLE_FIRST_NAME) or ""
        last = _text(row, columns, ROLE_LAST_NAME) or ""
        name = f"{first} {last}"
    else:
        name = _text(row, columns, ROLE_NAME) or ""
    return reorder_name(name)


def _parse_division(row: html.HtmlElement, columns: ColumnMap) -> str:
    found = columns.division
    if found is None:
        return DIVISION_UNKNOWN
    _, loc = found
    return normalize_division(loc.text(row))


def _text(row: html.HtmlElement, columns: ColumnMap, role: str) -> Optional[str]:
    loc = columns.get(role)
    if loc is None:
        return None
    return loc.text(row)
