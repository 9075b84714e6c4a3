from __future__ import annotations

import re
from typing import Mapping

from .models import Result, sort_results
from .util import norm_text, title_case


_RESULTS_SUFFIX = " Results"
_EXCLUDED_WORDS = ("x", "sprint", "medley", "relay", "smr")

_MILE_RE = re.compile(r"miles?\b", re.IGNORECASE)
_METERS_RE = re.compile(r"meters?\b", re.IGNORECASE)
# " mi" always joins the preceding word; a bare " m" only joins a number
_MI_SPACE_RE = re.compile(r"\s+(?=mi\b)")
_M_SPACE_RE = re.compile(r"(?<=\d)\s+(?=m\b)")
_RACE_WALK_RE = re.compile(r"race\s+walk", re.IGNORECASE)

_TIME_SUFFIXES = ("m", "mi", "mh", "hurdles", "racewalk")
_HEIGHT_EVENTS = {"pole vault", "high jump"}


def clean_heading(text: str) -> str:
    """Turn a section heading like ``"MEN 100M RESULTS"`` into ``"men 100m"``."""
    name = title_case(norm_text(text).lower())
    name = name.replace(_RESULTS_SUFFIX, "")
    return name.replace("M", "m").strip()


def is_individual_event(key: str) -> bool:
    low = key.lower()
    return not any(word in low for word in _EXCLUDED_WORDS)


def fold_event_aliases(key: str) -> str:
    name = _MILE_RE.sub("mi", key)
    name = _METERS_RE.sub("m", name)
    name = _MI_SPACE_RE.sub("", name)
    name = _M_SPACE_RE.sub("", name)
    name = _RACE_WALK_RE.sub("Racewalk", name)
    return name.strip()


def assemble_events(events: Mapping[str, list[Result]]) -> dict[str, list[Result]]:
    """Drop relay/team events and fold aliases into the final event keys."""
    out: dict[str, list[Result]] = {}
    for key, results in events.items():
        if not is_individual_event(key):
            continue
        name = fold_event_aliases(key)
        if name in out:
            out[name] = sort_results(out[name] + list(results))
        else:
            out[name] = list(results)
    return out


def unit_type(event: str) -> str:
    """Column title for the mark of an event: ``Time``, ``Height`` or ``Distance``."""
    low = (event or "").strip().lower()
    if low.endswith(_TIME_SUFFIXES):
        return "Time"
    if low in _HEIGHT_EVENTS:
        return "Height"
    return "Distance"
