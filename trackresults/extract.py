from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional, Union

from lxml import etree, html

from .divisions import merge_divisions
from .event_mapping import assemble_events, clean_heading
from .models import Race, Result, sort_results
from .results_table import parse_results_table


logger = logging.getLogger(__name__)

MILE_MEET = "mile_meet"
SINGLE_TABLE = "single_table"
STANDARD_MEET = "standard_meet"

MILE_EVENT = "1mi"

_SECTION_CLASS = "result-section"
_HEADING_CLASS = "result-section-heading"
_DIVISION_WORDS = {"men", "women", "mens", "womens", "men's", "women's"}

EventMap = dict[str, list[Result]]


def detect_layout(race_name: str, section_count: int) -> Optional[str]:
    if section_count == 0:
        return None
    if "mile" in (race_name or "").lower():
        return MILE_MEET
    if section_count == 1:
        return SINGLE_TABLE
    return STANDARD_MEET


def result_sections(doc: html.HtmlElement) -> list[html.HtmlElement]:
    return doc.find_class(_SECTION_CLASS)


def section_heading(section: html.HtmlElement) -> str:
    found = section.find_class(_HEADING_CLASS)
    return clean_heading(found[0].text_content()) if found else ""


def section_table(section: html.HtmlElement) -> Optional[html.HtmlElement]:
    tables = section.xpath(".//table")
    return tables[0] if tables else None


def section_results(sections: list[html.HtmlElement]) -> EventMap:
    """Parse every section into ``cleaned heading -> results``.

    Sections that share a heading are concatenated.
    """
    out: EventMap = {}
    for section in sections:
        key = section_heading(section)
        results = parse_results_table(section_table(section))
        if key in out:
            out[key] = sort_results(out[key] + results)
        else:
            out[key] = results
    return out


def extract_mile_meet(sections: list[html.HtmlElement]) -> EventMap:
    tables = section_results(sections)
    if len(tables) == 1:
        return {MILE_EVENT: sort_results(next(iter(tables.values())))}

    divisions = {key: results for key, results in tables.items() if key.startswith("All ")}
    if not divisions:
        logger.debug("Mile meet without 'All ...' division tables: %s", list(tables))
    return {MILE_EVENT: merge_divisions(divisions)}


def extract_single_table(sections: list[html.HtmlElement]) -> EventMap:
    section = sections[0]
    fallback = section_heading(section)
    grouped: EventMap = {}
    for result in parse_results_table(section_table(section)):
        key = result.event.replace(" m", "m") if result.event else fallback
        grouped.setdefault(key, []).append(result)
    return {key: sort_results(results) for key, results in grouped.items()}


def shared_event_name(key: str) -> str:
    """``"men 100m"`` / ``"Women 100m"`` -> ``"100m"``."""
    tokens = [t for t in key.split() if t.lower() not in _DIVISION_WORDS]
    return " ".join(tokens) if tokens else key


def is_divided(key: str) -> bool:
    # "women" contains "men", so both halves of a split event match
    return "men" in key.lower()


def extract_standard_meet(sections: list[html.HtmlElement]) -> EventMap:
    tables = section_results(sections)

    groups: dict[str, EventMap] = {}
    final: EventMap = {}
    for key, results in tables.items():
        if is_divided(key):
            groups.setdefault(shared_event_name(key), {})[key] = results
        else:
            final[key] = results

    for name, divided in groups.items():
        merged = merge_divisions(divided)
        if name in final:
            final[name] = sort_results(final[name] + merged)
        else:
            final[name] = merged
    return final


_EXTRACTORS: dict[str, Callable[[list[html.HtmlElement]], EventMap]] = {
    MILE_MEET: extract_mile_meet,
    SINGLE_TABLE: extract_single_table,
    STANDARD_MEET: extract_standard_meet,
}


def extract_events(doc: html.HtmlElement, *, race_name: str) -> Optional[EventMap]:
    sections = result_sections(doc)
    layout = detect_layout(race_name, len(sections))
    if layout is None:
        return None
    logger.debug("%s: %d result sections, layout %s", race_name, len(sections), layout)
    return assemble_events(_EXTRACTORS[layout](sections))


def parse_race(
    *,
    name: str,
    race_date: date,
    html_bytes: Union[bytes, str],
    url: Optional[str] = None,
) -> Optional[Race]:
    """Build a ``Race`` from a detail page, or ``None`` when it has no result sections."""
    if isinstance(html_bytes, str):
        # lxml refuses str input that carries an XML encoding declaration
        html_bytes = html_bytes.encode("utf-8")
    if not html_bytes or not html_bytes.strip():
        return None
    try:
        doc = html.fromstring(html_bytes)
    except etree.ParserError as exc:
        logger.debug("%s: unparsable page (%s)", name, exc)
        return None
    events = extract_events(doc, race_name=name)
    if events is None:
        return None
    return Race(name=name.strip(), date=race_date, events=events, url=url)
