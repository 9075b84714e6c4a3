from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests

from .config import BASE_URL, DEFAULT_POLITE_DELAY_S, DEFAULT_TIMEOUT_S
from .extract import parse_race
from .models import Race
from .report import write_race_reports
from .scraper import RaceLink, fetch_html, listing_page_urls, parse_page_count, parse_race_listing


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncSummary:
    pages: int
    races_seen: int
    races_parsed: int
    races_skipped: int
    events_written: int


def collect_races(
    *,
    base_url: str = BASE_URL,
    cache_dir: Optional[Path] = None,
    refresh: bool = False,
    polite_delay_s: float = DEFAULT_POLITE_DELAY_S,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    session: Optional[requests.Session] = None,
) -> tuple[list[Race], int, int]:
    """Walk every listing page and parse each race; returns (races, pages, races_seen).

    Listing pages are always fetched fresh so new races show up; detail pages
    go through the cache.
    """
    sess = session or requests.Session()

    def _fetch(url: str, *, cached: bool) -> bytes:
        return fetch_html(
            url=url,
            cache_dir=cache_dir if cached else None,
            refresh=refresh,
            session=sess,
            timeout_s=timeout_s,
        )

    first = _fetch(base_url, cached=False)
    page_urls = listing_page_urls(base_url, parse_page_count(first))

    races: list[Race] = []
    pages = 0
    races_seen = 0
    for page_url in page_urls:
        try:
            listing = _fetch(page_url, cached=False)
        except requests.RequestException as exc:
            logger.warning("Skipping listing page %s: %s: %s", page_url, type(exc).__name__, exc)
            continue
        pages += 1

        for link in parse_race_listing(listing):
            races_seen += 1
            race = _parse_link(link, fetch=lambda url: _fetch(url, cached=True))
            if race is not None:
                races.append(race)
            if polite_delay_s > 0:
                time.sleep(polite_delay_s)

    return races, pages, races_seen


def sync_races(
    *,
    out_dir: Path,
    base_url: str = BASE_URL,
    cache_dir: Optional[Path] = None,
    refresh: bool = False,
    polite_delay_s: float = DEFAULT_POLITE_DELAY_S,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    session: Optional[requests.Session] = None,
) -> SyncSummary:
    races, pages, races_seen = collect_races(
        base_url=base_url,
        cache_dir=cache_dir,
        refresh=refresh,
        polite_delay_s=polite_delay_s,
        timeout_s=timeout_s,
        session=session,
    )

    events_written = 0
    for race in races:
        events_written += len(write_race_reports(race, out_dir=out_dir))

    return SyncSummary(
        pages=pages,
        races_seen=races_seen,
        races_parsed=len(races),
        races_skipped=races_seen - len(races),
        events_written=events_written,
    )


def _parse_link(link: RaceLink, *, fetch: Callable[[str], bytes]) -> Optional[Race]:
    try:
        html_bytes = fetch(link.url)
    except requests.RequestException as exc:
        logger.warning("Skipping race %s (%s): %s: %s", link.name, link.url, type(exc).__name__, exc)
        return None

    race = parse_race(name=link.name, race_date=link.race_date, html_bytes=html_bytes, url=link.url)
    if race is None:
        logger.info("No results on %s (%s)", link.name, link.url)
    return race
