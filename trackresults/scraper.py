from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

import requests
from lxml import html

from .config import DEFAULT_TIMEOUT_S, USER_AGENT
from .util import norm_text


_MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_MONTH_DATE_RE = re.compile(
    r"\b(?P<month>[A-Za-z]{3,9})\.?\s+(?P<day>\d{1,2})(?:st|nd|rd|th)?,?\s+(?P<year>\d{4})\b"
)
_ISO_DATE_RE = re.compile(r"\b(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})\b")
_US_DATE_RE = re.compile(r"\b(?P<month>\d{1,2})/(?P<day>\d{1,2})/(?P<year>\d{4})\b")

_PAGE_NUMBERS_XPATH = (
    "//ul[contains(concat(' ', normalize-space(@class), ' '), ' page-numbers ')]"
    "/li[not(.//*[contains(concat(' ', normalize-space(@class), ' '), ' next ')])]"
)


@dataclass(frozen=True)
class RaceLink:
    name: str
    url: str
    race_date: date


def fetch_html(
    *,
    url: str,
    cache_dir: Optional[Path] = None,
    refresh: bool = False,
    session: Optional[requests.Session] = None,
    timeout_s: float = DEFAULT_TIMEOUT_S,
) -> bytes:
    cache_path: Optional[Path] = None
    if cache_dir is not None:
        cache_dir.mkdir(parents=True, exist_ok=True)
        cache_path = cache_dir / _safe_cache_filename(url)
        if cache_path.exists() and not refresh:
            return cache_path.read_bytes()

    sess = session or requests.Session()
    headers = {"User-Agent": USER_AGENT}
    resp = sess.get(url, headers=headers, timeout=timeout_s)
    resp.raise_for_status()
    content = resp.content
    if cache_path is not None:
        cache_path.write_bytes(content)
    return content


def parse_page_count(html_bytes: bytes) -> int:
    """Number of listing pages; a listing without pagination is one page."""
    doc = html.fromstring(html_bytes)
    items = doc.xpath(_PAGE_NUMBERS_XPATH)
    if not items:
        return 1
    text = norm_text(items[-1].text_content())
    return int(text) if text.isdigit() and int(text) > 0 else 1


def listing_page_urls(base_url: str, page_count: int) -> list[str]:
    # https://host/race/?q -> https://host/race/page/2?q
    marker = base_url.rfind("/") + 1
    return [f"{base_url[:marker]}page/{page}{base_url[marker:]}" for page in range(1, page_count + 1)]


def parse_race_listing(html_bytes: bytes) -> list[RaceLink]:
    doc = html.fromstring(html_bytes)
    out: list[RaceLink] = []
    for info in doc.find_class("race-title"):
        links = info.xpath(".//a[@href]")
        starts = info.find_class("race-start")
        if not links or not starts:
            continue
        race_date = parse_race_date(starts[0].text_content())
        if race_date is None:
            continue
        name = norm_text(links[0].text_content())
        out.append(RaceLink(name=name, url=links[0].get("href").strip(), race_date=race_date))
    return out


def parse_race_date(text: str) -> Optional[date]:
    s = norm_text(text)
    if not s:
        return None

    m = _MONTH_DATE_RE.search(s)
    if m:
        month = _MONTHS.get(m.group("month")[:3].lower())
        if month is not None:
            return _safe_date(int(m.group("year")), month, int(m.group("day")))

    m = _ISO_DATE_RE.search(s) or _US_DATE_RE.search(s)
    if m:
        return _safe_date(int(m.group("year")), int(m.group("month")), int(m.group("day")))

    return None


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _safe_cache_filename(url: str) -> str:
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]
    path = re.sub(r"^https?://", "", url)
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", path).strip("_").lower()
    slug = slug[:80] if slug else "page"
    return f"{slug}_{digest}.html"
