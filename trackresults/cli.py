from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import requests

from .config import BASE_URL, DEFAULT_POLITE_DELAY_S, DEFAULT_TIMEOUT_S, default_cache_dir, default_results_dir
from .extract import parse_race
from .ingest import sync_races
from .report import render_event_report, write_race_reports


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="python -m trackresults", description="Track race results -> fixed-width reports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sync = sub.add_parser("sync", help="Fetch every listed race and write one report per event")
    sync.add_argument("--url", type=str, default=BASE_URL, help="Race listing URL")
    sync.add_argument("--out", type=Path, default=default_results_dir(), help="Output directory (one folder per race date)")
    sync.add_argument("--cache-dir", type=Path, default=default_cache_dir(), help="Cache for downloaded race pages")
    sync.add_argument("--no-cache", action="store_true", help="Do not read or write the page cache")
    sync.add_argument("--refresh", action="store_true", help="Download again even if a cached copy exists")
    sync.add_argument("--polite-delay", type=float, default=DEFAULT_POLITE_DELAY_S, help="Pause between race pages (seconds)")
    sync.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help="HTTP timeout (seconds)")

    parse = sub.add_parser("parse", help="Parse one saved race detail page")
    parse.add_argument("file", type=Path, help="HTML file of a race detail page")
    parse.add_argument("--name", type=str, required=True, help="Race name, e.g. 'Summer Mile'")
    parse.add_argument("--date", type=date.fromisoformat, required=True, help="Race date, YYYY-MM-DD")
    parse.add_argument("--out", type=Path, default=None, help="Write reports here instead of printing them")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.cmd == "sync":
        try:
            res = sync_races(
                out_dir=args.out,
                base_url=args.url,
                cache_dir=None if args.no_cache else args.cache_dir,
                refresh=bool(args.refresh),
                polite_delay_s=float(args.polite_delay),
                timeout_s=float(args.timeout),
            )
        except requests.RequestException as exc:
            print(f"Could not fetch race listing {args.url}: {type(exc).__name__}: {exc}", file=sys.stderr)
            return 1
        print(
            f"Pages: {res.pages}, races: {res.races_seen} "
            f"(parsed {res.races_parsed}, skipped {res.races_skipped}), reports written: {res.events_written}"
        )
        return 0

    if args.cmd == "parse":
        race = parse_race(name=args.name, race_date=args.date, html_bytes=args.file.read_bytes(), url=str(args.file))
        if race is None:
            print("No result sections found.")
            return 1
        if args.out is not None:
            written = write_race_reports(race, out_dir=args.out)
            print(f"Wrote {len(written)} reports to {args.out / race.date.isoformat()}")
            return 0
        for event, results in race.events.items():
            print(render_event_report(race, event, results))
        return 0

    parser.error(f"Unknown command: {args.cmd}")
