from __future__ import annotations

from pathlib import Path


BASE_URL = "https://fingerlakesrunners.org/race/?race-surface=track"

USER_AGENT = "trackresults/0.1 (contact: local)"

DEFAULT_TIMEOUT_S = 60.0
DEFAULT_POLITE_DELAY_S = 0.5


def default_data_dir() -> Path:
    return Path("data")


def default_cache_dir() -> Path:
    return default_data_dir() / "cache" / "trackresults"


def default_results_dir() -> Path:
    return Path("Results")
