from __future__ import annotations

from dataclasses import replace
from typing import Mapping

from .models import DIVISION_MEN, DIVISION_WOMEN, Result, sort_results


def division_for_table(key: str) -> str:
    return DIVISION_WOMEN if "women" in key.lower() else DIVISION_MEN


def merge_divisions(tables: Mapping[str, list[Result]]) -> list[Result]:
    """Combine gender-split tables into one ranked list.

    Every result takes the division of the table it came from. New ``Result``
    values are built, so the input lists are left as they were.
    """
    merged: list[Result] = []
    for key, results in tables.items():
        division = division_for_table(key)
        merged.extend(replace(r, division=division) for r in results)
    return sort_results(merged)
