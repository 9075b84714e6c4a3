"""Race results from fingerlakesrunners.org track pages, normalised per event."""

from .extract import parse_race
from .models import Race, Result
from .util import Distance, parse_distance, parse_time

__all__ = ["Distance", "Race", "Result", "parse_distance", "parse_race", "parse_time"]
