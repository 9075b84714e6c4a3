from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


logger = logging.getLogger(__name__)

_NO_TIME_TOKENS = {"DNF", "DNS", "DQ", "?", ""}
_SECONDS_RE = re.compile(r"^\d+(?:\.\d+)?$")
_MIN_SEC_RE = re.compile(r"^(?P<min>\d+):(?P<sec>\d{1,2}(?:\.\d+)?)$")
_FEET_RE = re.compile(r"^\d+$")
_INCHES_RE = re.compile(r"^\d+(?:\.\d+)?$")


@dataclass(frozen=True)
class Distance:
    feet: int
    inches: float = 0.0

    @property
    def total_inches(self) -> float:
        return self.feet * 12 + self.inches

    def __str__(self) -> str:
        return f"{self.feet}'{self.inches:05.2f}\""


def norm_text(text: Optional[str]) -> str:
    s = (text or "").replace("\u00a0", " ").replace("\r", " ").replace("\n", " ").strip()
    return re.sub(r"\s+", " ", s)


def title_case(text: str) -> str:
    """Capitalise the first character of every word and lower-case the rest.

    Unlike ``str.title`` a letter following a digit stays lower-case, so ``100m``
    keeps its unit.
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in norm_text(text).split(" "))


def parse_time(text: Optional[str]) -> Optional[timedelta]:
    raw = norm_text(text)
    if raw in _NO_TIME_TOKENS:
        return None

    # Cells sometimes carry notes after the mark, e.g. "4:32.10 PR" or "4:32.10*"
    token = raw.split(" ")[0].replace("*", "")
    if token.upper() in _NO_TIME_TOKENS:
        return None

    m = _MIN_SEC_RE.match(token)
    if m:
        seconds = float(m.group("sec"))
        if seconds >= 60:
            logger.debug("Unparsable time %r", raw)
            return None
        return timedelta(minutes=int(m.group("min")), seconds=seconds)

    if _SECONDS_RE.match(token):
        return timedelta(seconds=float(token))

    logger.debug("Unparsable time %r", raw)
    return None


def parse_distance(text: Optional[str]) -> Optional[Distance]:
    raw = norm_text(text).replace("*", "")
    if not raw:
        return None

    parts = [p.strip() for p in raw.split("-")]
    if len(parts) > 2 or not _FEET_RE.match(parts[0]):
        logger.debug("Unparsable distance %r", raw)
        return None
    if len(parts) == 1 or not parts[1]:
        return Distance(feet=int(parts[0]))
    if not _INCHES_RE.match(parts[1]):
        logger.debug("Unparsable distance %r", raw)
        return None
    return Distance(feet=int(parts[0]), inches=float(parts[1]))


def format_time(value: Optional[timedelta]) -> str:
    """Format a mark as ``m:ss.ff`` above one minute, else ``s.ff``."""
    if value is None:
        return ""
    hundredths = int(round(value.total_seconds() * 100))
    minutes, rest = divmod(hundredths, 6000)
    seconds, frac = divmod(rest, 100)
    if value.total_seconds() > 60:
        return f"{minutes}:{seconds:02d}.{frac:02d}"
    return f"{minutes * 60 + seconds}.{frac:02d}"
