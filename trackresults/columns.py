from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from lxml import html

from .util import norm_text


ROLE_EVENT = "event"
ROLE_FIRST_NAME = "first_name"
ROLE_LAST_NAME = "last_name"
ROLE_NAME = "name"
ROLE_SEX = "sex"
ROLE_GENDER = "gender"
ROLE_SEX_PLACE = "sex_place"
ROLE_AGE = "age"
ROLE_TIME = "time"
ROLE_DISTANCE = "distance"
ROLE_HEIGHT = "height"

# Header text (compared case-insensitively) -> column role. Add synonyms here.
COLUMN_LABELS: tuple[tuple[str, str], ...] = (
    ("Event", ROLE_EVENT),
    ("First Name", ROLE_FIRST_NAME),
    ("Last Name", ROLE_LAST_NAME),
    ("Name", ROLE_NAME),
    ("Sex", ROLE_SEX),
    ("Gender", ROLE_GENDER),
    ("Sex/Place", ROLE_SEX_PLACE),
    ("Age", ROLE_AGE),
    ("Time", ROLE_TIME),
    ("Distance", ROLE_DISTANCE),
    ("Height", ROLE_HEIGHT),
)

DIVISION_ROLES = (ROLE_SEX, ROLE_GENDER, ROLE_SEX_PLACE, ROLE_AGE)
DISTANCE_ROLES = (ROLE_DISTANCE, ROLE_HEIGHT)

_COLUMN_CLASS_PREFIX = "column-"


@dataclass(frozen=True)
class ColumnLocator:
    """Finds the cell for one column in a body row.

    The results tables tag header and body cells with the same ``column-N``
    class; when a header has none, the column position is used instead.
    """

    index: int
    css_class: Optional[str] = None

    def cell(self, row: html.HtmlElement) -> Optional[html.HtmlElement]:
        if self.css_class:
            found = row.find_class(self.css_class)
            return found[0] if found else None
        cells = row.xpath("./td|./th")
        return cells[self.index] if self.index < len(cells) else None

    def text(self, row: html.HtmlElement) -> Optional[str]:
        cell = self.cell(row)
        if cell is None:
            return None
        return norm_text(cell.text_content())


@dataclass(frozen=True)
class ColumnMap:
    locators: dict[str, ColumnLocator] = field(default_factory=dict)

    def get(self, role: str) -> Optional[ColumnLocator]:
        return self.locators.get(role)

    def first_of(self, roles: Iterable[str]) -> Optional[tuple[str, ColumnLocator]]:
        for role in roles:
            loc = self.locators.get(role)
            if loc is not None:
                return (role, loc)
        return None

    @property
    def division(self) -> Optional[tuple[str, ColumnLocator]]:
        return self.first_of(DIVISION_ROLES)

    @property
    def distance(self) -> Optional[ColumnLocator]:
        found = self.first_of(DISTANCE_ROLES)
        return found[1] if found else None

    @property
    def has_split_name(self) -> bool:
        return ROLE_FIRST_NAME in self.locators and ROLE_LAST_NAME in self.locators


def resolve_columns(header_cells: Iterable[html.HtmlElement]) -> ColumnMap:
    labels = {label.lower(): role for label, role in COLUMN_LABELS}
    locators: dict[str, ColumnLocator] = {}
    for index, th in enumerate(header_cells):
        role = labels.get(norm_text(th.text_content()).lower())
        if role is None or role in locators:
            continue
        locators[role] = ColumnLocator(index=index, css_class=_column_class(th))
    return ColumnMap(locators=locators)


def _column_class(cell: html.HtmlElement) -> Optional[str]:
    for name in (cell.get("class") or "").split():
        if name.startswith(_COLUMN_CLASS_PREFIX):
            return name
    return None
