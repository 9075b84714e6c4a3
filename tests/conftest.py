"""
Shared HTML builders for the results page tests.

The pages mimic the race site: each event is a ``div.result-section`` with a
``.result-section-heading`` and a table whose header and body cells carry
matching ``column-N`` classes.
"""

from __future__ import annotations

from typing import Callable, Sequence

import pytest


def _table(headers: Sequence[str], rows: Sequence[Sequence[str]], with_classes: bool = True) -> str:
    def cls(i: int) -> str:
        return f' class="column-{i + 1}"' if with_classes else ""

    head = "".join(f"<th{cls(i)}>{h}</th>" for i, h in enumerate(headers))
    body = "".join(
        "<tr>" + "".join(f"<td{cls(i)}>{c}</td>" for i, c in enumerate(row)) + "</tr>"
        for row in rows
    )
    return f"<table><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>"


def _section(heading: str, table_html: str) -> str:
    return (
        '<div class="result-section">'
        f'<h3 class="result-section-heading">{heading}</h3>'
        f"{table_html}"
        "</div>"
    )


def _page(*sections: str) -> bytes:
    return ("<html><body><main>" + "".join(sections) + "</main></body></html>").encode("utf-8")


@pytest.fixture
def make_table() -> Callable[..., str]:
    return _table


@pytest.fixture
def make_section() -> Callable[[str, str], str]:
    return _section


@pytest.fixture
def make_page() -> Callable[..., bytes]:
    return _page
