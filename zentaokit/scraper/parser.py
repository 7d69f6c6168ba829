"""Shared HTML helpers for the Zentao page parsers."""
from __future__ import annotations

from typing import Iterable, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .logging_utils import _scraper_event
from .utils import clean_text


def load_document(html: str) -> BeautifulSoup:
    """Parse ``html`` the way a browser would (missing tbody, stray tags)."""

    return BeautifulSoup(html or "", "html5lib")


def select_rows(
    soup: BeautifulSoup | Tag, candidates: Iterable[str], *, kind: str
) -> tuple[Optional[str], list[Tag]]:
    """Return the first selector candidate matching any element, with its matches.

    Scanning stops at the first non-empty candidate; later candidates are never
    merged in.
    """

    for selector in candidates:
        rows = soup.select(selector)
        if rows:
            _scraper_event("parse", phase="rows", kind=kind, selector=selector, count=len(rows))
            return selector, rows
    _scraper_event("parse", phase="rows", kind=kind, selector=None, count=0)
    return None, []


def select_first(scope: Tag, candidates: Iterable[str]) -> Optional[Tag]:
    for selector in candidates:
        element = scope.select_one(selector)
        if element is not None:
            return element
    return None


def first_text(scope: Tag, candidates: Iterable[str]) -> str:
    """Return the cleaned text of the first matching element, or ``""``."""

    element = select_first(scope, candidates)
    if element is None:
        return ""
    return clean_text(element.get_text(" "))


def attr_value(element: Optional[Tag], attributes: Iterable[str]) -> str:
    """Return the first non-empty attribute value among ``attributes``."""

    if element is None:
        return ""
    for name in attributes:
        value = element.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        if value and str(value).strip():
            return str(value).strip()
    return ""


def input_value(scope: Tag, candidates: Iterable[str]) -> str:
    return attr_value(select_first(scope, candidates), ("value",))


def read_field_table(soup: BeautifulSoup | Tag, row_candidates: Iterable[str]) -> dict[str, Tag]:
    """Map ``<th>`` label text to its ``<td>`` cell for label/value tables.

    The first occurrence of a label wins; rows without both cells are ignored.
    """

    fields: dict[str, Tag] = {}
    _, rows = select_rows(soup, row_candidates, kind="detail_fields")
    for row in rows:
        header = row.find("th")
        cell = row.find("td")
        if header is None or cell is None:
            continue
        label = clean_text(header.get_text(" ")).rstrip(":：")
        if label and label not in fields:
            fields[label] = cell
    return fields


def field_cell(fields: dict[str, Tag], aliases: Iterable[str]) -> Optional[Tag]:
    for alias in aliases:
        if alias in fields:
            return fields[alias]
    return None


def field_text(fields: dict[str, Tag], aliases: Iterable[str]) -> str:
    cell = field_cell(fields, aliases)
    if cell is None:
        return ""
    return clean_text(cell.get_text(" "))


__all__ = [
    "load_document",
    "select_rows",
    "select_first",
    "first_text",
    "attr_value",
    "input_value",
    "read_field_table",
    "field_cell",
    "field_text",
]
