"""Parsers for Zentao bug pages: "my bugs" list and bug view."""
from __future__ import annotations

import re
from typing import Optional

from bs4.element import Tag

from . import locale_text
from .models import (
    BugDetail,
    BugRecord,
    BugResolution,
    BugSeverity,
    BugStatus,
    BugType,
    NarrativeSection,
    Priority,
)
from .parser import (
    attr_value,
    field_cell,
    field_text,
    first_text,
    load_document,
    read_field_table,
    select_first,
    select_rows,
)
from .selectors_zentao import BUG_LIST_SELECTORS, DETAIL_SELECTORS
from .task_parser import TITLE_SUFFIX, extract_title, split_actor
from .utils import clean_text, log_line, resolve_url

_BUG_TITLE = re.compile(r"BUG\s*#\s*\d+\s+(.+?)" + TITLE_SUFFIX, re.IGNORECASE)
_SECTION_TITLE = re.compile(r"^\s*[\[【]([^\]】]+)[\]】]\s*(.*)$", re.DOTALL)
_TEXT_TAGS = ("p", "div", "li", "pre", "h1", "h2", "h3", "h4", "h5", "h6")
_NUMBER = re.compile(r"\d+")


def _bug_id(row: Tag) -> str:
    id_input = row.select_one(BUG_LIST_SELECTORS.id_input)
    bug_id = attr_value(id_input, ("value",))
    return bug_id or attr_value(row, BUG_LIST_SELECTORS.id_attributes)


def _nth_user(row: Tag, index: int) -> str:
    users = row.select(BUG_LIST_SELECTORS.users)
    if len(users) > index:
        return clean_text(users[index].get_text(" "))
    return ""


def _severity(element: Optional[Tag], attributes: tuple[str, ...]) -> BugSeverity:
    if element is None:
        return BugSeverity.UNKNOWN
    return BugSeverity.from_text(attr_value(element, attributes) or element.get_text(" "))


def _priority(element: Optional[Tag], attributes: tuple[str, ...]) -> Priority:
    if element is None:
        return Priority.UNKNOWN
    return Priority.from_text(attr_value(element, attributes) or element.get_text(" "))


def _badge(cell: Optional[Tag], selector: str) -> Optional[Tag]:
    if cell is None:
        return None
    return cell.select_one(selector) or cell


def _is_confirmed(text: str) -> bool:
    return locale_text.UNCONFIRMED_MARKER not in text


def _parse_bug_row(row: Tag) -> Optional[BugRecord]:
    bug_id = _bug_id(row)
    if not bug_id:
        return None

    resolution = BugResolution.from_text(first_text(row, BUG_LIST_SELECTORS.resolution))
    status = BugStatus.from_text(first_text(row, BUG_LIST_SELECTORS.status))
    if status is BugStatus.UNKNOWN:
        status = BugStatus.RESOLVED if resolution is not BugResolution.NONE else BugStatus.ACTIVE

    return BugRecord(
        id=bug_id,
        title=first_text(row, BUG_LIST_SELECTORS.title),
        status=status,
        severity=_severity(
            select_first(row, BUG_LIST_SELECTORS.severity), BUG_LIST_SELECTORS.severity_attributes
        ),
        priority=_priority(
            select_first(row, BUG_LIST_SELECTORS.priority), BUG_LIST_SELECTORS.priority_attributes
        ),
        type=BugType.from_text(first_text(row, BUG_LIST_SELECTORS.type)),
        product=first_text(row, BUG_LIST_SELECTORS.product),
        opened_by=_nth_user(row, 0),
        assigned_to=first_text(row, BUG_LIST_SELECTORS.assigned_to),
        confirmed=_is_confirmed(first_text(row, BUG_LIST_SELECTORS.confirm)),
        deadline=first_text(row, BUG_LIST_SELECTORS.deadline),
        resolved_by=_nth_user(row, 1),
        resolution=resolution,
    )


def parse_bugs_from_html(html: str) -> list[BugRecord]:
    """Extract one ``BugRecord`` per identifiable row of a bug list page.

    Never raises: a row that fails to parse is logged and skipped.
    """

    bugs: list[BugRecord] = []
    try:
        soup = load_document(html)
        selector, rows = select_rows(soup, BUG_LIST_SELECTORS.row_candidates, kind="bug_list")
        for row in rows:
            try:
                bug = _parse_bug_row(row)
            except Exception as exc:  # noqa: BLE001
                log_line(f"[PARSER][WARN] Skipping bug row after error: {exc!r}")
                continue
            if bug is not None:
                bugs.append(bug)
        log_line(f"Parsed {len(bugs)} bugs from HTML (selector={selector})")
    except Exception as exc:  # noqa: BLE001
        log_line(f"[PARSER][ERROR] Error parsing bug list HTML: {exc!r}")
    return bugs


def split_section_title(text: str) -> tuple[Optional[str], str]:
    """Split a leading bracketed section title from the text typed after it.

    ``"[结果] 报错"`` gives ``("result", "报错")``. Text without a recognised
    title gives ``(None, text)``.
    """

    match = _SECTION_TITLE.match(text or "")
    if not match:
        return None, text
    label, remainder = match.group(1), match.group(2).strip()
    for section, keywords in locale_text.SECTION_KEYWORDS.items():
        if any(keyword in label for keyword in keywords):
            return section, remainder
    return None, text


def classify_section_title(text: str) -> Optional[str]:
    """Return ``steps``/``result``/``expected`` for a bracketed section title."""

    return split_section_title(text)[0]


def _has_nested_text_block(element: Tag) -> bool:
    return element.find(_TEXT_TAGS) is not None


def split_narrative_sections(container: Tag, base_url: str) -> dict[str, NarrativeSection]:
    """Split the flat steps block into steps/result/expected sections.

    Titles, paragraphs and images are siblings with no wrapper per section,
    so this is a single scan in document order. Content before the first
    title belongs to ``steps``; text on a title line starts its section.
    """

    sections: dict[str, NarrativeSection] = {}
    current = "steps"
    texts: list[str] = []
    images: list[str] = []

    def flush() -> None:
        if texts or images or current not in sections:
            previous = sections.get(current, NarrativeSection())
            merged_text = "\n".join(filter(None, [previous.text, *texts]))
            sections[current] = NarrativeSection(merged_text, previous.images + tuple(images))
        texts.clear()
        images.clear()

    for element in container.find_all(["img", *_TEXT_TAGS]):
        if element.name == "img":
            src = resolve_url(base_url, element.get("src") or "")
            if src:
                images.append(src)
            continue

        if _has_nested_text_block(element):
            continue
        text = clean_text(element.get_text(" "))
        if not text:
            continue
        section, remainder = split_section_title(text)
        if section:
            flush()
            current = section
            if remainder:
                texts.append(remainder)
            continue
        texts.append(text)

    flush()
    return sections


def _narrative_container(soup: Tag) -> Optional[Tag]:
    for block in soup.select(DETAIL_SELECTORS.detail_block):
        title = block.select_one(DETAIL_SELECTORS.detail_block_title)
        if title is not None and locale_text.STEPS_BLOCK_TITLE in title.get_text():
            container = select_first(block, DETAIL_SELECTORS.narrative_container)
            if container is not None:
                return container
    return select_first(soup, DETAIL_SELECTORS.narrative_container)


def _to_int(value: str) -> int:
    match = _NUMBER.search(value or "")
    try:
        return int(match.group(0)) if match else 0
    except ValueError:
        return 0


def parse_bug_detail(html: str, bug_id: str, base_url: str) -> BugDetail:
    """Build a ``BugDetail`` from a bug view page.

    Image references in the narrative sections are absolute URLs; inlining
    them is left to ``images.process_images``. Raises ``DetailParseError`` only
    when the page has neither a title nor a heading.
    """

    soup = load_document(html)
    title = extract_title(soup, _BUG_TITLE)
    labels = locale_text.BUG_DETAIL_LABELS

    try:
        fields = read_field_table(soup, DETAIL_SELECTORS.field_rows)
    except Exception as exc:  # noqa: BLE001
        log_line(f"[PARSER][WARN] Bug {bug_id} field table unreadable: {exc!r}")
        fields = {}

    sections: dict[str, NarrativeSection] = {}
    container = _narrative_container(soup)
    if container is None:
        log_line(f"[PARSER][WARN] Bug {bug_id} has no steps block")
    else:
        try:
            sections = split_narrative_sections(container, base_url)
        except Exception as exc:  # noqa: BLE001
            log_line(f"[PARSER][WARN] Bug {bug_id} steps block unreadable: {exc!r}")

    def text(name: str) -> str:
        return field_text(fields, labels[name])

    severity_cell = field_cell(fields, labels["severity"])
    priority_cell = field_cell(fields, labels["priority"])

    resolution = BugResolution.from_text(text("resolution"))
    status = BugStatus.from_text(text("status"))
    if status is BugStatus.UNKNOWN:
        status = BugStatus.RESOLVED if resolution is not BugResolution.NONE else BugStatus.ACTIVE

    assigned_info = text("assigned_info")
    assigned_to, _ = split_actor(assigned_info)
    opened_by, opened_date = split_actor(text("opened_info"))
    resolved_by, resolved_date = split_actor(text("resolved_info"))
    closed_by, closed_date = split_actor(text("closed_info"))
    confirmed_text = text("confirmed")

    return BugDetail(
        id=bug_id,
        title=title,
        status=status,
        severity=_severity(_badge(severity_cell, ".label-severity"), DETAIL_SELECTORS.severity_attributes),
        priority=_priority(_badge(priority_cell, ".label-pri"), DETAIL_SELECTORS.priority_attributes),
        type=BugType.from_text(text("type")),
        product=text("product"),
        opened_by=opened_by,
        assigned_to=assigned_to,
        confirmed=_is_confirmed(confirmed_text),
        deadline=text("deadline"),
        resolved_by=resolved_by,
        resolution=resolution,
        module=text("module"),
        from_case=text("from_case"),
        plan=text("plan"),
        activated_count=_to_int(text("activated_count")),
        opened_date=opened_date,
        activated_date=text("activated_date"),
        resolved_date=resolved_date,
        closed_by=closed_by,
        closed_date=closed_date,
        assigned_info=assigned_info,
        feedback_by=text("feedback_by"),
        notify_email=text("notify_email"),
        os=text("os"),
        browser=text("browser"),
        keywords=text("keywords"),
        mailto=text("mailto"),
        steps=sections.get("steps", NarrativeSection()),
        result=sections.get("result", NarrativeSection()),
        expected=sections.get("expected", NarrativeSection()),
    )


__all__ = [
    "parse_bugs_from_html",
    "parse_bug_detail",
    "split_narrative_sections",
    "split_section_title",
    "classify_section_title",
]
