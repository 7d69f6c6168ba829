"""Parsers for Zentao task pages: "my tasks" list, task view, finish form."""
from __future__ import annotations

import re
from typing import Optional

from bs4.element import Tag

from . import locale_text
from .errors import DetailParseError, SubmissionFailedError
from .models import Priority, TaskFormDetails, TaskRecord, TaskStatus, TeamMember
from .parser import (
    attr_value,
    field_cell,
    field_text,
    first_text,
    input_value,
    load_document,
    read_field_table,
    select_first,
    select_rows,
)
from .selectors_zentao import DETAIL_SELECTORS, TASK_FORM_SELECTORS, TASK_LIST_SELECTORS
from .utils import clean_text, log_line

# "<name> - <project> - <site>"; the name itself may contain " - ".
TITLE_SUFFIX = r"(?:\s+-\s+(?:(?!\s+-\s).)+){0,2}$"
_TASK_TITLE = re.compile(r"TASK\s*#\s*\d+\s+(.+?)" + TITLE_SUFFIX, re.IGNORECASE)
_KUID = re.compile(r"kuid\s*=\s*['\"]([^'\"]+)['\"]")
_ALERT = re.compile(r"alert\(\s*(['\"])(.*?)\1\s*\)", re.DOTALL)
FINISH_SUCCESS_MARKER = "parent.parent.location.reload()"


def _status_from_cell(scope: Tag) -> TaskStatus:
    element = select_first(scope, TASK_LIST_SELECTORS.status)
    if element is None:
        return TaskStatus.UNKNOWN
    status = TaskStatus.from_text(clean_text(element.get_text(" ")))
    if status is TaskStatus.UNKNOWN:
        # Some list variants only expose the code as a class, e.g. "status-doing".
        for css_class in element.get("class") or []:
            if css_class.startswith("status-") and css_class != "status-task":
                return TaskStatus.from_text(css_class[len("status-"):])
    return status


def _parse_task_row(row: Tag) -> Optional[TaskRecord]:
    task_id = attr_value(row, TASK_LIST_SELECTORS.id_attributes)
    if not task_id:
        return None

    hours = [clean_text(cell.get_text(" ")) for cell in row.select(TASK_LIST_SELECTORS.hours)]
    hours += [""] * (3 - len(hours))

    priority_element = select_first(row, TASK_LIST_SELECTORS.priority)
    priority_text = ""
    if priority_element is not None:
        priority_text = clean_text(priority_element.get_text(" ")) or attr_value(priority_element, ("title",))

    return TaskRecord(
        id=task_id,
        title=first_text(row, TASK_LIST_SELECTORS.title),
        status=_status_from_cell(row),
        project=first_text(row, TASK_LIST_SELECTORS.project),
        assigned_to=first_text(row, TASK_LIST_SELECTORS.assigned_to),
        deadline=first_text(row, TASK_LIST_SELECTORS.deadline),
        priority=Priority.from_text(priority_text),
        estimate=hours[0],
        consumed=hours[1],
        left=hours[2],
    )


def parse_tasks_from_html(html: str) -> list[TaskRecord]:
    """Extract one ``TaskRecord`` per identifiable row of a task list page.

    Never raises: a row that fails to parse is logged and skipped.
    """

    tasks: list[TaskRecord] = []
    try:
        soup = load_document(html)
        selector, rows = select_rows(soup, TASK_LIST_SELECTORS.row_candidates, kind="task_list")
        for row in rows:
            try:
                task = _parse_task_row(row)
            except Exception as exc:  # noqa: BLE001
                log_line(f"[PARSER][WARN] Skipping task row after error: {exc!r}")
                continue
            if task is not None:
                tasks.append(task)
        log_line(f"Parsed {len(tasks)} tasks from HTML (selector={selector})")
    except Exception as exc:  # noqa: BLE001
        log_line(f"[PARSER][ERROR] Error parsing task list HTML: {exc!r}")
    return tasks


def extract_title(soup: Tag, pattern: re.Pattern[str]) -> str:
    """Return the entity title from ``<title>`` or, failing that, the page heading.

    Raises ``DetailParseError`` when neither is present.
    """

    title_tag = soup.find("title")
    if title_tag is not None:
        match = pattern.search(clean_text(title_tag.get_text()))
        if match:
            return clean_text(match.group(1))

    heading = select_first(soup, DETAIL_SELECTORS.heading)
    if heading is not None:
        text = attr_value(heading, ("title",)) or clean_text(heading.get_text(" "))
        if text:
            return text

    raise DetailParseError("Unrecognisable detail page: no title and no heading")


def split_actor(value: str) -> tuple[str, str]:
    """Split ``"admin 于 2024-05-01 10:00"`` into the user and the date."""

    text = clean_text(value)
    separator = f" {locale_text.ACTOR_DATE_SEPARATOR} "
    if separator in text:
        actor, _, when = text.partition(separator)
        return actor.strip(), when.strip()
    return text, ""


def _labelled_priority(fields: dict[str, Tag], aliases: tuple[str, ...]) -> Priority:
    cell = field_cell(fields, aliases)
    if cell is None:
        return Priority.UNKNOWN
    badge = cell.select_one(".label-pri") or cell
    return Priority.from_text(attr_value(badge, DETAIL_SELECTORS.priority_attributes) or badge.get_text(" "))


def parse_task_detail(html: str, task_id: str) -> TaskRecord:
    """Build a ``TaskRecord`` (with start dates) from a task view page."""

    soup = load_document(html)
    title = extract_title(soup, _TASK_TITLE)
    labels = locale_text.TASK_DETAIL_LABELS

    try:
        fields = read_field_table(soup, DETAIL_SELECTORS.field_rows)
    except Exception as exc:  # noqa: BLE001
        log_line(f"[PARSER][WARN] Task {task_id} field table unreadable: {exc!r}")
        fields = {}

    assigned_to, _ = split_actor(field_text(fields, labels["assigned_to"]))

    return TaskRecord(
        id=task_id,
        title=title,
        status=TaskStatus.from_text(field_text(fields, labels["status"])),
        project=field_text(fields, labels["project"]),
        assigned_to=assigned_to,
        deadline=field_text(fields, labels["deadline"]),
        priority=_labelled_priority(fields, labels["priority"]),
        estimate=field_text(fields, labels["estimate"]),
        consumed=field_text(fields, labels["consumed"]),
        left=field_text(fields, labels["left"]),
        estimated_start=field_text(fields, labels["estimated_start"]),
        actual_start=field_text(fields, labels["actual_start"]),
    )


def _parse_member(option: Tag) -> Optional[TeamMember]:
    value = (option.get("value") or "").strip()
    label = clean_text(option.get_text(" "))
    if not value and not label:
        return None
    return TeamMember(
        value=value,
        label=label,
        title=(option.get("title") or "").strip() or label,
        selected=option.has_attr("selected"),
    )


def parse_task_form(html: str) -> TaskFormDetails:
    """Read members and default values from the embedded finish-task form."""

    soup = load_document(html)
    _, options = select_rows(soup, TASK_FORM_SELECTORS.member_options, kind="team_members")

    members: list[TeamMember] = []
    for option in options:
        member = _parse_member(option)
        if member is not None:
            members.append(member)

    uid = input_value(soup, TASK_FORM_SELECTORS.uid)
    if not uid:
        match = _KUID.search(html or "")
        uid = match.group(1) if match else ""
    if not uid:
        log_line("[PARSER][WARN] Finish form has no uid; submission may be rejected")

    selected = next((member for member in members if member.selected), None)
    return TaskFormDetails(
        members=tuple(members),
        current_consumed=input_value(soup, TASK_FORM_SELECTORS.current_consumed),
        total_consumed=input_value(soup, TASK_FORM_SELECTORS.total_consumed),
        assigned_to=selected.value if selected else "",
        real_started=input_value(soup, TASK_FORM_SELECTORS.real_started),
        finished_date=input_value(soup, TASK_FORM_SELECTORS.finished_date),
        uid=uid,
    )


def parse_finish_response(html: str) -> bool:
    """Return ``True`` for an accepted finish submission.

    The endpoint answers 200 either way; a rejection carries an
    ``alert('...')`` script and lacks the parent reload call.
    """

    body = html or ""
    alert = _ALERT.search(body)
    if alert:
        message = clean_text(alert.group(2)) or "Task submission was rejected"
        log_line(f"[FINISH][ERROR] Submission rejected: {message}")
        raise SubmissionFailedError(message)
    if FINISH_SUCCESS_MARKER not in body:
        log_line("[FINISH][ERROR] Submission response lacks the success marker")
        raise SubmissionFailedError("Failed to finish task: unexpected server response")
    return True


__all__ = [
    "parse_tasks_from_html",
    "parse_task_detail",
    "parse_task_form",
    "parse_finish_response",
    "extract_title",
    "split_actor",
    "FINISH_SUCCESS_MARKER",
    "TITLE_SUFFIX",
]
