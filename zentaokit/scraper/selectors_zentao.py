from __future__ import annotations

"""CSS selector tables for the Zentao pages scraped by the client.

Markup differs between list contexts and Zentao releases, so every lookup is
an ordered tuple of candidates. Parsers use the first candidate that matches;
supporting a new markup variant means appending a candidate here.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class TaskListSelectors:
    row_candidates: Tuple[str, ...] = (
        "tr[data-id]",
        "tbody tr",
        ".table tr",
        "#taskTable tr",
    )
    id_attributes: Tuple[str, ...] = ("data-id",)
    title: Tuple[str, ...] = (".c-name a", ".c-name")
    status: Tuple[str, ...] = (".c-status .status-task", ".c-status")
    project: Tuple[str, ...] = (".c-project a", ".c-project")
    priority: Tuple[str, ...] = (".c-pri span", ".c-pri")
    deadline: Tuple[str, ...] = (".c-deadline", "td.text-center span")
    hours: str = ".c-hours"
    assigned_to: Tuple[str, ...] = (".c-assignedTo", ".c-user")


@dataclass(frozen=True)
class BugListSelectors:
    row_candidates: Tuple[str, ...] = (
        "tr[data-id]",
        "#bugList tbody tr",
        ".table-bug tbody tr",
        "#myBugForm table tbody tr",
    )
    id_input: str = "input[name='bugIDList[]']"
    id_attributes: Tuple[str, ...] = ("data-id",)
    title: Tuple[str, ...] = (".text-left.nobr a", ".c-title a", ".c-title")
    status: Tuple[str, ...] = (".c-status .status-bug", ".c-status")
    severity: Tuple[str, ...] = (".c-severity .label-severity", ".label-severity")
    severity_attributes: Tuple[str, ...] = ("data-severity", "title")
    priority: Tuple[str, ...] = (".label-pri",)
    priority_attributes: Tuple[str, ...] = ("title",)
    type: Tuple[str, ...] = (".c-type",)
    product: Tuple[str, ...] = (".c-product a", ".c-product")
    users: str = ".c-user"
    assigned_to: Tuple[str, ...] = (".c-assignedTo",)
    confirm: Tuple[str, ...] = (".c-confirm",)
    deadline: Tuple[str, ...] = (".c-date.text-center", ".c-deadline")
    resolution: Tuple[str, ...] = (".c-resolution",)


@dataclass(frozen=True)
class DetailSelectors:
    heading: Tuple[str, ...] = (
        "#mainMenu .page-title .text",
        ".page-title .text",
        ".main-header h2",
        "h1",
    )
    field_rows: Tuple[str, ...] = (
        "table.table-data tr",
        ".detail-content table tr",
    )
    detail_block: str = ".detail"
    detail_block_title: str = ".detail-title"
    narrative_container: Tuple[str, ...] = (
        ".detail-content.article-content",
        ".article-content",
    )
    severity_attributes: Tuple[str, ...] = ("data-severity", "title")
    priority_attributes: Tuple[str, ...] = ("title",)


@dataclass(frozen=True)
class TaskFormSelectors:
    member_options: Tuple[str, ...] = (
        "select#assignedTo option",
        "select[name='assignedTo'] option",
    )
    current_consumed: Tuple[str, ...] = ("input#currentConsumed", "input[name='currentConsumed']")
    total_consumed: Tuple[str, ...] = ("input#consumed", "input[name='consumed']")
    real_started: Tuple[str, ...] = ("input#realStarted", "input[name='realStarted']")
    finished_date: Tuple[str, ...] = ("input#finishedDate", "input[name='finishedDate']")
    uid: Tuple[str, ...] = ("input#uid", "input[name='uid']")


TASK_LIST_SELECTORS = TaskListSelectors()
BUG_LIST_SELECTORS = BugListSelectors()
DETAIL_SELECTORS = DetailSelectors()
TASK_FORM_SELECTORS = TaskFormSelectors()

__all__ = [
    "TaskListSelectors",
    "BugListSelectors",
    "DetailSelectors",
    "TaskFormSelectors",
    "TASK_LIST_SELECTORS",
    "BUG_LIST_SELECTORS",
    "DETAIL_SELECTORS",
    "TASK_FORM_SELECTORS",
]
