"""Typed records built from scraped Zentao pages."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from . import locale_text

_FIRST_DIGIT = re.compile(r"\d")


def _lookup(value: Optional[str], table: dict[str, str]) -> Optional[str]:
    text = (value or "").strip()
    if not text:
        return None
    if text in table:
        return table[text]
    lowered = text.lower()
    if lowered in table.values():
        return lowered
    return None


class TaskStatus(str, Enum):
    WAIT = "wait"
    DOING = "doing"
    DONE = "done"
    PAUSE = "pause"
    CANCEL = "cancel"
    CLOSED = "closed"
    UNKNOWN = "unknown"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "TaskStatus":
        """Map a status cell text (or status code) to a member; never raises."""

        code = _lookup(value, locale_text.TASK_STATUS_TEXT)
        return cls(code) if code else cls.UNKNOWN

    @property
    def is_finishable(self) -> bool:
        return self not in {TaskStatus.DONE, TaskStatus.CLOSED}


class Priority(str, Enum):
    """Task and bug priority; 1 is the most urgent."""

    CRITICAL = "1"
    HIGH = "2"
    MEDIUM = "3"
    LOW = "4"
    UNKNOWN = "0"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "Priority":
        match = _FIRST_DIGIT.search(value or "")
        if match and match.group(0) in {"1", "2", "3", "4"}:
            return cls(match.group(0))
        return cls.UNKNOWN


class BugSeverity(str, Enum):
    """Bug severity; 4 is the most severe."""

    MINOR = "1"
    NORMAL = "2"
    MAJOR = "3"
    CRITICAL = "4"
    UNKNOWN = "0"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "BugSeverity":
        match = _FIRST_DIGIT.search(value or "")
        if match and match.group(0) in {"1", "2", "3", "4"}:
            return cls(match.group(0))
        return cls.UNKNOWN


class BugStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    CLOSED = "closed"
    UNKNOWN = "unknown"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "BugStatus":
        code = _lookup(value, locale_text.BUG_STATUS_TEXT)
        return cls(code) if code else cls.UNKNOWN


class BugType(str, Enum):
    CODE_ERROR = "codeerror"
    INTERFACE = "interface"
    CONFIG = "config"
    INSTALL = "install"
    SECURITY = "security"
    PERFORMANCE = "performance"
    STANDARD = "standard"
    AUTOMATION = "automation"
    DESIGN_DEFECT = "designdefect"
    OTHERS = "others"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "BugType":
        code = _lookup(value, locale_text.BUG_TYPE_TEXT)
        return cls(code) if code else cls.OTHERS


class BugResolution(str, Enum):
    NONE = ""
    FIXED = "fixed"
    WONTFIX = "wontfix"
    EXTERNAL = "external"
    DUPLICATE = "duplicate"
    NOTREPRO = "notrepro"
    POSTPONED = "postponed"
    BYDESIGN = "bydesign"
    WILLNOTFIX = "willnotfix"
    TOSTORY = "tostory"

    @classmethod
    def from_text(cls, value: Optional[str]) -> "BugResolution":
        text = (value or "").strip()
        # Resolution cells may carry a trailing reference, e.g. "重复Bug #12".
        for label, code in locale_text.BUG_RESOLUTION_TEXT.items():
            if text == label or text.startswith(label + " "):
                return cls(code)
        code = _lookup(text, locale_text.BUG_RESOLUTION_TEXT)
        return cls(code) if code else cls.NONE


@dataclass(frozen=True)
class TaskRecord:
    id: str
    title: str
    status: TaskStatus = TaskStatus.UNKNOWN
    project: str = ""
    assigned_to: str = ""
    deadline: str = ""
    priority: Priority = Priority.UNKNOWN
    estimate: str = ""
    consumed: str = ""
    left: str = ""
    # Only filled from the task view page.
    estimated_start: str = ""
    actual_start: str = ""


@dataclass(frozen=True)
class BugRecord:
    id: str
    title: str
    status: BugStatus = BugStatus.ACTIVE
    severity: BugSeverity = BugSeverity.UNKNOWN
    priority: Priority = Priority.UNKNOWN
    type: BugType = BugType.OTHERS
    product: str = ""
    opened_by: str = ""
    assigned_to: str = ""
    confirmed: bool = True
    deadline: str = ""
    resolved_by: str = ""
    resolution: BugResolution = BugResolution.NONE


@dataclass(frozen=True)
class NarrativeSection:
    """Text of one steps/result/expected block plus its images in page order."""

    text: str = ""
    images: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.text or self.images)


@dataclass(frozen=True)
class BugDetail(BugRecord):
    module: str = ""
    from_case: str = ""
    plan: str = ""
    activated_count: int = 0
    opened_date: str = ""
    activated_date: str = ""
    resolved_date: str = ""
    closed_by: str = ""
    closed_date: str = ""
    assigned_info: str = ""
    feedback_by: str = ""
    notify_email: str = ""
    os: str = ""
    browser: str = ""
    keywords: str = ""
    mailto: str = ""
    steps: NarrativeSection = field(default_factory=NarrativeSection)
    result: NarrativeSection = field(default_factory=NarrativeSection)
    expected: NarrativeSection = field(default_factory=NarrativeSection)

    @property
    def has_images(self) -> bool:
        return bool(self.steps.images or self.result.images or self.expected.images)


@dataclass(frozen=True)
class TeamMember:
    value: str
    label: str
    title: str
    selected: bool = False


@dataclass(frozen=True)
class TaskFormDetails:
    members: tuple[TeamMember, ...]
    current_consumed: str = ""
    total_consumed: str = ""
    assigned_to: str = ""
    real_started: str = ""
    finished_date: str = ""
    uid: str = ""

    @property
    def selected_member(self) -> Optional[TeamMember]:
        return next((member for member in self.members if member.selected), None)


@dataclass(frozen=True)
class FinishTaskParams:
    task_id: str
    current_consumed: str
    consumed: str
    assigned_to: str
    real_started: str
    finished_date: str
    uid: str = ""
    status: str = "done"
    comment: str = "client: zentaokit"

    def to_form_fields(self) -> dict[str, str]:
        return {
            "currentConsumed": self.current_consumed,
            "consumed": self.consumed,
            "assignedTo": self.assigned_to,
            "realStarted": self.real_started,
            "finishedDate": self.finished_date,
            "status": self.status,
            "comment": self.comment,
            "uid": self.uid,
        }


__all__ = [
    "TaskStatus",
    "Priority",
    "BugSeverity",
    "BugStatus",
    "BugType",
    "BugResolution",
    "TaskRecord",
    "BugRecord",
    "NarrativeSection",
    "BugDetail",
    "TeamMember",
    "TaskFormDetails",
    "FinishTaskParams",
]
