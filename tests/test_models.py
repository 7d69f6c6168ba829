import pytest

from zentaokit.scraper.models import (
    BugResolution,
    BugSeverity,
    BugStatus,
    BugType,
    FinishTaskParams,
    Priority,
    TaskStatus,
)


@pytest.mark.parametrize(
    ("text", "status"),
    [
        ("未开始", TaskStatus.WAIT),
        ("进行中", TaskStatus.DOING),
        ("已完成", TaskStatus.DONE),
        ("已暂停", TaskStatus.PAUSE),
        ("已取消", TaskStatus.CANCEL),
        ("已关闭", TaskStatus.CLOSED),
        ("doing", TaskStatus.DOING),
        ("Done", TaskStatus.DONE),
        ("挂起", TaskStatus.UNKNOWN),
        ("", TaskStatus.UNKNOWN),
        (None, TaskStatus.UNKNOWN),
    ],
)
def test_task_status_from_text(text, status):
    assert TaskStatus.from_text(text) is status


def test_unrecognised_text_maps_to_explicit_defaults():
    assert Priority.from_text("urgent") is Priority.UNKNOWN
    assert Priority.from_text("9") is Priority.UNKNOWN
    assert BugSeverity.from_text("") is BugSeverity.UNKNOWN
    assert BugStatus.from_text("待定") is BugStatus.UNKNOWN
    assert BugType.from_text("新类型") is BugType.OTHERS
    assert BugResolution.from_text("随便") is BugResolution.NONE


def test_numeric_enums_read_first_digit():
    assert Priority.from_text("P1") is Priority.CRITICAL
    assert Priority.from_text(" 4 ") is Priority.LOW
    assert BugSeverity.from_text("4") is BugSeverity.CRITICAL
    assert BugSeverity.from_text("severity-1") is BugSeverity.MINOR


def test_bug_enums_from_text():
    assert BugType.from_text("设计缺陷") is BugType.DESIGN_DEFECT
    assert BugType.from_text("codeerror") is BugType.CODE_ERROR
    assert BugStatus.from_text("已解决") is BugStatus.RESOLVED
    assert BugResolution.from_text("重复Bug #12") is BugResolution.DUPLICATE
    assert BugResolution.from_text("转为研发需求") is BugResolution.TOSTORY
    assert BugResolution.from_text("") is BugResolution.NONE


def test_finishable_statuses():
    assert TaskStatus.DOING.is_finishable
    assert TaskStatus.WAIT.is_finishable
    assert not TaskStatus.DONE.is_finishable
    assert not TaskStatus.CLOSED.is_finishable


def test_finish_params_form_fields():
    params = FinishTaskParams(
        task_id="101",
        current_consumed="2",
        consumed="5",
        assigned_to="zhangsan",
        real_started="2024-05-01 09:00",
        finished_date="2024-05-01 11:00",
        uid="65f1c0a2e9b1d",
    )

    assert params.to_form_fields() == {
        "currentConsumed": "2",
        "consumed": "5",
        "assignedTo": "zhangsan",
        "realStarted": "2024-05-01 09:00",
        "finishedDate": "2024-05-01 11:00",
        "status": "done",
        "comment": "client: zentaokit",
        "uid": "65f1c0a2e9b1d",
    }
