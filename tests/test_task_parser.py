import pytest

from zentaokit.scraper import task_parser
from zentaokit.scraper.errors import DetailParseError, SubmissionFailedError
from zentaokit.scraper.models import Priority, TaskStatus
from zentaokit.scraper.task_parser import (
    parse_finish_response,
    parse_task_detail,
    parse_task_form,
    parse_tasks_from_html,
    split_actor,
)


def test_parse_tasks_from_list_page(read_fixture):
    tasks = parse_tasks_from_html(read_fixture("my-task.html"))

    assert [task.id for task in tasks] == ["101", "102", "103"]

    first = tasks[0]
    assert first.title == "修复登录问题"
    assert first.status is TaskStatus.DOING
    assert first.project == "项目A"
    assert first.assigned_to == "张三"
    assert first.deadline == "2024-05-10"
    assert first.priority is Priority.HIGH
    assert (first.estimate, first.consumed, first.left) == ("8", "3", "5")


def test_missing_fields_default_per_field(read_fixture):
    tasks = {task.id: task for task in parse_tasks_from_html(read_fixture("my-task.html"))}

    # Status only exposed through the css class.
    assert tasks["102"].status is TaskStatus.WAIT
    assert tasks["102"].priority is Priority.UNKNOWN
    assert tasks["102"].deadline == ""

    assert tasks["103"].status is TaskStatus.UNKNOWN
    assert tasks["103"].project == ""
    assert tasks["103"].assigned_to == ""
    assert (tasks["103"].estimate, tasks["103"].consumed, tasks["103"].left) == ("2", "", "")


def test_rows_without_identity_are_dropped():
    html = """
    <table class="table"><tbody>
      <tr><td class="c-name"><a>无编号任务</a></td></tr>
      <tr><td class="c-name"><a>另一个</a></td></tr>
    </tbody></table>
    """

    assert parse_tasks_from_html(html) == []


def test_first_matching_row_candidate_wins():
    html = """
    <table id="taskTable"><tbody>
      <tr data-id="1"><td class="c-name">有编号</td></tr>
      <tr><td class="c-name">无编号</td></tr>
    </tbody></table>
    """

    tasks = parse_tasks_from_html(html)

    assert [(task.id, task.title) for task in tasks] == [("1", "有编号")]


@pytest.mark.parametrize("html", ["", "<html><body><p>没有任务</p></body></html>", "<<<>>>"])
def test_empty_or_garbage_list_yields_empty(html):
    assert parse_tasks_from_html(html) == []


def test_list_parser_never_raises(monkeypatch, read_fixture):
    messages = []
    monkeypatch.setattr(task_parser, "log_line", lambda msg: messages.append(msg))

    def _boom(_row):  # noqa: ANN001
        raise RuntimeError("bad row")

    monkeypatch.setattr(task_parser, "_parse_task_row", _boom)

    assert parse_tasks_from_html(read_fixture("my-task.html")) == []
    assert any("Skipping task row" in msg for msg in messages)


def test_parse_task_detail(read_fixture):
    task = parse_task_detail(read_fixture("task-view.html"), "101")

    assert task.id == "101"
    assert task.title == "修复登录问题"
    assert task.status is TaskStatus.DOING
    assert task.priority is Priority.HIGH
    assert task.project == "项目A"
    assert task.assigned_to == "张三"
    assert task.deadline == "2024-05-10"
    assert task.estimated_start == "2024-05-01"
    assert task.actual_start == "2024-05-01 09:30:00"
    assert (task.estimate, task.consumed, task.left) == ("8工时", "3工时", "5工时")


def test_detail_title_falls_back_to_heading():
    html = """
    <html><head></head><body>
      <div id="mainMenu"><div class="page-title"><span class="text" title="完整的任务标题">完整的...</span></div></div>
    </body></html>
    """

    task = parse_task_detail(html, "9")

    assert task.title == "完整的任务标题"
    assert task.status is TaskStatus.UNKNOWN


@pytest.mark.parametrize(
    ("page_title", "expected"),
    [
        ("TASK #7 迁移 - 回滚脚本 - 项目A - 禅道", "迁移 - 回滚脚本"),
        ("TASK #7 导出 v1-v2 报表 - 项目A - 禅道", "导出 v1-v2 报表"),
        ("TASK #7 单独标题", "单独标题"),
    ],
)
def test_detail_title_keeps_inner_separators(page_title, expected):
    html = f"<html><head><title>{page_title}</title></head><body></body></html>"

    assert parse_task_detail(html, "7").title == expected


def test_unrecognisable_detail_page_raises():
    with pytest.raises(DetailParseError):
        parse_task_detail("<html><body><p>nothing here</p></body></html>", "9")


def test_split_actor():
    assert split_actor("张三 于 2024-05-01 10:00:00") == ("张三", "2024-05-01 10:00:00")
    assert split_actor("张三") == ("张三", "")


def test_parse_task_form(read_fixture):
    form = parse_task_form(read_fixture("task-finish-form.html"))

    assert [member.value for member in form.members] == ["admin", "zhangsan", "lisi"]
    assert form.members[0].title == "管理员"
    assert form.members[2].title == "L:李四"
    assert form.selected_member is not None
    assert form.selected_member.value == "zhangsan"
    assert form.assigned_to == "zhangsan"
    assert form.current_consumed == "0"
    assert form.total_consumed == "3"
    assert form.real_started == "2024-05-01 09:00"
    assert form.finished_date == "2024-05-02 18:00"
    assert form.uid == "65f1c0a2e9b1d"


def test_finish_response_success_marker(read_fixture):
    assert parse_finish_response(read_fixture("task-finish-success.html")) is True


def test_finish_response_alert_is_surfaced(read_fixture):
    with pytest.raises(SubmissionFailedError) as excinfo:
        parse_finish_response(read_fixture("task-finish-alert.html"))

    assert str(excinfo.value) == '"本次消耗"必须大于0'


def test_finish_response_without_marker_fails():
    with pytest.raises(SubmissionFailedError):
        parse_finish_response("<html><body>ok?</body></html>")
