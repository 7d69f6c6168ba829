"""Command-line access to "my tasks" and "my bugs" on a Zentao server."""

from __future__ import annotations

import argparse
from typing import Callable, Sequence, TypeVar

from zentaokit.scraper import config
from zentaokit.scraper.client import ZentaoClient
from zentaokit.scraper.config_validation import validate_runtime_config
from zentaokit.scraper.date_utils import (
    HOURS_PER_DAY,
    calculate_finish_time,
    default_real_started,
    parse_hours,
    total_consumed,
)
from zentaokit.scraper.errors import (
    LoginFailedError,
    LoginResponseParseError,
    SessionExpiredError,
    SessionRefreshError,
    SubmissionFailedError,
    ZentaoError,
)
from zentaokit.scraper.models import BugDetail, BugRecord, FinishTaskParams, NarrativeSection, TaskRecord
from zentaokit.scraper.utils import log_line, setup_run_logger

T = TypeVar("T")

_RELOGIN_HINT = "Session expired. Run `zentaokit relogin` or pass --auto-relogin."


def _build_parser() -> argparse.ArgumentParser:
    """Return an argument parser for the zentaokit CLI."""

    parser = argparse.ArgumentParser(
        prog="zentaokit",
        description="View and finish your Zentao tasks and bugs.",
    )
    parser.add_argument(
        "--auto-relogin",
        action="store_true",
        help="Log in again and retry once when the session has expired.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("tasks", help="List tasks assigned to you.")
    commands.add_parser("bugs", help="List bugs assigned to you.")

    task = commands.add_parser("task", help="Show one task.")
    task.add_argument("id", help="Task ID.")

    bug = commands.add_parser("bug", help="Show one bug.")
    bug.add_argument("id", help="Bug ID.")

    finish = commands.add_parser("finish", help="Mark a task as done.")
    finish.add_argument("id", help="Task ID.")
    finish.add_argument(
        "--consumed",
        help="Hours spent in this session (defaults to the task estimate, else 8).",
    )

    commands.add_parser("relogin", help="Log in again with ZENTAO_USERNAME/ZENTAO_PASSWORD.")
    return parser


def _with_recovery(client: ZentaoClient, operation: Callable[[], T], *, auto_relogin: bool) -> T:
    """Run ``operation``; after an expired session, re-login and retry it once."""

    try:
        return operation()
    except SessionExpiredError:
        if not auto_relogin:
            raise
        log_line("[CLI] Session expired; logging in again before retrying")
        client.relogin_user()
        return operation()


def _format_task(task: TaskRecord) -> str:
    deadline = f", deadline {task.deadline}" if task.deadline else ""
    return f"#{task.id} [{task.status.value}] {task.title} (P{task.priority.value}{deadline})"


def _format_bug(bug: BugRecord) -> str:
    flags = "" if bug.confirmed else " (unconfirmed)"
    return (
        f"#{bug.id} [{bug.status.value}] {bug.title} "
        f"(S{bug.severity.value}/P{bug.priority.value}, {bug.type.value}){flags}"
    )


def _print_section(name: str, section: NarrativeSection) -> None:
    if not section:
        return
    print(f"\n[{name}]")
    if section.text:
        print(section.text)
    for image in section.images:
        print(f"  image: {image[:80]}{'...' if len(image) > 80 else ''}")


def _print_task_detail(client: ZentaoClient, task: TaskRecord) -> None:
    print(_format_task(task))
    print(f"  project: {task.project}")
    print(f"  assigned to: {task.assigned_to}")
    print(f"  hours: estimate {task.estimate}, consumed {task.consumed}, left {task.left}")
    print(f"  start: estimated {task.estimated_start or '-'}, actual {task.actual_start or '-'}")
    print(f"  url: {client.task_url(task.id)}")


def _print_bug_detail(client: ZentaoClient, bug: BugDetail) -> None:
    print(_format_bug(bug))
    print(f"  product: {bug.product} / {bug.module}")
    print(f"  opened by: {bug.opened_by} {bug.opened_date}".rstrip())
    print(f"  assigned: {bug.assigned_info}")
    if bug.resolution.value:
        print(f"  resolution: {bug.resolution.value} by {bug.resolved_by}")
    print(f"  url: {client.bug_url(bug.id)}")
    _print_section("steps", bug.steps)
    _print_section("result", bug.result)
    _print_section("expected", bug.expected)


def _default_session_hours(estimate: str) -> str:
    hours = parse_hours(estimate)
    return f"{hours:g}" if hours > 0 else str(HOURS_PER_DAY)


def _finish_task(client: ZentaoClient, task_id: str, consumed: str | None) -> bool:
    task = client.fetch_task_detail(task_id)
    if not task.status.is_finishable:
        print(f"Task #{task_id} is already {task.status.value}.")
        return False

    form = client.fetch_task_form_details(task_id)
    # The form always offers "0", which the server rejects.
    current = consumed or _default_session_hours(task.estimate)
    hours = parse_hours(current) or HOURS_PER_DAY
    real_started = form.real_started or default_real_started(task.estimated_start)
    params = FinishTaskParams(
        task_id=task_id,
        current_consumed=current,
        consumed=total_consumed(form.total_consumed, current),
        assigned_to=form.assigned_to or task.assigned_to,
        real_started=real_started,
        finished_date=calculate_finish_time(real_started, hours),
        uid=form.uid,
    )
    client.finish_task(params)
    print(f"Task #{task_id} finished ({params.consumed}h consumed in total).")
    return True


def _dispatch(client: ZentaoClient, args: argparse.Namespace) -> bool:
    command = args.command
    recover = args.auto_relogin

    if command == "relogin":
        client.relogin_user()
        print("Logged in again.")
        return True

    if command == "tasks":
        tasks = _with_recovery(client, client.fetch_task_list, auto_relogin=recover)
        for task in tasks:
            print(_format_task(task))
        print(f"{len(tasks)} task(s)")
        return True

    if command == "bugs":
        bugs = _with_recovery(client, client.fetch_bug_list, auto_relogin=recover)
        for bug in bugs:
            print(_format_bug(bug))
        print(f"{len(bugs)} bug(s)")
        return True

    if command == "task":
        task = _with_recovery(client, lambda: client.fetch_task_detail(args.id), auto_relogin=recover)
        _print_task_detail(client, task)
        return True

    if command == "bug":
        bug = _with_recovery(client, lambda: client.fetch_bug_detail(args.id), auto_relogin=recover)
        _print_bug_detail(client, bug)
        return True

    return _with_recovery(
        client,
        lambda: _finish_task(client, args.id, args.consumed),
        auto_relogin=recover,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the zentaokit CLI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    setup_run_logger()

    credentials = config.load_credentials()
    try:
        validate_runtime_config("cli", credentials)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 1

    client = ZentaoClient(lambda: credentials)
    try:
        ok = _dispatch(client, args)
    except SessionExpiredError:
        print(_RELOGIN_HINT)
        return 1
    except LoginFailedError as exc:
        print(f"Login failed, check ZENTAO_USERNAME/ZENTAO_PASSWORD: {exc}")
        return 1
    except LoginResponseParseError as exc:
        print(f"Unexpected login response from server: {exc}")
        return 1
    except SessionRefreshError as exc:
        print(f"Could not refresh the session: {exc.cause or exc}")
        return 1
    except SubmissionFailedError as exc:
        print(f"Server rejected the submission: {exc}")
        return 1
    except ZentaoError as exc:
        print(f"Error ({exc.error_code}): {exc}")
        return 1

    return 0 if ok else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry
    raise SystemExit(main())
