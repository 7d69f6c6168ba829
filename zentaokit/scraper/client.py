"""Fetch orchestration for the Zentao pages the client understands.

Every fetch checks the body for the login redirect stub and raises
``SessionExpiredError`` instead of parsing it. Nothing here retries: callers
decide whether to call ``relogin_user()`` and repeat the operation.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Optional

import requests

from . import config
from .bug_parser import parse_bug_detail, parse_bugs_from_html
from .config import Credentials
from .errors import SessionExpiredError
from .images import process_images
from .login import relogin_user
from .logging_utils import _scraper_event
from .models import BugDetail, BugRecord, FinishTaskParams, NarrativeSection, TaskFormDetails, TaskRecord
from .session import is_session_expired, login_redirect_target
from .task_parser import (
    parse_finish_response,
    parse_task_detail,
    parse_task_form,
    parse_tasks_from_html,
)
from .transport import build_headers, send
from .utils import log_line, save_api_response

CredentialsProvider = Callable[[], Credentials]


class ZentaoClient:
    """Authenticated access to one Zentao account.

    ``credentials_provider`` is called for every request so a session cookie
    refreshed out-of-band is picked up without rebuilding the client.
    """

    def __init__(
        self,
        credentials_provider: CredentialsProvider = config.load_credentials,
        *,
        session: Optional[Any] = None,
        timeout: Optional[int] = None,
    ) -> None:
        self._credentials_provider = credentials_provider
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout or config.HTTP_TIMEOUT_SECONDS

    @property
    def credentials(self) -> Credentials:
        return self._credentials_provider()

    def task_url(self, task_id: str) -> str:
        return config.page_url(self.credentials, config.TASK_VIEW_PATH, id=task_id)

    def bug_url(self, bug_id: str) -> str:
        return config.page_url(self.credentials, config.BUG_VIEW_PATH, id=bug_id)

    def _fetch_page(
        self,
        path_template: str,
        *,
        log_name: str,
        method: str = "GET",
        **params: Any,
    ) -> str:
        credentials = self.credentials
        url = config.page_url(credentials, path_template, **params.pop("path_params", {}))
        response = send(
            self._session,
            method,
            url,
            headers=build_headers(credentials),
            timeout=self._timeout,
            **params,
        )
        html = response.text or ""
        if is_session_expired(html):
            log_line(
                f"[SESSION] Session expired detected while fetching {log_name} "
                f"(redirect={login_redirect_target(html)})"
            )
            _scraper_event("session", phase="check", page=log_name, expired=True)
            raise SessionExpiredError()

        save_api_response(log_name, html, f"Saved {log_name}")
        return html

    def fetch_task_list(self) -> list[TaskRecord]:
        html = self._fetch_page(config.TASK_LIST_PATH, log_name="my-task.html")
        return parse_tasks_from_html(html)

    def fetch_task_detail(self, task_id: str) -> TaskRecord:
        html = self._fetch_page(
            config.TASK_VIEW_PATH,
            log_name=f"task-{task_id}.html",
            path_params={"id": task_id},
        )
        return parse_task_detail(html, task_id)

    def fetch_bug_list(self) -> list[BugRecord]:
        html = self._fetch_page(config.BUG_LIST_PATH, log_name="my-bug.html")
        return parse_bugs_from_html(html)

    def fetch_bug_detail(self, bug_id: str) -> BugDetail:
        """Fetch a bug view page and inline its plain-HTTP images."""

        html = self._fetch_page(
            config.BUG_VIEW_PATH,
            log_name=f"bug-{bug_id}.html",
            path_params={"id": bug_id},
        )
        detail = parse_bug_detail(html, bug_id, self.credentials.root)
        if not detail.has_images:
            return detail

        sections = (detail.steps, detail.result, detail.expected)
        flat = [url for section in sections for url in section.images]
        processed = iter(process_images(flat, session=self._session, credentials=self.credentials))
        steps, result, expected = (
            NarrativeSection(section.text, tuple(next(processed) for _ in section.images))
            for section in sections
        )
        return dataclasses.replace(detail, steps=steps, result=result, expected=expected)

    def fetch_task_form_details(self, task_id: str) -> TaskFormDetails:
        html = self._fetch_page(
            config.TASK_FINISH_PATH,
            log_name=f"task-finish-{task_id}.html",
            path_params={"id": task_id},
        )
        return parse_task_form(html)

    def finish_task(self, params: FinishTaskParams) -> bool:
        """Submit the finish-task form; raises ``SubmissionFailedError`` on rejection."""

        fields = {name: (None, value) for name, value in params.to_form_fields().items()}
        html = self._fetch_page(
            config.TASK_FINISH_PATH,
            log_name=f"task-finish-{params.task_id}-result.html",
            method="POST",
            path_params={"id": params.task_id},
            files=fields,
        )
        parse_finish_response(html)
        log_line(f"[FINISH] Task {params.task_id} finished")
        return True

    def relogin_user(self) -> None:
        relogin_user(self._session, self.credentials)


__all__ = ["ZentaoClient", "CredentialsProvider"]
