"""Re-authentication against the Zentao login endpoint.

The session cookie is renewed server-side: the login request is sent with the
expiring session id and ``keepLogin`` set, so a successful login revives that
same session and nothing new has to be captured here.
"""
from __future__ import annotations

import json
from typing import Any

from . import config
from .config import Credentials
from .errors import LoginFailedError, LoginResponseParseError, SessionRefreshError
from .logging_utils import _scraper_event
from .transport import build_headers, send
from .utils import log_line, save_api_response


def refresh_random(session: Any, credentials: Credentials) -> str:
    """Fetch the one-time ``verifyRand`` token required by the login form.

    Transport failures propagate as ``TransportError``.
    """

    url = config.page_url(credentials, config.REFRESH_RANDOM_PATH)
    headers = build_headers(
        credentials,
        accept="*/*",
        extra={
            "X-Requested-With": "XMLHttpRequest",
            "Referer": config.page_url(credentials, config.LOGIN_PATH),
        },
    )
    response = send(session, "GET", url, headers=headers)
    verify_rand = (response.text or "").strip()
    save_api_response("refresh-random.log", verify_rand, "Saved refresh random response to log file")
    return verify_rand


def _login_fields(credentials: Credentials, verify_rand: str) -> dict[str, tuple[None, str]]:
    fields = {
        "account": credentials.username,
        "password": credentials.password,
        "passwordStrength": "2",
        "referer": "/",
        "verifyRand": verify_rand,
        "keepLogin": "1",
        "captcha": "",
    }
    # (None, value) makes requests send plain multipart form fields.
    return {name: (None, value) for name, value in fields.items()}


def parse_login_response(response_text: str) -> dict[str, Any]:
    """Classify the JSON login result; return it when the login succeeded."""

    try:
        login_result = json.loads(response_text)
    except ValueError as exc:
        log_line(f"[LOGIN][ERROR] Failed to parse login response: {exc}")
        raise LoginResponseParseError("Failed to parse login response", response_text) from exc

    if not isinstance(login_result, dict):
        log_line("[LOGIN][ERROR] Login response is not a JSON object")
        raise LoginResponseParseError("Failed to parse login response", response_text)

    if login_result.get("result") != "success":
        message = login_result.get("message") or "unknown reason"
        log_line(f"[LOGIN][ERROR] Login rejected: {message}")
        raise LoginFailedError(f"Login failed: {message}", login_result)

    return login_result


def relogin_user(session: Any, credentials: Credentials) -> None:
    """Log in again with the stored account to revive the session cookie.

    Raises ``LoginFailedError`` or ``LoginResponseParseError`` unchanged; any
    other failure is wrapped in ``SessionRefreshError``.
    """

    _scraper_event("login", phase="start", username=credentials.username)
    try:
        verify_rand = refresh_random(session, credentials)

        login_url = config.page_url(credentials, config.LOGIN_PATH)
        headers = build_headers(
            credentials,
            accept=config.JSON_ACCEPT,
            include_username=False,
            extra={
                "X-Requested-With": "XMLHttpRequest",
                "Origin": credentials.root,
                "Referer": login_url,
            },
        )
        response = send(
            session,
            "POST",
            login_url,
            headers=headers,
            files=_login_fields(credentials, verify_rand),
        )
        response_text = response.text or ""
        save_api_response("user-login.log", response_text, "Saved user login response to log file")

        parse_login_response(response_text)
    except (LoginFailedError, LoginResponseParseError) as exc:
        _scraper_event("login", phase="end", status="failed", error_code=exc.error_code)
        raise
    except Exception as exc:  # noqa: BLE001
        log_line(f"[LOGIN][ERROR] Error during user relogin: {exc!r}")
        _scraper_event("login", phase="end", status="error", error=repr(exc))
        raise SessionRefreshError("Error while refreshing the session", exc) from exc

    log_line("[LOGIN] User logged in again successfully")
    _scraper_event("login", phase="end", status="ok")


__all__ = ["refresh_random", "parse_login_response", "relogin_user"]
