"""Authenticated HTTP requests against the Zentao server."""
from __future__ import annotations

import urllib.parse
from typing import Any, Optional

import requests

from . import config
from .config import Credentials
from .errors import TransportError
from .logging_utils import _scraper_event


def _redact_url(url: str) -> str:
    try:
        parsed = urllib.parse.urlparse(url)
        return urllib.parse.urlunparse(parsed._replace(query=""))
    except Exception:
        return url


def build_headers(
    credentials: Credentials,
    *,
    accept: str = config.HTML_ACCEPT,
    include_username: bool = True,
    extra: Optional[dict[str, str]] = None,
) -> dict[str, str]:
    """Return request headers carrying the session cookie string."""

    headers = dict(config.COMMON_HEADERS)
    headers["Accept"] = accept
    headers["Cookie"] = config.build_cookie_header(credentials, include_username=include_username)
    if extra:
        headers.update(extra)
    return headers


def send(
    session: Any,
    method: str,
    url: str,
    *,
    headers: dict[str, str],
    timeout: Optional[int] = None,
    **kwargs: Any,
) -> Any:
    """Issue one request and return the response when its status is 2xx.

    Raises ``TransportError`` for non-2xx statuses and connection failures.
    """

    safe_url = _redact_url(url)
    try:
        response = session.request(
            method,
            url,
            headers=headers,
            timeout=timeout or config.HTTP_TIMEOUT_SECONDS,
            **kwargs,
        )
    except requests.RequestException as exc:
        _scraper_event("http", phase="request", method=method, url=safe_url, status="error", error=str(exc))
        raise TransportError(f"Request to {safe_url} failed: {exc}", url=url) from exc

    status = int(response.status_code)
    _scraper_event("http", phase="request", method=method, url=safe_url, status=status)
    if not 200 <= status < 300:
        raise TransportError(f"HTTP error! status: {status}", status=status, url=url)
    return response


__all__ = ["build_headers", "send"]
