"""Configuration constants for the Zentao scraping client."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR: Path = Path(
    os.getenv("ZENTAOKIT_DATA_DIR", str(Path.home() / ".zentaokit"))
).expanduser()
LOG_DIR: Path = DATA_DIR / "logs"
LOG_FILE: Path = LOG_DIR / "latest.log"

# Name of the session cookie issued by the Zentao server.
SESSION_COOKIE_NAME: str = os.getenv("ZENTAO_SESSION_COOKIE", "zentaosid").strip() or "zentaosid"

# Remote page templates, relative to the configured base URL.
TASK_LIST_PATH: str = "/my-work-task-assignedTo-0-id_desc-19-100-1.html"
BUG_LIST_PATH: str = "/my-work-bug-assignedTo-0-id_desc-41-100-1.html"
TASK_VIEW_PATH: str = "/task-view-{id}.html"
BUG_VIEW_PATH: str = "/bug-view-{id}.html"
TASK_FINISH_PATH: str = "/task-finish-{id}.html?onlybody=yes"
REFRESH_RANDOM_PATH: str = "/user-refreshRandom.html"
LOGIN_PATH: str = "/user-login.html"

SAVE_RAW_RESPONSES: bool = os.getenv(
    "ZENTAOKIT_SAVE_RAW_RESPONSES", "1"
).strip().lower() not in {"0", "false"}


def _parse_bounded_int(env_var: str, default: int, *, minimum: int = 1) -> int:
    """Parse an integer knob from the environment; malformed values fall back to ``default``."""

    try:
        value = int(os.getenv(env_var, str(default)))
    except ValueError:
        return default
    return max(minimum, value)


HTTP_TIMEOUT_SECONDS: int = _parse_bounded_int("ZENTAOKIT_HTTP_TIMEOUT_SECONDS", 30)
IMAGE_TIMEOUT_SECONDS: int = _parse_bounded_int("ZENTAOKIT_IMAGE_TIMEOUT_SECONDS", 20)

# Max number of embedded images fetched in parallel for one detail page.
MAX_PARALLEL_IMAGES: int = _parse_bounded_int("ZENTAOKIT_MAX_PARALLEL_IMAGES", 8)

USER_AGENT: str = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/138.0.0.0 Safari/537.36"
)

COMMON_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept-Language": "en-US,en;q=0.9,zh-CN;q=0.8,zh;q=0.7",
    "Connection": "keep-alive",
}

HTML_ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
JSON_ACCEPT: str = "application/json, text/javascript, */*; q=0.01"
IMAGE_ACCEPT: str = "image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8"


@dataclass(frozen=True)
class Credentials:
    """Connection settings for one Zentao account.

    ``session_id`` is the copied session cookie value. It is refreshed
    out-of-band (by the user or the host's credential store) and is only ever
    read by this package.
    """

    base_url: str
    session_id: str
    username: str
    password: str = ""

    @property
    def root(self) -> str:
        return self.base_url.rstrip("/")


def load_credentials() -> Credentials:
    """Return credentials read from the environment."""

    return Credentials(
        base_url=os.getenv("ZENTAO_URL", "").strip(),
        session_id=os.getenv("ZENTAO_SID", "").strip(),
        username=os.getenv("ZENTAO_USERNAME", "").strip(),
        password=os.getenv("ZENTAO_PASSWORD", ""),
    )


def build_cookie_header(credentials: Credentials, *, include_username: bool = True) -> str:
    """Return the fixed cookie-jar string sent with every request."""

    cookie = (
        f"{SESSION_COOKIE_NAME}={credentials.session_id}; lang=zh-cn; "
        "device=desktop; theme=default; keepLogin=on"
    )
    if include_username:
        cookie += f"; za={credentials.username}"
    return cookie


def page_url(credentials: Credentials, path_template: str, **params: str) -> str:
    """Return an absolute URL for ``path_template`` on the configured server."""

    return credentials.root + path_template.format(**params)


__all__ = [
    "Credentials",
    "load_credentials",
    "build_cookie_header",
    "page_url",
]
