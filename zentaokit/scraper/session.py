"""Detection of silently expired Zentao sessions."""
from __future__ import annotations

import re

# An expired session is answered with HTTP 200 and a page that only runs
# ``self.location = '/user-login-<token>.html'``.
_LOGIN_REDIRECT = re.compile(r"self\.location\s*=\s*['\"]([^'\"]*user-login[^'\"]*)['\"]")


def is_session_expired(html: str) -> bool:
    """Return ``True`` when ``html`` is the login redirect stub."""

    return bool(_LOGIN_REDIRECT.search(html or ""))


def login_redirect_target(html: str) -> str | None:
    """Return the login URL the redirect stub points to, if any."""

    match = _LOGIN_REDIRECT.search(html or "")
    return match.group(1) if match else None


__all__ = ["is_session_expired", "login_redirect_target"]
