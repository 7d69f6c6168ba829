"""Exception types raised by the Zentao client."""
from __future__ import annotations

from typing import Any, Optional

from .error_codes import ErrorCode


class ZentaoError(Exception):
    error_code: str = ErrorCode.INTERNAL

    def __init__(self, message: str, *, error_code: str | None = None) -> None:
        super().__init__(message)
        if error_code:
            self.error_code = error_code

    def __str__(self) -> str:  # pragma: no cover - inherited behaviour
        return str(self.args[0]) if self.args else ""


class TransportError(ZentaoError):
    """A request failed at the HTTP level (non-2xx status or no response)."""

    def __init__(self, message: str, *, status: int | None = None, url: str | None = None) -> None:
        super().__init__(
            message,
            error_code=classify_http_status(status) if status is not None else ErrorCode.NETWORK,
        )
        self.status = status
        self.url = url


class SessionExpiredError(ZentaoError):
    """The server answered with its login redirect instead of the page."""

    error_code = ErrorCode.SESSION_EXPIRED

    def __init__(self, message: str = "Login session expired, please log in again") -> None:
        super().__init__(message)


class LoginFailedError(ZentaoError):
    """The login endpoint rejected the stored credentials."""

    error_code = ErrorCode.LOGIN_FAILED

    def __init__(self, message: str = "Login failed", login_result: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.login_result = login_result or {}


class LoginResponseParseError(ZentaoError):
    """The login endpoint returned a body that is not JSON."""

    error_code = ErrorCode.LOGIN_RESPONSE_PARSE

    def __init__(self, message: str = "Failed to parse login response", response_text: str = "") -> None:
        super().__init__(message)
        self.response_text = response_text


class SessionRefreshError(ZentaoError):
    """Any other failure while refreshing the session; ``cause`` is preserved."""

    error_code = ErrorCode.SESSION_REFRESH

    def __init__(self, message: str = "Session refresh failed", cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class SubmissionFailedError(ZentaoError):
    """The finish-task endpoint rejected the submission."""

    error_code = ErrorCode.SUBMISSION_FAILED


class DetailParseError(ZentaoError):
    """A detail page carries neither a recognisable title nor a heading."""

    error_code = ErrorCode.SITE_STRUCTURE


def classify_http_status(status: Optional[int]) -> str:
    if status is None:
        return ErrorCode.INTERNAL
    if status == 401:
        return ErrorCode.HTTP_401
    if status == 403:
        return ErrorCode.HTTP_403
    if status == 404:
        return ErrorCode.HTTP_404
    if 400 <= status < 500:
        return ErrorCode.HTTP_4XX
    if status >= 500:
        return ErrorCode.HTTP_5XX
    return ErrorCode.INTERNAL


__all__ = [
    "ZentaoError",
    "TransportError",
    "SessionExpiredError",
    "LoginFailedError",
    "LoginResponseParseError",
    "SessionRefreshError",
    "SubmissionFailedError",
    "DetailParseError",
    "classify_http_status",
]
