from __future__ import annotations

"""Centralised error code taxonomy for client failures.

Every exception raised by the client carries one of these codes so callers
(and structured logs) can branch on the failure kind without matching
messages. The values should stay stable.
"""


class ErrorCode:
    NETWORK = "network_error"
    HTTP_4XX = "http_4xx"
    HTTP_401 = "http_401_unauthorised"
    HTTP_403 = "http_403_forbidden"
    HTTP_404 = "http_404_not_found"
    HTTP_5XX = "http_5xx"
    SESSION_EXPIRED = "session_expired"
    LOGIN_FAILED = "login_failed"
    LOGIN_RESPONSE_PARSE = "login_response_parse"
    SESSION_REFRESH = "session_refresh"
    SUBMISSION_FAILED = "submission_failed"
    SITE_STRUCTURE = "site_structure_changed"
    INTERNAL = "internal_error"


__all__ = ["ErrorCode"]
