from __future__ import annotations

from typing import Literal, Optional
from urllib.parse import urlparse

from . import config
from .config import Credentials
from .logging_utils import _scraper_event
from .utils import log_line

Entrypoint = Literal["cli", "tests"]


def _raise_config_error(message: str, *, entrypoint: Entrypoint, error: str) -> None:
    _scraper_event(
        "error",
        phase="config",
        context="runtime_validation",
        error=error,
        entrypoint=entrypoint,
    )
    log_line(f"[CONFIG] {message} (entrypoint={entrypoint})")
    raise ValueError(message)


def validate_runtime_config(entrypoint: Entrypoint, credentials: Optional[Credentials] = None) -> None:
    """Validate runtime configuration (and credentials, when given).

    Raises ``ValueError`` when a blocking misconfiguration is detected.
    Non-fatal adjustments are logged but do not raise.
    """

    if config.MAX_PARALLEL_IMAGES < 1:
        adjusted = 1
        _scraper_event(
            "state",
            phase="config",
            context="runtime_validation",
            kind="config_adjustment",
            field="MAX_PARALLEL_IMAGES",
            value=config.MAX_PARALLEL_IMAGES,
            adjusted=adjusted,
            entrypoint=entrypoint,
        )
        log_line("[CONFIG] MAX_PARALLEL_IMAGES < 1; clamping to 1.")
        config.MAX_PARALLEL_IMAGES = adjusted

    timeout_fields = [
        ("HTTP_TIMEOUT_SECONDS", config.HTTP_TIMEOUT_SECONDS),
        ("IMAGE_TIMEOUT_SECONDS", config.IMAGE_TIMEOUT_SECONDS),
    ]
    for field_name, value in timeout_fields:
        if value <= 0:
            _raise_config_error(
                f"{field_name} must be greater than zero.",
                entrypoint=entrypoint,
                error="invalid_timeout",
            )

    if credentials is None:
        return

    parsed = urlparse(credentials.base_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        _raise_config_error(
            "ZENTAO_URL must be an absolute http(s) URL.",
            entrypoint=entrypoint,
            error="base_url_invalid",
        )
    if not credentials.session_id:
        _raise_config_error(
            "ZENTAO_SID is required.",
            entrypoint=entrypoint,
            error="session_id_missing",
        )
    if not credentials.username:
        _raise_config_error(
            "ZENTAO_USERNAME is required.",
            entrypoint=entrypoint,
            error="username_missing",
        )


__all__ = ["validate_runtime_config", "Entrypoint"]
