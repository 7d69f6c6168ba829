from __future__ import annotations

from typing import Any

from .utils import log_line

# Field names whose values must never reach the log file.
_SECRET_FIELDS = frozenset({"password", "session_id", "sid", "cookie"})


def _scraper_event(label: str = "", *, phase: str | None = None, **fields: Any) -> None:
    """Emit one ``[SCRAPER][LABEL] k=v, ...`` line for a Zentao client event.

    Used for HTTP requests, session checks, login steps, row-selector choices
    and image inlining. ``phase`` doubles as the label when none is given;
    with both, it is kept in the payload. Credential-like fields are masked.
    Logging failures are swallowed so they never break a fetch.
    """

    try:
        phase_label = label or (phase or "")
        if phase and label:
            fields.setdefault("phase", phase)
        for name in _SECRET_FIELDS.intersection(fields):
            fields[name] = "***"
        payload = ", ".join(f"{k}={repr(v)}" for k, v in sorted(fields.items()))
        log_line(f"[SCRAPER][{phase_label.upper()}] {payload}")
    except Exception:  # noqa: BLE001
        return


__all__ = ["_scraper_event"]
