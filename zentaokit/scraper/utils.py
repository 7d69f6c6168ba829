from __future__ import annotations

import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from urllib.parse import urljoin

from . import config

LOGGER = logging.getLogger("zentaokit")
_LOGGER_INITIALISED = False
_CURRENT_LOG_FILE: Path = config.LOG_FILE

_WHITESPACE = re.compile(r"\s+")


def _configure_logger(log_path: Path) -> None:
    """Configure the shared application logger to write to ``log_path``."""

    global _LOGGER_INITIALISED, _CURRENT_LOG_FILE

    ensure_dirs()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(LOGGER.handlers):
        LOGGER.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # noqa: BLE001
            continue

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)

    LOGGER.setLevel(logging.INFO)
    LOGGER.addHandler(stream_handler)
    LOGGER.addHandler(file_handler)
    LOGGER.propagate = False

    _CURRENT_LOG_FILE = log_path
    _LOGGER_INITIALISED = True


def _ensure_logger() -> None:
    """Initialise the logger lazily using the default log file."""

    if _LOGGER_INITIALISED:
        return

    _configure_logger(config.LOG_FILE)


def setup_run_logger() -> Path:
    """Rotate to a fresh timestamped log file for the current command."""

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = config.LOG_DIR / f"zentaokit_{timestamp}.log"
    _configure_logger(log_path)
    LOGGER.info("Logging to %s", log_path)
    return log_path


def get_current_log_path() -> Path:
    """Return the path to the log file currently receiving log lines."""

    _ensure_logger()
    return _CURRENT_LOG_FILE


def ensure_dirs() -> None:
    """Ensure that the application's expected directory structure exists."""

    config.DATA_DIR.mkdir(parents=True, exist_ok=True)
    config.LOG_DIR.mkdir(parents=True, exist_ok=True)


def log_line(message: str) -> None:
    """Write a timestamped log line to stderr and the active log file."""

    _ensure_logger()
    LOGGER.info(message)


def save_api_response(file_name: str, content: str, log_message: str | None = None) -> Path | None:
    """Persist a raw response body under ``LOG_DIR`` for later inspection.

    Returns the written path, or ``None`` when saving is disabled or the
    write failed. Never raises.
    """

    if not config.SAVE_RAW_RESPONSES:
        return None

    path = config.LOG_DIR / file_name
    try:
        ensure_dirs()
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        log_line(f"[LOG][WARN] Failed to save {file_name}: {exc}")
        return None

    if log_message:
        log_line(f"{log_message}: {path}")
    return path


def clean_text(value: str | None) -> str:
    """Collapse runs of whitespace (including non-breaking spaces) and strip."""

    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.replace("\xa0", " ")).strip()


def resolve_url(base_url: str, src: str) -> str:
    """Resolve a rooted or relative image ``src`` against ``base_url``."""

    src = (src or "").strip()
    if not src or src.startswith(("http://", "https://", "data:")):
        return src
    if src.startswith("//"):
        scheme = base_url.split(":", 1)[0] if "://" in base_url else "http"
        return f"{scheme}:{src}"
    if src.startswith("/"):
        return base_url.rstrip("/") + src
    return urljoin(base_url.rstrip("/") + "/", src)


__all__ = [
    "LOGGER",
    "log_line",
    "setup_run_logger",
    "get_current_log_path",
    "ensure_dirs",
    "save_api_response",
    "clean_text",
    "resolve_url",
]
