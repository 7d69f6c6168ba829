from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Iterable, Optional

_DATE_FORMATS: Iterable[str] = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
)

DATETIME_FORMAT = "%Y-%m-%d %H:%M"

# Working day used to derive default finish times: 8 hours, 09:00-18:00.
WORK_START_HOUR = 9
WORK_END_HOUR = 18
HOURS_PER_DAY = 8


def sortable_date(value: str) -> str:
    """Return a YYYY-MM-DD string suitable for sorting deadlines.

    Zentao renders missing deadlines as empty cells or ``0000-00-00``; both
    yield an empty string.
    """

    candidate = (value or "").strip()
    if not candidate or candidate.startswith("0000"):
        return ""

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue

    digits = re.sub(r"[^0-9]", "", candidate)
    if len(digits) >= 8:
        return f"{digits[:4]}-{digits[4:6]}-{digits[6:8]}"
    return ""


def _parse_datetime(value: str) -> Optional[datetime]:
    for fmt in (DATETIME_FORMAT, "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"):
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    return None


def calculate_finish_time(
    start: str, consumed_hours: float, *, now: Optional[datetime] = None
) -> str:
    """Return the finish time for work starting at ``start``.

    Whole working days end at 18:00 on the last day (16h from day one ends at
    18:00 the next day); a remainder ends at 09:00 plus the remainder on the
    last day (12h ends at 13:00 the next day). An empty or unreadable start,
    or non-positive hours, yield ``now``.
    """

    current = now or datetime.now()
    started = _parse_datetime(start) if start else None
    if started is None or consumed_hours <= 0:
        return current.strftime(DATETIME_FORMAT)

    days_needed = -(-consumed_hours // HOURS_PER_DAY)
    remaining = consumed_hours % HOURS_PER_DAY
    last_day = started + timedelta(days=int(days_needed) - 1)

    if remaining == 0:
        finished = last_day.replace(hour=WORK_END_HOUR, minute=0)
    else:
        finished = last_day.replace(hour=WORK_START_HOUR, minute=0) + timedelta(hours=remaining)
    return finished.strftime(DATETIME_FORMAT)


def default_real_started(estimated_start: str, *, now: Optional[datetime] = None) -> str:
    """Return the default actual-start value offered by the finish form."""

    day = sortable_date(estimated_start) or (now or datetime.now()).strftime("%Y-%m-%d")
    return f"{day} {WORK_START_HOUR:02d}:00"


def parse_hours(value: str) -> float:
    """Return the number in a free-text hour quantity such as ``"8h"``."""

    match = re.search(r"\d+(?:\.\d+)?", value or "")
    return float(match.group(0)) if match else 0.0


def total_consumed(previous: str, current: str) -> str:
    """Sum two free-text hour quantities, formatted without a trailing ``.0``."""

    total = parse_hours(previous) + parse_hours(current)
    return f"{total:g}"


__all__ = [
    "sortable_date",
    "calculate_finish_time",
    "default_real_started",
    "parse_hours",
    "total_consumed",
]
