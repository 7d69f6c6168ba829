from datetime import datetime

import pytest

from zentaokit.scraper.date_utils import (
    calculate_finish_time,
    default_real_started,
    parse_hours,
    sortable_date,
    total_consumed,
)

NOW = datetime(2024, 5, 7, 15, 30)


@pytest.mark.parametrize(
    ("hours", "expected"),
    [
        (3, "2024-05-01 12:00"),
        (8, "2024-05-01 18:00"),
        (12, "2024-05-02 13:00"),
        (16, "2024-05-02 18:00"),
        (2.5, "2024-05-01 11:30"),
    ],
)
def test_calculate_finish_time_working_days(hours, expected):
    assert calculate_finish_time("2024-05-01 09:00", hours) == expected


def test_calculate_finish_time_defaults_to_now():
    assert calculate_finish_time("", 4, now=NOW) == "2024-05-07 15:30"
    assert calculate_finish_time("2024-05-01 09:00", 0, now=NOW) == "2024-05-07 15:30"
    assert calculate_finish_time("not a date", 4, now=NOW) == "2024-05-07 15:30"


def test_default_real_started():
    assert default_real_started("2024-05-06") == "2024-05-06 09:00"
    assert default_real_started("", now=NOW) == "2024-05-07 09:00"
    assert default_real_started("0000-00-00", now=NOW) == "2024-05-07 09:00"


def test_hours_helpers():
    assert parse_hours("8工时") == 8.0
    assert parse_hours("") == 0.0
    assert total_consumed("3h", "2.5") == "5.5"
    assert total_consumed("", "2") == "2"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2024-05-10", "2024-05-10"),
        ("2024/05/10", "2024-05-10"),
        ("0000-00-00", ""),
        ("", ""),
        ("截止 20240510", "2024-05-10"),
    ],
)
def test_sortable_date(value, expected):
    assert sortable_date(value) == expected
