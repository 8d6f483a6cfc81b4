"""
Tests for services.time_arithmetic — scene end times and shooting totals.

Covers:
    - calculate_end_time: normal, midnight wrap, blank/zero/malformed input
    - total_shooting_minutes + format_shooting_duration
    - shooting_end_time: lexicographic max, "-" fallback
"""

import pytest

from callsheet.services.time_arithmetic import (
    calculate_end_time,
    format_shooting_duration,
    scene_end_times,
    shooting_end_time,
    total_shooting_minutes,
)


# ── calculate_end_time ───────────────────────────────────────────────────


@pytest.mark.parametrize(
    "start, minutes, expected",
    [
        ("09:00", 90, "10:30"),
        ("08:05", 10, "08:15"),
        ("23:30", 45, "00:15"),
        ("22:00", 180, "01:00"),
        ("7:5", 5, "07:10"),
        ("09:00", "30", "09:30"),
        ("10:00:00", 15, "10:15"),
    ],
)
def test_calculate_end_time(start, minutes, expected):
    assert calculate_end_time(start, minutes) == expected


@pytest.mark.parametrize(
    "start, minutes",
    [
        (None, 90),
        ("", 90),
        ("09:00", None),
        ("09:00", 0),
        ("09:00", ""),
        ("bad", 30),
        ("aa:bb", 30),
        ("09:00", "abc"),
        ("09:00", 1.5),
    ],
)
def test_calculate_end_time_fails_soft(start, minutes):
    assert calculate_end_time(start, minutes) == ""


# ── Aggregates ───────────────────────────────────────────────────────────


def test_total_and_duration_display():
    scenes = [
        {"start_time": "08:00", "estimated_time": 60},
        {"start_time": "10:00", "estimated_time": 120},
    ]
    assert total_shooting_minutes(scenes) == 180
    assert format_shooting_duration(180) == "3h 0m"


def test_total_ignores_missing_and_bad_values():
    scenes = [
        {"estimated_time": 30},
        {"estimated_time": None},
        {},
        {"estimated_time": "x"},
        {"estimated_time": "15"},
    ]
    assert total_shooting_minutes(scenes) == 45


@pytest.mark.parametrize("minutes, expected", [(0, "0m"), (45, "45m"), (60, "1h 0m"), (135, "2h 15m")])
def test_format_shooting_duration(minutes, expected):
    assert format_shooting_duration(minutes) == expected


def test_shooting_end_time_is_latest_string():
    scenes = [
        {"start_time": "08:00", "estimated_time": 60},
        {"start_time": "10:00", "estimated_time": 120},
    ]
    assert scene_end_times(scenes) == ["09:00", "12:00"]
    assert shooting_end_time(scenes) == "12:00"


def test_shooting_end_time_string_compare_across_midnight():
    scenes = [
        {"start_time": "23:00", "estimated_time": 30},
        {"start_time": "23:50", "estimated_time": 40},
    ]
    # "00:30" is later in real time but sorts before "23:30"
    assert shooting_end_time(scenes) == "23:30"


def test_shooting_end_time_dash_when_nothing_computable():
    assert shooting_end_time([]) == "-"
    assert shooting_end_time([{"start_time": "09:00", "estimated_time": 0}]) == "-"
    assert shooting_end_time([{"start_time": None, "estimated_time": 30}]) == "-"
