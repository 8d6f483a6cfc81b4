"""
Call Sheet Planner
Scene time arithmetic.

Pure functions shared by the API summary and both document renderers:

    calculate_end_time       — "HH:MM" + minutes → "HH:MM" (wraps at 24h)
    total_shooting_minutes   — sum of estimated_time across scenes
    format_shooting_duration — 180 → "3h 0m", 45 → "45m"
    shooting_end_time        — latest per-scene end time, or "-"

None of these raise: malformed input yields an empty string so a half
filled-in form still renders.
"""

import logging

logger = logging.getLogger(__name__)


def _to_int(value):
    """Parse one time component; "" counts as 0, non-integral values → None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return 0
    try:
        number = float(text)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    if not number.is_integer():
        return None
    return int(number)


def calculate_end_time(start_time, estimated_minutes) -> str:
    """Return the end time of a scene as zero-padded "HH:MM".

    Empty start time or zero/empty duration yields "" (a zero-length scene
    shows no end time). Times past midnight wrap: "23:30" + 45 → "00:15".
    """
    if not start_time or not estimated_minutes:
        return ""

    duration = _to_int(estimated_minutes)
    if duration is None:
        return ""

    parts = str(start_time).split(":")
    if len(parts) < 2:
        return ""
    hours = _to_int(parts[0])
    minutes = _to_int(parts[1])
    if hours is None or minutes is None:
        return ""

    total = hours * 60 + minutes + duration
    return f"{(total // 60) % 24:02d}:{total % 60:02d}"


def total_shooting_minutes(scenes) -> int:
    """Sum of ``estimated_time`` over scene dicts; missing or bad values count as 0."""
    total = 0
    for scene in scenes or []:
        value = scene.get("estimated_time")
        if not value:
            continue
        minutes = _to_int(value)
        if minutes is None:
            logger.debug("Ignoring non-numeric estimated_time %r", value)
            continue
        total += minutes
    return total


def format_shooting_duration(minutes) -> str:
    hours, rest = divmod(int(minutes or 0), 60)
    if hours > 0:
        return f"{hours}h {rest}m"
    return f"{rest}m"


def scene_end_times(scenes) -> list:
    """Per-scene end times in scene order ("" where not computable)."""
    return [
        calculate_end_time(s.get("start_time"), s.get("estimated_time"))
        for s in scenes or []
    ]


def shooting_end_time(scenes) -> str:
    """Latest scene end time, compared as strings; "-" when no scene has one.

    String comparison means a shoot running past midnight reports the
    pre-midnight end ("23:50" beats "00:30").
    """
    ends = [end for end in scene_end_times(scenes) if end]
    if not ends:
        return "-"
    return max(ends)
