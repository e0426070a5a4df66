"""Pace gauge: is a workbook on track to finish by its target date?"""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional

from .models import PaceGaugeResult, PaceStatus, WorkbookConfig

AHEAD_THRESHOLD = 0.2
ON_TRACK_THRESHOLD = -0.1
BEHIND_THRESHOLD = -0.3

# Mon/Tue new instruction, Wednesday light (appointments land here),
# Thursday reinforce, Friday catch-up.
DEFAULT_WEEK_STRUCTURE: Dict[str, Dict[str, str]] = {
    "Monday": {"focus": "new-instruction", "intensity": "high"},
    "Tuesday": {"focus": "new-instruction", "intensity": "high"},
    "Wednesday": {"focus": "light-day", "intensity": "low"},
    "Thursday": {"focus": "reinforce", "intensity": "medium"},
    "Friday": {"focus": "catch-up", "intensity": "low"},
}


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def weeks_remaining(today: date, target: date) -> float:
    """Fractional weeks from ``today`` until ``target``; zero for past targets."""
    days = max(0, (target - today).days)
    return days / 7


def _status(weeks: float, units_remaining: int, required: float, delta: float) -> PaceStatus:
    if weeks <= 0:
        return "on_track" if units_remaining <= 0 else "critical"
    if delta >= required * AHEAD_THRESHOLD:
        return "ahead"
    if delta >= required * ON_TRACK_THRESHOLD:
        return "on_track"
    if delta >= required * BEHIND_THRESHOLD:
        return "behind"
    return "critical"


def build_pace_suggestion(status: PaceStatus, required_per_week: float, planned_per_week: float, unit_label: str) -> str:
    unit = unit_label if required_per_week == 1 else f"{unit_label}s"
    if status == "ahead":
        return "On track with buffer. Current pace allows light days or deeper practice."
    if status == "on_track":
        return f"On target at {_round_half_up(planned_per_week):.0f} {unit}/week. Keep steady."
    if status == "behind":
        gap = abs(planned_per_week - required_per_week)
        return f"Behind by ~{_round_half_up(gap):.0f} {unit}/week. Sprint Mon/Tue or skip review sets."
    return (
        f"Significantly behind. Need {_round_half_up(required_per_week):.0f} {unit}/week. "
        "Consider skipping mastered content or extending target date."
    )


def calculate_pace(
    config: WorkbookConfig,
    today: date,
    planned_per_week: Optional[float] = None,
) -> PaceGaugeResult:
    units_remaining = max(0, config.total_units - config.current_position)
    weeks = weeks_remaining(today, config.target_finish_date)

    required = units_remaining / weeks if weeks > 0 else float(units_remaining)
    planned = required if planned_per_week is None else float(planned_per_week)
    delta = planned - required
    status = _status(weeks, units_remaining, required, delta)

    if planned > 0:
        weeks_to_finish = units_remaining / planned
        projected = (today + timedelta(days=math.ceil(weeks_to_finish * 7))).isoformat()
        days_needed = weeks_to_finish * 7 if required > 0 else 0.0
        buffer_days = max(0, math.floor(weeks * 7 - days_needed))
    else:
        projected = "N/A"
        buffer_days = 0 if required > 0 else max(0, math.floor(weeks * 7))

    return PaceGaugeResult(
        workbook_name=config.name,
        required_per_week=_round_half_up(required, 1),
        planned_per_week=_round_half_up(planned, 1),
        delta=_round_half_up(delta, 1),
        status=status,
        suggestion=build_pace_suggestion(status, required, planned, config.unit_label),
        projected_finish_date=projected,
        buffer_days=buffer_days,
    )


def calculate_all_paces(
    configs: Iterable[WorkbookConfig],
    today: date,
    planned_per_week: Optional[Mapping[str, float]] = None,
) -> List[PaceGaugeResult]:
    planned_map = planned_per_week or {}
    return [calculate_pace(config, today, planned_map.get(config.name)) for config in configs]


__all__ = [
    "DEFAULT_WEEK_STRUCTURE",
    "build_pace_suggestion",
    "calculate_all_paces",
    "calculate_pace",
    "weeks_remaining",
]
