"""Adjustment operators applied to a generated weekly plan.

Each operator takes a plan and returns a new one; the input plan is left
untouched. Operators do not validate their numbers, callers run
:func:`planner.intent_parser.is_valid_intent` first.
"""

from __future__ import annotations

import math
from typing import Iterable

from .models import (
    AdjustmentIntent,
    CapSubjectTimeIntent,
    DayPlan,
    LightenDayIntent,
    MoveSubjectIntent,
    ReduceSubjectIntent,
    WeeklyPlan,
)

LIGHTEN_TIME_FACTOR = 0.5
# Share of the non-essential items switched off when halving is not enough.
LIGHTEN_DISABLE_SHARE = 0.5


def day_total_minutes(day: DayPlan) -> int:
    return sum(item.estimated_minutes for item in day.items if item.accepted)


def plan_total_minutes(plan: WeeklyPlan) -> int:
    return sum(day_total_minutes(day) for day in plan.days)


def lighten_day(plan: WeeklyPlan, intent: LightenDayIntent) -> WeeklyPlan:
    """Halve untagged items on the day, then disable some if still over budget."""
    updated = plan.model_copy(deep=True)
    target = updated.day(intent.day)
    if target is None:
        return updated

    non_essential = [item for item in target.items if not item.is_app_block and not item.skill_tags]
    for item in non_essential:
        item.estimated_minutes = math.ceil(item.estimated_minutes * LIGHTEN_TIME_FACTOR)

    if day_total_minutes(target) > target.time_budget_minutes:
        cutoff = math.ceil(len(non_essential) * LIGHTEN_DISABLE_SHARE)
        for item in non_essential[:cutoff]:
            item.accepted = False
    return updated


def move_subject(plan: WeeklyPlan, intent: MoveSubjectIntent) -> WeeklyPlan:
    """Keep a subject only on the target days. Existing items are toggled, never created."""
    updated = plan.model_copy(deep=True)
    target_days = set(intent.to_days)
    for day in updated.days:
        if day.day in target_days:
            for item in day.items:
                if item.subject_bucket == intent.subject:
                    item.accepted = True
        else:
            for item in day.items:
                if item.subject_bucket == intent.subject and not item.is_app_block:
                    item.accepted = False
    return updated


def reduce_subject(plan: WeeklyPlan, intent: ReduceSubjectIntent) -> WeeklyPlan:
    updated = plan.model_copy(deep=True)
    for day in updated.days:
        for item in day.items:
            if item.subject_bucket == intent.subject and not item.is_app_block:
                item.estimated_minutes = math.ceil(item.estimated_minutes * intent.factor)
    return updated


def cap_subject_time(plan: WeeklyPlan, intent: CapSubjectTimeIntent) -> WeeklyPlan:
    updated = plan.model_copy(deep=True)
    for day in updated.days:
        for item in day.items:
            if item.subject_bucket == intent.subject and not item.is_app_block:
                item.estimated_minutes = min(item.estimated_minutes, intent.max_minutes_per_day)
    return updated


def apply_adjustment(plan: WeeklyPlan, intent: AdjustmentIntent) -> WeeklyPlan:
    if isinstance(intent, LightenDayIntent):
        return lighten_day(plan, intent)
    if isinstance(intent, MoveSubjectIntent):
        return move_subject(plan, intent)
    if isinstance(intent, ReduceSubjectIntent):
        return reduce_subject(plan, intent)
    if isinstance(intent, CapSubjectTimeIntent):
        return cap_subject_time(plan, intent)
    raise TypeError(f"Unsupported adjustment intent type: {type(intent).__name__}")


def apply_adjustments(plan: WeeklyPlan, intents: Iterable[AdjustmentIntent]) -> WeeklyPlan:
    """Apply intents strictly in the order given. Order matters (reduce then cap != cap then reduce)."""
    result = plan
    for intent in intents:
        result = apply_adjustment(result, intent)
    return result


__all__ = [
    "LIGHTEN_DISABLE_SHARE",
    "LIGHTEN_TIME_FACTOR",
    "apply_adjustment",
    "apply_adjustments",
    "cap_subject_time",
    "day_total_minutes",
    "lighten_day",
    "move_subject",
    "plan_total_minutes",
    "reduce_subject",
]
