"""Light and appointment day handling.

Flagged days keep their app blocks and get a short fixed template; the work
they displace is spread over the remaining normal days.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Set

from .ids import ItemIdFactory, random_item_ids
from .models import (
    WEEK_DAYS,
    AppBlock,
    DayPlan,
    DayTypeConfig,
    LightDayItem,
    LightDayTemplate,
    PlanItem,
    WeekDay,
    WeeklyPlan,
)
from .telemetry import PLAN_REFLOWED, emit_event

logger = logging.getLogger(__name__)

FLAGGED_DAY_TYPES = frozenset({"light", "appointment"})

LIGHT_DAY_FILLERS = (
    LightDayItem(
        title="Quick writing (copy 1 sentence)",
        subject_bucket="LanguageArts",
        estimated_minutes=10,
        skill_tags=["writing.copyWords"],
    ),
    LightDayItem(
        title="Math facts sprint (5 min)",
        subject_bucket="Math",
        estimated_minutes=5,
        skill_tags=["math.addition.facts"],
    ),
    LightDayItem(
        title="Read aloud / game (win card)",
        subject_bucket="Reading",
        estimated_minutes=10,
        skill_tags=["reading.fluency.short"],
    ),
)


def build_light_day_template(app_blocks: Iterable[AppBlock]) -> LightDayTemplate:
    items = [
        LightDayItem(
            title=block.label,
            subject_bucket="Other",
            estimated_minutes=block.default_minutes,
            is_app_block=True,
        )
        for block in app_blocks
    ]
    items.extend(filler.model_copy(deep=True) for filler in LIGHT_DAY_FILLERS)
    return LightDayTemplate(items=items, total_minutes=sum(item.estimated_minutes for item in items))


def apply_light_day_to_plan(
    day: DayPlan,
    template: LightDayTemplate,
    *,
    id_factory: Optional[ItemIdFactory] = None,
) -> DayPlan:
    """Existing app blocks followed by the template's non-app items under fresh ids."""
    next_id = id_factory or random_item_ids()
    app_items = [item.model_copy(deep=True) for item in day.items if item.is_app_block]
    template_items = [
        PlanItem(
            id=next_id(),
            title=entry.title,
            subject_bucket=entry.subject_bucket,
            estimated_minutes=entry.estimated_minutes,
            skill_tags=list(entry.skill_tags),
            accepted=True,
        )
        for entry in template.items
        if not entry.is_app_block
    ]
    return DayPlan(day=day.day, time_budget_minutes=day.time_budget_minutes, items=app_items + template_items)


def _flagged_days(day_types: Iterable[DayTypeConfig]) -> Set[str]:
    return {config.day for config in day_types if config.day_type in FLAGGED_DAY_TYPES}


def _remaining_budget(day: DayPlan) -> int:
    used = sum(item.estimated_minutes for item in day.items if item.accepted)
    return max(0, day.time_budget_minutes - used)


def reflow_plan_around_light_days(
    plan: WeeklyPlan,
    day_types: Sequence[DayTypeConfig],
    app_blocks: Sequence[AppBlock],
    *,
    id_factory: Optional[ItemIdFactory] = None,
) -> WeeklyPlan:
    """Swap flagged days for the light template and reflow their work.

    Each displaced item goes to the normal day with the most remaining budget,
    recomputed after every placement; ties keep the earliest day. With no
    normal days left the displaced items are dropped.
    """
    flagged = _flagged_days(day_types)
    if not flagged:
        return plan.model_copy(deep=True)

    next_id = id_factory or random_item_ids()
    template = build_light_day_template(app_blocks)

    displaced: List[PlanItem] = []
    days: List[DayPlan] = []
    for day in plan.days:
        if day.day in flagged:
            displaced.extend(item for item in day.items if item.accepted and not item.is_app_block)
            days.append(apply_light_day_to_plan(day, template, id_factory=next_id))
        else:
            days.append(day.model_copy(deep=True))

    normal_days = [day for day in days if day.day not in flagged]
    placed = 0
    for item in displaced:
        if not normal_days:
            break
        best = normal_days[0]
        best_remaining = _remaining_budget(best)
        for candidate in normal_days:
            remaining = _remaining_budget(candidate)
            if remaining > best_remaining:
                best, best_remaining = candidate, remaining
        best.items.append(item.model_copy(deep=True))
        placed += 1

    if placed < len(displaced):
        logger.warning("No normal days left; dropped %s displaced items", len(displaced) - placed)

    emit_event(
        PLAN_REFLOWED,
        flagged_days=sorted(flagged, key=WEEK_DAYS.index),
        displaced_count=len(displaced),
        dropped_count=len(displaced) - placed,
    )
    return plan.model_copy(update={"days": days}, deep=True)


def default_day_types(light_day: WeekDay = "Wednesday") -> List[DayTypeConfig]:
    return [
        DayTypeConfig(day=day, day_type="light" if day == light_day else "normal")
        for day in WEEK_DAYS
    ]


def is_light_day(day: str, day_types: Iterable[DayTypeConfig]) -> bool:
    for config in day_types:
        if config.day == day:
            return config.day_type in FLAGGED_DAY_TYPES
    return False


__all__ = [
    "FLAGGED_DAY_TYPES",
    "LIGHT_DAY_FILLERS",
    "apply_light_day_to_plan",
    "build_light_day_template",
    "default_day_types",
    "is_light_day",
    "reflow_plan_around_light_days",
]
