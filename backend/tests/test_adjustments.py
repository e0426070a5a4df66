from __future__ import annotations

from typing import List

import pytest

from planner.adjustments import (
    apply_adjustment,
    apply_adjustments,
    cap_subject_time,
    day_total_minutes,
    lighten_day,
    move_subject,
    plan_total_minutes,
    reduce_subject,
)
from planner.models import (
    CapSubjectTimeIntent,
    DayPlan,
    LightenDayIntent,
    MoveSubjectIntent,
    PlanItem,
    ReduceSubjectIntent,
    WeeklyPlan,
)


def _item(
    item_id: str,
    subject: str,
    minutes: int,
    *,
    tags: List[str] | None = None,
    app_block: bool = False,
    accepted: bool = True,
) -> PlanItem:
    return PlanItem(
        id=item_id,
        title=item_id,
        subject_bucket=subject,
        estimated_minutes=minutes,
        skill_tags=tags or [],
        is_app_block=app_block,
        accepted=accepted,
    )


def _plan(**days: List[PlanItem]) -> WeeklyPlan:
    return WeeklyPlan(
        days=[DayPlan(day=name, time_budget_minutes=60, items=items) for name, items in days.items()],
    )


def _minutes(plan: WeeklyPlan) -> dict:
    return {item.id: item.estimated_minutes for day in plan.days for item in day.items}


def _accepted(plan: WeeklyPlan) -> dict:
    return {item.id: item.accepted for day in plan.days for item in day.items}


def test_totals_count_accepted_items_only() -> None:
    plan = _plan(
        Monday=[_item("m1", "Math", 30), _item("m2", "Math", 20, accepted=False)],
        Tuesday=[_item("t1", "Reading", 15)],
    )

    assert day_total_minutes(plan.days[0]) == 30
    assert plan_total_minutes(plan) == 45


def test_reduce_halves_matching_items_rounding_up() -> None:
    plan = _plan(
        Monday=[_item("m1", "Reading", 30), _item("m2", "Reading", 15), _item("m3", "Math", 30)],
    )

    reduced = reduce_subject(plan, ReduceSubjectIntent(subject="Reading", factor=0.5))

    assert _minutes(reduced) == {"m1": 15, "m2": 8, "m3": 30}


def test_reduce_leaves_app_blocks_alone() -> None:
    plan = _plan(Monday=[_item("app", "Reading", 45, app_block=True)])

    reduced = reduce_subject(plan, ReduceSubjectIntent(subject="Reading", factor=0.5))

    assert _minutes(reduced) == {"app": 45}


def test_cap_limits_every_matching_item() -> None:
    plan = _plan(
        Monday=[_item("m1", "Math", 30), _item("m2", "Math", 10)],
        Tuesday=[_item("t1", "Math", 25), _item("t2", "Reading", 40), _item("app", "Math", 45, app_block=True)],
    )

    capped = cap_subject_time(plan, CapSubjectTimeIntent(subject="Math", max_minutes_per_day=20))

    assert _minutes(capped) == {"m1": 20, "m2": 10, "t1": 20, "t2": 40, "app": 45}
    for day in capped.days:
        for item in day.items:
            if item.subject_bucket == "Math" and not item.is_app_block:
                assert item.estimated_minutes <= 20


def test_lighten_halves_untagged_work_and_keeps_it_when_under_budget() -> None:
    plan = _plan(
        Wednesday=[
            _item("app", "Other", 20, app_block=True),
            _item("rep", "Reading", 10, tags=["reading.cvcBlend"]),
            _item("w1", "Math", 30),
            _item("w2", "Science", 20),
        ],
    )

    lightened = lighten_day(plan, LightenDayIntent(day="Wednesday"))

    assert _minutes(lightened) == {"app": 20, "rep": 10, "w1": 15, "w2": 10}
    assert all(_accepted(lightened).values())


def test_lighten_disables_first_half_of_untagged_work_when_still_over_budget() -> None:
    plan = WeeklyPlan(
        days=[
            DayPlan(
                day="Wednesday",
                time_budget_minutes=30,
                items=[
                    _item("app", "Other", 20, app_block=True),
                    _item("w1", "Math", 30),
                    _item("w2", "Science", 20),
                    _item("w3", "Reading", 10),
                ],
            )
        ]
    )

    lightened = lighten_day(plan, LightenDayIntent(day="Wednesday"))

    assert _accepted(lightened) == {"app": True, "w1": False, "w2": False, "w3": True}


def test_lighten_missing_day_returns_equal_plan() -> None:
    plan = _plan(Monday=[_item("m1", "Math", 30)])

    assert lighten_day(plan, LightenDayIntent(day="Friday")) == plan


def test_move_keeps_subject_only_on_target_days() -> None:
    plan = _plan(
        Monday=[_item("m1", "Math", 20), _item("m-app", "Math", 15, app_block=True), _item("m2", "Reading", 20)],
        Tuesday=[_item("t1", "Math", 20, accepted=False)],
        Thursday=[_item("h1", "Math", 20)],
    )

    moved = move_subject(plan, MoveSubjectIntent(subject="Math", to_days=["Tuesday", "Thursday"]))

    assert _accepted(moved) == {"m1": False, "m-app": True, "m2": True, "t1": True, "h1": True}
    assert _minutes(moved) == _minutes(plan)


def test_operators_do_not_mutate_their_input() -> None:
    plan = _plan(Monday=[_item("m1", "Math", 30), _item("m2", "Reading", 30)])
    before = plan.model_copy(deep=True)

    apply_adjustments(
        plan,
        [
            ReduceSubjectIntent(subject="Math", factor=0.5),
            CapSubjectTimeIntent(subject="Reading", max_minutes_per_day=5),
            MoveSubjectIntent(subject="Math", to_days=["Friday"]),
            LightenDayIntent(day="Monday"),
        ],
    )

    assert plan == before


def test_intent_order_changes_the_result() -> None:
    plan = _plan(Monday=[_item("m1", "Math", 40)])
    reduce = ReduceSubjectIntent(subject="Math", factor=0.5)
    cap = CapSubjectTimeIntent(subject="Math", max_minutes_per_day=15)

    assert _minutes(apply_adjustments(plan, [reduce, cap])) == {"m1": 15}
    assert _minutes(apply_adjustments(plan, [cap, reduce])) == {"m1": 8}


def test_no_intents_returns_the_same_plan() -> None:
    plan = _plan(Monday=[_item("m1", "Math", 40)])

    assert apply_adjustments(plan, []) is plan


def test_unknown_intent_type_is_a_programming_error() -> None:
    plan = _plan(Monday=[])

    with pytest.raises(TypeError):
        apply_adjustment(plan, object())  # type: ignore[arg-type]
