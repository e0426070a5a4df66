"""Weekly plan generation: budgets, skill reps, snapshot suggestions and greedy placement."""

from __future__ import annotations

from typing import List

from planner.ids import sequential_item_ids
from planner.models import (
    WEEK_DAYS,
    AppBlock,
    AssignmentCandidate,
    CapSubjectTimeIntent,
    EvidenceDefinition,
    PlanGeneratorInputs,
    PrioritySkill,
    SkillSnapshot,
    StopRule,
    WeeklyPlan,
)
from planner.reflow import default_day_types
from planner.scheduler import (
    DEFAULT_MINIMUM_WIN,
    WeeklyPlanGenerator,
    apply_snapshot_suggestions,
    build_minimum_win_text,
    generate_draft_plan,
)


def _assignment(
    assignment_id: str,
    minutes: int,
    *,
    subject: str = "Math",
    cues: List[str] | None = None,
    action: str = "keep",
) -> AssignmentCandidate:
    return AssignmentCandidate(
        id=assignment_id,
        subject_bucket=subject,
        workbook_name="Singapore 1A",
        lesson_name=f"Lesson {assignment_id}",
        estimated_minutes=minutes,
        difficulty_cues=cues or [],
        action=action,
    )


def _snapshot(*skills: PrioritySkill, stop_rules: List[StopRule] | None = None) -> SkillSnapshot:
    return SkillSnapshot(
        child_id="lincoln",
        priority_skills=list(skills),
        stop_rules=stop_rules or [],
        evidence_definitions=[EvidenceDefinition(label="Accuracy", description="3 of 4 correct")],
    )


def _assignment_day(plan: WeeklyPlan, assignment_id: str) -> str:
    for day in plan.days:
        for item in day.items:
            if item.assignment_id == assignment_id:
                return day.day
    raise AssertionError(f"assignment {assignment_id} not placed")


def test_plan_with_only_app_blocks_repeats_them_every_day() -> None:
    inputs = PlanGeneratorInputs(
        hours_per_day=2.5,
        app_blocks=[AppBlock(label="Reading Eggs", default_minutes=45), AppBlock(label="Math app", default_minutes=20)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assert [day.day for day in plan.days] == list(WEEK_DAYS)
    assert sum(len(day.items) for day in plan.days) == 5 * 2
    for day in plan.days:
        assert day.time_budget_minutes == 150
        assert [item.title for item in day.items] == ["Reading Eggs", "Math app"]
        assert all(item.is_app_block and item.subject_bucket == "Other" for item in day.items)
    assert plan.minimum_win_text == DEFAULT_MINIMUM_WIN


def test_injected_id_factory_gives_deterministic_ids() -> None:
    inputs = PlanGeneratorInputs(app_blocks=[AppBlock(label="Reading Eggs", default_minutes=45)])

    first = generate_draft_plan(inputs, id_factory=sequential_item_ids("t"))
    second = generate_draft_plan(inputs, id_factory=sequential_item_ids("t"))

    assert first == second
    assert [day.items[0].id for day in first.days] == ["t_1", "t_2", "t_3", "t_4", "t_5"]


def test_default_ids_are_unique_across_the_plan() -> None:
    inputs = PlanGeneratorInputs(
        app_blocks=[AppBlock(label="Reading Eggs", default_minutes=45)],
        assignments=[_assignment("a1", 10), _assignment("a2", 10)],
    )

    plan = WeeklyPlanGenerator().generate(inputs)
    ids = [item.id for day in plan.days for item in day.items]

    assert len(ids) == len(set(ids))
    assert all(item_id.startswith("ci_") for item_id in ids)


def test_assignments_fill_the_emptiest_day_with_ties_going_to_the_earliest() -> None:
    inputs = PlanGeneratorInputs(
        hours_per_day=1.0,
        assignments=[_assignment(f"a{index}", 30) for index in range(1, 7)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    placements = [_assignment_day(plan, f"a{index}") for index in range(1, 7)]
    assert placements == ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Monday"]


def test_budget_is_soft_and_placement_continues_past_zero() -> None:
    inputs = PlanGeneratorInputs(
        hours_per_day=0.5,
        assignments=[_assignment(f"a{index}", 45) for index in range(1, 8)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    placed = [item for day in plan.days for item in day.items]
    assert len(placed) == 7
    assert plan.day("Monday") is not None
    assert len(plan.day("Monday").items) == 2


def test_emerging_skill_gets_daily_micro_reps() -> None:
    skill = PrioritySkill(tag="reading.cvcBlend", label="CVC blending", level="emerging")
    inputs = PlanGeneratorInputs(snapshot=_snapshot(skill))

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    for day in plan.days:
        assert len(day.items) == 1
        item = day.items[0]
        assert item.title == "CVC blending (micro rep)"
        assert item.estimated_minutes == 8
        assert item.subject_bucket == "Reading"
        assert item.skill_tags == ["reading.cvcBlend"]
    assert plan.minimum_win_text == "CVC blending: daily micro reps (5-8 min)."


def test_developing_skill_practices_monday_wednesday_friday() -> None:
    skill = PrioritySkill(tag="math.subtraction.regroup", label="Regrouping", level="developing")
    inputs = PlanGeneratorInputs(snapshot=_snapshot(skill))

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    practice_days = [day.day for day in plan.days if day.items]
    assert practice_days == ["Monday", "Wednesday", "Friday"]
    monday = plan.day("Monday")
    assert monday is not None
    assert monday.items[0].title == "Regrouping practice"
    assert monday.items[0].estimated_minutes == 15
    assert monday.items[0].subject_bucket == "Math"


def test_skill_reps_reduce_the_budget_used_for_assignments() -> None:
    skill = PrioritySkill(tag="writing.copyWords", label="Copy words", level="developing")
    inputs = PlanGeneratorInputs(
        snapshot=_snapshot(skill),
        hours_per_day=1.0,
        assignments=[_assignment("a1", 10, subject="Reading")],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assert _assignment_day(plan, "a1") == "Tuesday"


def test_stop_rule_cue_marks_assignment_for_modification() -> None:
    skill = PrioritySkill(tag="math.subtraction.regroup", label="Regrouping", level="secure")
    rule = StopRule(label="Frustration", trigger="Regrouping", action="Switch to base-ten blocks")
    inputs = PlanGeneratorInputs(
        snapshot=_snapshot(skill, stop_rules=[rule]),
        assignments=[_assignment("a1", 16, cues=["Lots of REGROUPING problems"])],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assert len(plan.skip_suggestions) == 1
    suggestion = plan.skip_suggestions[0]
    assert suggestion.action == "modify"
    assert suggestion.reason == "Regrouping"
    assert suggestion.replacement == "Switch to base-ten blocks"
    assert suggestion.evidence == "3 of 4 correct"

    item = next(item for day in plan.days for item in day.items if item.assignment_id == "a1")
    assert item.estimated_minutes == 10
    assert item.skip_suggestion == suggestion
    assert item.title == "Singapore 1A – Lesson a1"


def test_long_task_is_shortened_when_snapshot_has_skills() -> None:
    skill = PrioritySkill(tag="reading.sightWords", label="Sight words", level="practice")
    inputs = PlanGeneratorInputs(snapshot=_snapshot(skill), assignments=[_assignment("a1", 30)])

    processed, suggestions = apply_snapshot_suggestions(inputs.assignments, inputs.snapshot)

    assert processed[0].action == "modify"
    assert suggestions[0].reason == "Long task may exceed attention window"
    assert suggestions[0].replacement == "Do odds only or first half, then 2-min review"
    # Inputs stay untouched.
    assert inputs.assignments[0].action == "keep"
    assert inputs.assignments[0].skip_suggestion is None

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())
    item = next(item for day in plan.days for item in day.items if item.assignment_id == "a1")
    assert item.estimated_minutes == 18


def test_snapshot_without_priority_skills_leaves_assignments_alone() -> None:
    inputs = PlanGeneratorInputs(
        snapshot=SkillSnapshot(child_id="lincoln"),
        assignments=[_assignment("a1", 45)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assert plan.skip_suggestions == []
    item = next(item for day in plan.days for item in day.items if item.assignment_id == "a1")
    assert item.estimated_minutes == 45


def test_skipped_assignments_are_not_scheduled() -> None:
    inputs = PlanGeneratorInputs(
        assignments=[_assignment("a1", 20, action="skip"), _assignment("a2", 20)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assignment_ids = [item.assignment_id for day in plan.days for item in day.items]
    assert assignment_ids == ["a2"]


def test_adjustments_run_after_placement() -> None:
    inputs = PlanGeneratorInputs(
        assignments=[_assignment("a1", 30), _assignment("r1", 30, subject="Reading")],
        adjustments=[CapSubjectTimeIntent(subject="Math", max_minutes_per_day=10)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    minutes = {item.assignment_id: item.estimated_minutes for day in plan.days for item in day.items}
    assert minutes == {"a1": 10, "r1": 30}


def test_minimum_win_text_covers_every_level() -> None:
    snapshot = _snapshot(
        PrioritySkill(tag="reading.cvcBlend", label="CVC", level="emerging"),
        PrioritySkill(tag="math.placeValue", label="Place value", level="supported"),
        PrioritySkill(tag="writing.copyWords", label="Copying", level="secure"),
    )

    assert build_minimum_win_text(snapshot) == (
        "CVC: daily micro reps (5-8 min); Place value: 3x/week practice; "
        "Copying: maintain with regular practice."
    )
    assert build_minimum_win_text(None) == DEFAULT_MINIMUM_WIN


def test_fractional_hours_round_to_whole_minutes() -> None:
    plan = generate_draft_plan(PlanGeneratorInputs(hours_per_day=0.1))

    assert all(day.time_budget_minutes == 6 for day in plan.days)


def test_generation_emits_telemetry(telemetry_events) -> None:
    inputs = PlanGeneratorInputs(
        snapshot=_snapshot(PrioritySkill(tag="reading.cvcBlend", label="CVC", level="emerging")),
        assignments=[_assignment("a1", 10)],
    )

    generate_draft_plan(inputs, id_factory=sequential_item_ids())

    generated = [event for event in telemetry_events if event.name == "weekly_plan_generated"]
    assert len(generated) == 1
    payload = generated[0].payload
    assert payload["child_id"] == "lincoln"
    assert payload["item_count"] == 6
    assert payload["total_minutes"] == 50
    assert payload["assignment_count"] == 1


def test_build_week_reflows_the_default_light_day() -> None:
    inputs = PlanGeneratorInputs(
        app_blocks=[AppBlock(label="Reading Eggs", default_minutes=45)],
        assignments=[_assignment(f"a{index}", 20) for index in range(1, 6)],
    )
    generator = WeeklyPlanGenerator(id_factory=sequential_item_ids())

    plan = generator.build_week(inputs, default_day_types())

    wednesday = plan.day("Wednesday")
    assert wednesday is not None
    assert [item.title for item in wednesday.items] == [
        "Reading Eggs",
        "Quick writing (copy 1 sentence)",
        "Math facts sprint (5 min)",
        "Read aloud / game (win card)",
    ]
    scheduled = [item.assignment_id for day in plan.days for item in day.items if item.assignment_id]
    assert sorted(scheduled) == ["a1", "a2", "a3", "a4", "a5"]
    ids = [item.id for day in plan.days for item in day.items]
    assert len(ids) == len(set(ids))


def test_build_week_without_day_types_matches_generate() -> None:
    inputs = PlanGeneratorInputs(assignments=[_assignment("a1", 20)])

    built = WeeklyPlanGenerator(id_factory=sequential_item_ids()).build_week(inputs)
    generated = WeeklyPlanGenerator(id_factory=sequential_item_ids()).generate(inputs)

    assert built == generated


def test_unknown_skill_level_gets_no_reps() -> None:
    snapshot = _snapshot(PrioritySkill(tag="math.addition.facts", label="Facts", level="mastered"))
    inputs = PlanGeneratorInputs(hours_per_day=1.0, snapshot=snapshot, assignments=[_assignment("a1", 20)])

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    items = [item for day in plan.days for item in day.items]
    assert [item.assignment_id for item in items] == ["a1"]
    assert plan.minimum_win_text == "Facts: maintain with regular practice."


def test_degenerate_budgets_and_minutes_still_produce_a_plan() -> None:
    inputs = PlanGeneratorInputs(
        hours_per_day=-1.0,
        app_blocks=[AppBlock(label="Reading Eggs", default_minutes=-10)],
        assignments=[_assignment("a1", -5), _assignment("a2", 0)],
    )

    plan = generate_draft_plan(inputs, id_factory=sequential_item_ids())

    assert [day.time_budget_minutes for day in plan.days] == [-60] * 5
    assert _assignment_day(plan, "a1") == "Monday"
    assert _assignment_day(plan, "a2") == "Monday"
