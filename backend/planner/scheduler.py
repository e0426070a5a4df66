"""Weekly plan generation.

Lays app blocks, priority-skill reps and workbook assignments into a
Monday..Friday plan under a per-day minute budget, then applies the parent's
adjustment intents in order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from time import perf_counter
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .adjustments import apply_adjustments, plan_total_minutes
from .ids import ItemIdFactory, random_item_ids
from .models import (
    WEEK_DAYS,
    AppBlock,
    AssignmentCandidate,
    DayPlan,
    DayTypeConfig,
    PlanGeneratorInputs,
    PlanItem,
    PrioritySkill,
    SkillSnapshot,
    SkipSuggestion,
    WeekDay,
    WeeklyPlan,
)
from .reflow import reflow_plan_around_light_days
from .taxonomy import skill_tag_to_subject
from .telemetry import PLAN_GENERATED, emit_event

logger = logging.getLogger(__name__)

MICRO_REP_MINUTES = 8
PRACTICE_MINUTES = 15
PRACTICE_DAYS: Tuple[WeekDay, ...] = ("Monday", "Wednesday", "Friday")
MODIFY_TIME_FACTOR = 0.6
LONG_TASK_THRESHOLD_MINUTES = 20
DEFAULT_EVIDENCE = "Complete modified set"
DEFAULT_MINIMUM_WIN = "Complete daily assignments within time budget."

LONG_TASK_SUGGESTION = SkipSuggestion(
    action="modify",
    reason="Long task may exceed attention window",
    replacement="Do odds only or first half, then 2-min review",
    evidence="Completes modified set with acceptable accuracy",
)


def build_minimum_win_text(snapshot: Optional[SkillSnapshot]) -> str:
    if snapshot is None or not snapshot.priority_skills:
        return DEFAULT_MINIMUM_WIN
    parts: List[str] = []
    for skill in snapshot.priority_skills:
        if skill.level == "emerging":
            parts.append(f"{skill.label}: daily micro reps (5-8 min)")
        elif skill.level in {"developing", "supported"}:
            parts.append(f"{skill.label}: 3x/week practice")
        else:
            parts.append(f"{skill.label}: maintain with regular practice")
    return "; ".join(parts) + "."


def _stop_rule_suggestion(
    assignment: AssignmentCandidate,
    snapshot: SkillSnapshot,
) -> Optional[SkipSuggestion]:
    cues = [cue.lower() for cue in assignment.difficulty_cues]
    for rule in snapshot.stop_rules:
        trigger = rule.trigger.lower()
        if any(trigger in cue for cue in cues):
            evidence = (
                snapshot.evidence_definitions[0].description
                if snapshot.evidence_definitions
                else DEFAULT_EVIDENCE
            )
            return SkipSuggestion(
                action="modify",
                reason=rule.trigger,
                replacement=rule.action,
                evidence=evidence,
            )
    return None


def apply_snapshot_suggestions(
    assignments: Sequence[AssignmentCandidate],
    snapshot: Optional[SkillSnapshot],
) -> Tuple[List[AssignmentCandidate], List[SkipSuggestion]]:
    """Mark assignments for modification from stop rules and task length.

    Without priority skills there is nothing to tailor to, so assignments come
    back unchanged. The first matching stop rule wins; otherwise tasks longer
    than the attention window are shortened.
    """
    if snapshot is None or not snapshot.priority_skills:
        return [assignment.model_copy(deep=True) for assignment in assignments], []

    processed: List[AssignmentCandidate] = []
    suggestions: List[SkipSuggestion] = []
    for assignment in assignments:
        suggestion = _stop_rule_suggestion(assignment, snapshot)
        if suggestion is None and assignment.estimated_minutes > LONG_TASK_THRESHOLD_MINUTES:
            suggestion = LONG_TASK_SUGGESTION.model_copy()
        if suggestion is None:
            processed.append(assignment.model_copy(deep=True))
            continue
        suggestions.append(suggestion)
        processed.append(
            assignment.model_copy(update={"action": "modify", "skip_suggestion": suggestion}, deep=True)
        )
    return processed, suggestions


@dataclass
class _DayBudget:
    day: WeekDay
    remaining: int


class WeeklyPlanGenerator:
    """Greedy weekly planner.

    Assignments go to the day with the largest tracked budget; ties go to the
    earliest weekday. Tracked budgets only ever decrease and are not
    recomputed from placed items, so overflow from skill reps stays visible.
    """

    def __init__(self, *, id_factory: Optional[ItemIdFactory] = None) -> None:
        self._id_factory = id_factory or random_item_ids()

    def generate(self, inputs: PlanGeneratorInputs) -> WeeklyPlan:
        started = perf_counter()
        minutes_per_day = int(round(inputs.hours_per_day * 60))
        app_minutes = sum(block.default_minutes for block in inputs.app_blocks)
        remaining_per_day = max(0, minutes_per_day - app_minutes)

        processed, skip_suggestions = apply_snapshot_suggestions(inputs.assignments, inputs.snapshot)

        days: Dict[WeekDay, DayPlan] = {
            day: DayPlan(
                day=day,
                time_budget_minutes=minutes_per_day,
                items=self._app_block_items(inputs.app_blocks),
            )
            for day in WEEK_DAYS
        }
        budgets = [_DayBudget(day=day, remaining=remaining_per_day) for day in WEEK_DAYS]

        if inputs.snapshot is not None:
            self._inject_skill_reps(inputs.snapshot.priority_skills, days, budgets)

        for assignment in processed:
            if assignment.action == "skip":
                continue
            self._place_assignment(assignment, days, budgets)

        plan = WeeklyPlan(
            days=[days[day] for day in WEEK_DAYS],
            skip_suggestions=skip_suggestions,
            minimum_win_text=build_minimum_win_text(inputs.snapshot),
        )
        plan = apply_adjustments(plan, inputs.adjustments)

        emit_event(
            PLAN_GENERATED,
            child_id=inputs.snapshot.child_id if inputs.snapshot else None,
            duration_ms=round((perf_counter() - started) * 1000.0, 2),
            item_count=sum(len(day.items) for day in plan.days),
            total_minutes=plan_total_minutes(plan),
            budget_minutes_per_day=minutes_per_day,
            assignment_count=len(inputs.assignments),
            skip_suggestion_count=len(skip_suggestions),
            adjustment_count=len(inputs.adjustments),
        )
        return plan

    def build_week(
        self,
        inputs: PlanGeneratorInputs,
        day_types: Optional[Iterable[DayTypeConfig]] = None,
    ) -> WeeklyPlan:
        """Generate the plan, then reflow it around light and appointment days."""
        plan = self.generate(inputs)
        if day_types is None:
            return plan
        return reflow_plan_around_light_days(
            plan,
            list(day_types),
            inputs.app_blocks,
            id_factory=self._id_factory,
        )

    def _app_block_items(self, app_blocks: Sequence[AppBlock]) -> List[PlanItem]:
        return [
            PlanItem(
                id=self._id_factory(),
                title=block.label,
                subject_bucket="Other",
                estimated_minutes=block.default_minutes,
                skill_tags=[],
                is_app_block=True,
                accepted=True,
            )
            for block in app_blocks
        ]

    def _inject_skill_reps(
        self,
        skills: Sequence[PrioritySkill],
        days: Dict[WeekDay, DayPlan],
        budgets: List[_DayBudget],
    ) -> None:
        by_day = {budget.day: budget for budget in budgets}
        for skill in skills:
            if skill.level == "emerging":
                target_days: Sequence[WeekDay] = WEEK_DAYS
                title = f"{skill.label} (micro rep)"
                minutes = MICRO_REP_MINUTES
            elif skill.level in {"developing", "supported"}:
                target_days = PRACTICE_DAYS
                title = f"{skill.label} practice"
                minutes = PRACTICE_MINUTES
            else:
                continue
            for day in target_days:
                days[day].items.append(
                    PlanItem(
                        id=self._id_factory(),
                        title=title,
                        subject_bucket=skill_tag_to_subject(skill.tag),
                        estimated_minutes=minutes,
                        skill_tags=[skill.tag],
                        accepted=True,
                    )
                )
                # Budgets are soft: this may go negative.
                by_day[day].remaining -= minutes

    def _place_assignment(
        self,
        assignment: AssignmentCandidate,
        days: Dict[WeekDay, DayPlan],
        budgets: List[_DayBudget],
    ) -> None:
        if assignment.action == "modify":
            minutes = math.ceil(assignment.estimated_minutes * MODIFY_TIME_FACTOR)
        else:
            minutes = assignment.estimated_minutes

        best = budgets[0]
        for budget in budgets:
            if budget.remaining > best.remaining:
                best = budget

        days[best.day].items.append(
            PlanItem(
                id=self._id_factory(),
                title=f"{assignment.workbook_name} – {assignment.lesson_name}",
                subject_bucket=assignment.subject_bucket,
                estimated_minutes=minutes,
                skill_tags=[],
                skip_suggestion=assignment.skip_suggestion,
                accepted=True,
                assignment_id=assignment.id,
            )
        )
        best.remaining -= minutes
        logger.debug(
            "Placed assignment %s on %s (%s min, %s min left)",
            assignment.id,
            best.day,
            minutes,
            best.remaining,
        )


def generate_draft_plan(
    inputs: PlanGeneratorInputs,
    *,
    id_factory: Optional[ItemIdFactory] = None,
) -> WeeklyPlan:
    return WeeklyPlanGenerator(id_factory=id_factory).generate(inputs)


__all__ = [
    "DEFAULT_MINIMUM_WIN",
    "LONG_TASK_THRESHOLD_MINUTES",
    "MICRO_REP_MINUTES",
    "MODIFY_TIME_FACTOR",
    "PRACTICE_DAYS",
    "PRACTICE_MINUTES",
    "WeeklyPlanGenerator",
    "apply_snapshot_suggestions",
    "build_minimum_win_text",
    "generate_draft_plan",
]
