"""Plan drafting endpoints for the planner chat UI.

Everything here is stateless: the caller sends the plan or inputs it holds and
gets the transformed plan back.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from .config import Settings, get_settings
from .coverage import CoverageEntry, build_coverage_summary, format_coverage_summary_text
from .ids import random_item_ids
from .intent_parser import HELP_TEXT, describe_adjustment, is_valid_intent, parse_adjustment_intent
from .models import (
    AdjustmentIntent,
    AppBlock,
    AssignmentCandidate,
    DayTypeConfig,
    PlanGeneratorInputs,
    PlanItem,
    PrioritySkill,
    SkillSnapshot,
    SkipAdvisorResult,
    WeeklyPlan,
)
from .reflow import default_day_types, reflow_plan_around_light_days
from .scheduler import WeeklyPlanGenerator
from .skip_advisor import batch_evaluate_skip

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger(__name__)


class DraftPlanRequest(BaseModel):
    snapshot: Optional[SkillSnapshot] = None
    hours_per_day: Optional[float] = None
    app_blocks: List[AppBlock] = Field(default_factory=list)
    assignments: List[AssignmentCandidate] = Field(default_factory=list)
    adjustments: List[AdjustmentIntent] = Field(default_factory=list)
    day_types: Optional[List[DayTypeConfig]] = None
    use_default_light_day: bool = False


class ReflowRequest(BaseModel):
    plan: WeeklyPlan
    day_types: List[DayTypeConfig] = Field(default_factory=list)
    app_blocks: List[AppBlock] = Field(default_factory=list)


class ParseIntentRequest(BaseModel):
    text: str = Field(..., max_length=500)


class ParseIntentResponse(BaseModel):
    intent: Optional[AdjustmentIntent] = None
    description: Optional[str] = None
    help_text: Optional[str] = None


class SkipAdviceRequest(BaseModel):
    items: List[PlanItem] = Field(default_factory=list)
    snapshot: Optional[SkillSnapshot] = None


class CoverageRequest(BaseModel):
    plan: WeeklyPlan
    priority_skills: List[PrioritySkill] = Field(default_factory=list)


class CoverageResponse(BaseModel):
    entries: List[CoverageEntry]
    text: str


def _generator(settings: Settings) -> WeeklyPlanGenerator:
    return WeeklyPlanGenerator(id_factory=random_item_ids(settings.item_id_prefix))


@router.post("/draft", response_model=WeeklyPlan, status_code=status.HTTP_200_OK)
def draft_plan(payload: DraftPlanRequest, settings: Settings = Depends(get_settings)) -> WeeklyPlan:
    invalid = [intent.type for intent in payload.adjustments if not is_valid_intent(intent)]
    if invalid:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid adjustment intents: {', '.join(invalid)}.",
        )

    inputs = PlanGeneratorInputs(
        snapshot=payload.snapshot,
        hours_per_day=payload.hours_per_day if payload.hours_per_day is not None else settings.default_hours_per_day,
        app_blocks=payload.app_blocks,
        assignments=payload.assignments,
        adjustments=payload.adjustments,
    )
    day_types = payload.day_types
    if day_types is None and payload.use_default_light_day:
        day_types = default_day_types(settings.default_light_day)
    return _generator(settings).build_week(inputs, day_types)


@router.post("/reflow", response_model=WeeklyPlan, status_code=status.HTTP_200_OK)
def reflow_plan(payload: ReflowRequest, settings: Settings = Depends(get_settings)) -> WeeklyPlan:
    return reflow_plan_around_light_days(
        payload.plan,
        payload.day_types,
        payload.app_blocks,
        id_factory=random_item_ids(settings.item_id_prefix),
    )


@router.post("/intents/parse", response_model=ParseIntentResponse, status_code=status.HTTP_200_OK)
def parse_intent(payload: ParseIntentRequest) -> ParseIntentResponse:
    intent = parse_adjustment_intent(payload.text)
    if intent is None:
        return ParseIntentResponse(help_text=HELP_TEXT)
    if not is_valid_intent(intent):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Parsed intent '{intent.type}' is not valid.",
        )
    return ParseIntentResponse(intent=intent, description=describe_adjustment(intent))


@router.post("/skip-advice", response_model=Dict[str, SkipAdvisorResult], status_code=status.HTTP_200_OK)
def skip_advice(payload: SkipAdviceRequest) -> Dict[str, SkipAdvisorResult]:
    return batch_evaluate_skip(payload.items, payload.snapshot)


@router.post("/coverage", response_model=CoverageResponse, status_code=status.HTTP_200_OK)
def coverage(payload: CoverageRequest) -> CoverageResponse:
    entries = build_coverage_summary(payload.plan, payload.priority_skills)
    return CoverageResponse(
        entries=entries,
        text=format_coverage_summary_text(entries, payload.priority_skills),
    )


__all__ = ["router"]
