"""Planner data models shared by the scheduling and progression components."""

from __future__ import annotations

from datetime import date
from enum import IntEnum
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field

WeekDay = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
WEEK_DAYS: Tuple[WeekDay, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

SubjectBucket = Literal["Reading", "LanguageArts", "Math", "Science", "SocialStudies", "Other"]
SkillLevel = Literal["emerging", "developing", "supported", "practice", "secure"]
AssignmentAction = Literal["keep", "modify", "skip"]
DayType = Literal["normal", "light", "appointment"]
SessionResult = Literal["pass", "partial", "miss"]
PaceStatus = Literal["ahead", "on_track", "behind", "critical"]

SupportLevel = Literal["none", "environment", "prompts", "tools", "hand_over_hand"]
SUPPORT_LEVEL_ORDER: Tuple[SupportLevel, ...] = (
    "none",
    "environment",
    "prompts",
    "tools",
    "hand_over_hand",
)


class MasteryGate(IntEnum):
    """Four-step independence scale. Only level 3 unlocks skip advice."""

    NOT_YET = 0
    WITH_HELP = 1
    MOSTLY_INDEPENDENT = 2
    INDEPENDENT_CONSISTENT = 3


MASTERY_GATE_LABELS: Dict[MasteryGate, str] = {
    MasteryGate.NOT_YET: "Not yet",
    MasteryGate.WITH_HELP: "With help",
    MasteryGate.MOSTLY_INDEPENDENT: "Mostly independent",
    MasteryGate.INDEPENDENT_CONSISTENT: "Independent + consistent",
}


class SkillTagDefinition(BaseModel):
    """Immutable catalog entry for a dot-path skill tag."""

    model_config = {"frozen": True}

    tag: str
    label: str
    evidence: str
    common_supports: Tuple[str, ...] = ()


class PrioritySkill(BaseModel):
    """Focus skill. ``level`` is normally a ``SkillLevel``; unknown values count as not yet."""

    tag: str
    label: str
    level: str
    notes: Optional[str] = None
    mastery_gate: Optional[MasteryGate] = None


class SupportDefault(BaseModel):
    label: str
    description: str


class StopRule(BaseModel):
    label: str
    trigger: str
    action: str


class EvidenceDefinition(BaseModel):
    label: str
    description: str


class SkillSnapshot(BaseModel):
    """Current focus skills and remediation rules for one child."""

    child_id: str = ""
    priority_skills: List[PrioritySkill] = Field(default_factory=list)
    supports: List[SupportDefault] = Field(default_factory=list)
    stop_rules: List[StopRule] = Field(default_factory=list)
    evidence_definitions: List[EvidenceDefinition] = Field(default_factory=list)


class SkipSuggestion(BaseModel):
    action: Literal["skip", "modify"]
    reason: str
    replacement: str
    evidence: str


class AppBlock(BaseModel):
    """Fixed recurring daily activity, scheduled once per day."""

    label: str
    default_minutes: int
    notes: Optional[str] = None


class AssignmentCandidate(BaseModel):
    """Workbook assignment proposed for the week (e.g. from a photographed page)."""

    id: str
    subject_bucket: SubjectBucket
    workbook_name: str
    lesson_name: str
    page_range: Optional[str] = None
    estimated_minutes: int
    difficulty_cues: List[str] = Field(default_factory=list)
    action: AssignmentAction = "keep"
    skip_suggestion: Optional[SkipSuggestion] = None


class PlanItem(BaseModel):
    """Unit of schedulable work. Unaccepted items are shown but not counted."""

    id: str
    title: str
    subject_bucket: SubjectBucket
    estimated_minutes: int
    skill_tags: List[str] = Field(default_factory=list)
    accepted: bool = True
    is_app_block: bool = False
    assignment_id: Optional[str] = None
    skip_suggestion: Optional[SkipSuggestion] = None


class DayPlan(BaseModel):
    day: WeekDay
    time_budget_minutes: int
    items: List[PlanItem] = Field(default_factory=list)


class WeeklyPlan(BaseModel):
    """Five day plans in Monday..Friday order plus advice for the parent."""

    days: List[DayPlan] = Field(default_factory=list)
    skip_suggestions: List[SkipSuggestion] = Field(default_factory=list)
    minimum_win_text: str = ""

    def day(self, name: str) -> Optional[DayPlan]:
        for day_plan in self.days:
            if day_plan.day == name:
                return day_plan
        return None


class DayTypeConfig(BaseModel):
    day: WeekDay
    day_type: DayType = "normal"
    note: Optional[str] = None


class LightDayItem(BaseModel):
    title: str
    subject_bucket: SubjectBucket
    estimated_minutes: int
    skill_tags: List[str] = Field(default_factory=list)
    is_app_block: bool = False


class LightDayTemplate(BaseModel):
    items: List[LightDayItem] = Field(default_factory=list)
    total_minutes: int = 0


class SkipAdvisorResult(BaseModel):
    action: AssignmentAction
    rationale: str
    evidence_level: Optional[MasteryGate] = None
    skill_tag: Optional[str] = None


# Adjustment intents. Values are validated separately by is_valid_intent.


class LightenDayIntent(BaseModel):
    type: Literal["lighten_day"] = "lighten_day"
    day: WeekDay


class MoveSubjectIntent(BaseModel):
    type: Literal["move_subject"] = "move_subject"
    subject: SubjectBucket
    to_days: List[WeekDay] = Field(default_factory=list)


class ReduceSubjectIntent(BaseModel):
    type: Literal["reduce_subject"] = "reduce_subject"
    subject: SubjectBucket
    factor: float


class CapSubjectTimeIntent(BaseModel):
    type: Literal["cap_subject_time"] = "cap_subject_time"
    subject: SubjectBucket
    max_minutes_per_day: int


AdjustmentIntent = Annotated[
    Union[LightenDayIntent, MoveSubjectIntent, ReduceSubjectIntent, CapSubjectTimeIntent],
    Field(discriminator="type"),
]


class PlanGeneratorInputs(BaseModel):
    snapshot: Optional[SkillSnapshot] = None
    hours_per_day: float = 2.5
    app_blocks: List[AppBlock] = Field(default_factory=list)
    assignments: List[AssignmentCandidate] = Field(default_factory=list)
    adjustments: List[AdjustmentIntent] = Field(default_factory=list)


# Mastery ladders


class LadderRungDefinition(BaseModel):
    model_config = {"frozen": True}

    rung_id: str
    name: str
    evidence_text: str
    supports_text: str


class LadderCardDefinition(BaseModel):
    """Static ladder content: ordered rungs for one skill area."""

    model_config = {"frozen": True}

    ladder_key: str
    title: str
    intent: str = ""
    work_items: Tuple[str, ...] = ()
    metric_label: str = ""
    global_rule_text: str = ""
    rungs: Tuple[LadderRungDefinition, ...] = ()
    group: Optional[str] = None


class LadderSessionEntry(BaseModel):
    date_key: str
    rung_id: str
    support_level: SupportLevel
    result: SessionResult
    note: Optional[str] = None


class LadderProgress(BaseModel):
    """Per (child, ladder) position. Mutated only through apply_session."""

    child_id: str
    ladder_key: str
    current_rung_id: str
    streak_count: int = Field(default=0, ge=0)
    last_support_level: SupportLevel = "none"
    history: List[LadderSessionEntry] = Field(default_factory=list)


class LadderSessionInput(BaseModel):
    date_key: str
    result: SessionResult
    support_level: SupportLevel = "none"
    note: Optional[str] = None


class LadderSessionResult(BaseModel):
    progress: LadderProgress
    promoted: bool = False
    new_rung_id: Optional[str] = None


# Pace gauge


class WorkbookConfig(BaseModel):
    child_id: Optional[str] = None
    name: str
    subject_bucket: SubjectBucket = "Other"
    total_units: int = Field(ge=0)
    current_position: int = Field(default=0, ge=0)
    unit_label: str = "lesson"
    target_finish_date: date
    school_days_per_week: int = Field(default=5, ge=1, le=7)


class PaceGaugeResult(BaseModel):
    workbook_name: str
    required_per_week: float
    planned_per_week: float
    delta: float
    status: PaceStatus
    suggestion: str
    projected_finish_date: str
    buffer_days: int


__all__ = [
    "AdjustmentIntent",
    "AppBlock",
    "AssignmentAction",
    "AssignmentCandidate",
    "CapSubjectTimeIntent",
    "DayPlan",
    "DayType",
    "DayTypeConfig",
    "EvidenceDefinition",
    "LadderCardDefinition",
    "LadderProgress",
    "LadderRungDefinition",
    "LadderSessionEntry",
    "LadderSessionInput",
    "LadderSessionResult",
    "LightDayItem",
    "LightDayTemplate",
    "LightenDayIntent",
    "MASTERY_GATE_LABELS",
    "MasteryGate",
    "MoveSubjectIntent",
    "PaceGaugeResult",
    "PaceStatus",
    "PlanGeneratorInputs",
    "PlanItem",
    "PrioritySkill",
    "ReduceSubjectIntent",
    "SUPPORT_LEVEL_ORDER",
    "SessionResult",
    "SkillLevel",
    "SkillSnapshot",
    "SkillTagDefinition",
    "SkipAdvisorResult",
    "SkipSuggestion",
    "StopRule",
    "SubjectBucket",
    "SupportDefault",
    "SupportLevel",
    "WEEK_DAYS",
    "WeekDay",
    "WeeklyPlan",
    "WorkbookConfig",
]
