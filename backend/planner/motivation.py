"""Start-Anyway protocol for refusal and avoidance, plus the parent's difficulty trend.

Self-regulation is treated as a skill like any other: each script offers two
ways into the same work, a short timer, a first rep done together and a
small reward for starting.
"""

from __future__ import annotations

from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel, Field

from .models import SkillSnapshot, StopRule
from .taxonomy import MathTags, ReadingTags, RegulationTags

DifficultyTrend = Literal["improving", "stable", "declining"]

DEFAULT_TIMER_MINUTES = 5
DEFAULT_WIN_REWARD = "1 XP + praise + short break"
MIN_KEYWORD_LENGTH = 4
MIN_KEYWORD_HITS = 2
TREND_WINDOW = 3
TREND_THRESHOLD = 0.5


class ModalityChoice(BaseModel):
    label: str
    description: str


class StartAnywayScript(BaseModel):
    trigger: str
    choices: List[ModalityChoice] = Field(default_factory=list)
    timer_minutes: int = DEFAULT_TIMER_MINUTES
    first_rep_together: bool = True
    win_reward: str = DEFAULT_WIN_REWARD
    skill_tags: List[str] = Field(default_factory=list)


class DailyDifficultyRating(BaseModel):
    """Parent's 1 (easy) to 5 (hard) rating of a school day."""

    date: str
    child_id: str
    rating: int = Field(ge=1, le=5)
    notes: Optional[str] = None


def _script(trigger: str, choices: List[tuple], win_reward: str, skill_tags: List[str]) -> StartAnywayScript:
    return StartAnywayScript(
        trigger=trigger,
        choices=[ModalityChoice(label=label, description=description) for label, description in choices],
        win_reward=win_reward,
        skill_tags=skill_tags,
    )


DEFAULT_START_ANYWAY_SCRIPTS: List[StartAnywayScript] = [
    _script(
        "Refusal/complaining > 60s",
        [
            ("Worksheet version", "Do 3 problems on paper with manipulatives"),
            ("Whiteboard version", "Same skill on whiteboard with dry-erase markers"),
        ],
        "1 XP + high-five + 2-min break",
        [RegulationTags.START_ANYWAY],
    ),
    _script(
        "3 mistakes in a row on regrouping",
        [
            ("Manipulatives", "Use base-ten blocks for regrouping"),
            ("Drawing method", "Draw tens and ones, cross out to regroup"),
        ],
        "Return with 2 problems only, then done",
        [RegulationTags.FRUSTRATION, MathTags.SUBTRACTION_REGROUP],
    ),
    _script(
        "CVC reading avoidance / \"I can't read\"",
        [
            ("Tap & blend", "Tap each sound, then slide to blend (5 words)"),
            ("Sound boxes", "Use Elkonin boxes with letter tiles (5 words)"),
        ],
        "1 XP + choose a fun read-aloud book",
        [RegulationTags.START_ANYWAY, ReadingTags.CVC_BLEND],
    ),
    _script(
        "General \"I don't want to do school\" (low energy)",
        [
            ("Easy win first", "Start with sight words or math facts you already know"),
            ("Movement break", "2-min jumping jacks, then start with timer"),
        ],
        "1 XP + 5-min free choice after timer",
        [RegulationTags.START_ANYWAY, RegulationTags.STAMINA],
    ),
]


def stop_rule_to_script(rule: StopRule) -> StartAnywayScript:
    return _script(
        rule.trigger,
        [
            ("Modified version", rule.action),
            ("Alternative approach", "Try a different modality (verbal, whiteboard, manipulatives)"),
        ],
        DEFAULT_WIN_REWARD,
        [RegulationTags.START_ANYWAY],
    )


def _keyword_hits(script: StartAnywayScript, text: str) -> int:
    keywords = [word for word in script.trigger.lower().split() if len(word) >= MIN_KEYWORD_LENGTH]
    return sum(1 for keyword in keywords if keyword in text)


def find_start_anyway_script(trigger_text: str, snapshot: Optional[SkillSnapshot]) -> StartAnywayScript:
    """Pick a protocol for what the parent is seeing right now.

    The child's own stop rules win over the defaults. A default script needs at
    least two of its trigger keywords in the text. Anything else gets a generic
    two-choice script built around the text itself.
    """
    lower = trigger_text.lower()

    if snapshot is not None:
        for rule in snapshot.stop_rules:
            if rule.trigger.lower() in lower:
                return stop_rule_to_script(rule)

    for script in DEFAULT_START_ANYWAY_SCRIPTS:
        if _keyword_hits(script, lower) >= MIN_KEYWORD_HITS:
            return script.model_copy(deep=True)

    return _script(
        trigger_text,
        [
            ("Choice A", "Same skill, different format (whiteboard/verbal)"),
            ("Choice B", "Easier version of the same skill (fewer reps)"),
        ],
        DEFAULT_WIN_REWARD,
        [RegulationTags.START_ANYWAY],
    )


def build_all_scripts(snapshot: Optional[SkillSnapshot]) -> List[StartAnywayScript]:
    scripts = [script.model_copy(deep=True) for script in DEFAULT_START_ANYWAY_SCRIPTS]
    if snapshot is None:
        return scripts
    for rule in snapshot.stop_rules:
        trigger = rule.trigger.lower()
        if any(trigger in script.trigger.lower() for script in scripts):
            continue
        scripts.append(stop_rule_to_script(rule))
    return scripts


def difficulty_trend(ratings: Iterable[DailyDifficultyRating]) -> DifficultyTrend:
    """Compare the last three ratings with the three before them.

    Lower ratings mean easier days, so a drop of half a point is improving.
    Fewer than six ratings is always stable.
    """
    ordered = sorted(ratings, key=lambda rating: rating.date)
    recent = ordered[-TREND_WINDOW:]
    previous = ordered[-2 * TREND_WINDOW : -TREND_WINDOW]
    if len(recent) < TREND_WINDOW or len(previous) < TREND_WINDOW:
        return "stable"

    recent_avg = sum(rating.rating for rating in recent) / len(recent)
    previous_avg = sum(rating.rating for rating in previous) / len(previous)
    diff = recent_avg - previous_avg
    if diff <= -TREND_THRESHOLD:
        return "improving"
    if diff >= TREND_THRESHOLD:
        return "declining"
    return "stable"


__all__ = [
    "DEFAULT_START_ANYWAY_SCRIPTS",
    "DailyDifficultyRating",
    "DifficultyTrend",
    "ModalityChoice",
    "StartAnywayScript",
    "build_all_scripts",
    "difficulty_trend",
    "find_start_anyway_script",
    "stop_rule_to_script",
]
