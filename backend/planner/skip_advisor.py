"""Skip/modify/keep advice for plan items based on mastery evidence.

Only :attr:`MasteryGate.INDEPENDENT_CONSISTENT` unlocks a skip. A skill that is
mostly independent earns a lighter version of the item; everything else is
kept.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .models import (
    MASTERY_GATE_LABELS,
    MasteryGate,
    PlanItem,
    PrioritySkill,
    SkillSnapshot,
    SkipAdvisorResult,
)
from .taxonomy import SKILL_TAG_MAP, tags_match

_LEVEL_TO_GATE: Dict[str, MasteryGate] = {
    "emerging": MasteryGate.NOT_YET,
    "developing": MasteryGate.WITH_HELP,
    "supported": MasteryGate.WITH_HELP,
    "practice": MasteryGate.MOSTLY_INDEPENDENT,
    "secure": MasteryGate.INDEPENDENT_CONSISTENT,
}


def skill_level_to_mastery_gate(level: str) -> MasteryGate:
    return _LEVEL_TO_GATE.get(level, MasteryGate.NOT_YET)


def effective_mastery_gate(skill: PrioritySkill) -> MasteryGate:
    """Explicit gate when recorded, otherwise derived from the skill level."""
    if skill.mastery_gate is not None:
        return MasteryGate(skill.mastery_gate)
    return skill_level_to_mastery_gate(skill.level)


def find_matching_skills(item_tags: Sequence[str], priority_skills: Iterable[PrioritySkill]) -> List[PrioritySkill]:
    if not item_tags:
        return []
    return [
        skill
        for skill in priority_skills
        if any(tags_match(item_tag, skill.tag) for item_tag in item_tags)
    ]


def _first_at_gate(skills: Sequence[PrioritySkill], gate: MasteryGate) -> Optional[PrioritySkill]:
    for skill in skills:
        if effective_mastery_gate(skill) == gate:
            return skill
    return None


def evaluate_skip_eligibility(item: PlanItem, snapshot: Optional[SkillSnapshot]) -> SkipAdvisorResult:
    if snapshot is None or not snapshot.priority_skills:
        return SkipAdvisorResult(action="keep", rationale="No skill data available; keep by default.")

    matched = find_matching_skills(item.skill_tags, snapshot.priority_skills)
    if not matched:
        return SkipAdvisorResult(action="keep", rationale="No priority skill match; keep for coverage.")

    mastered = _first_at_gate(matched, MasteryGate.INDEPENDENT_CONSISTENT)
    if mastered is not None:
        label = MASTERY_GATE_LABELS[MasteryGate.INDEPENDENT_CONSISTENT]
        return SkipAdvisorResult(
            action="skip",
            rationale=f"Skip: {mastered.label} at {label}. Mastery evidence this week.",
            evidence_level=MasteryGate.INDEPENDENT_CONSISTENT,
            skill_tag=mastered.tag,
        )

    mostly = _first_at_gate(matched, MasteryGate.MOSTLY_INDEPENDENT)
    if mostly is not None:
        label = MASTERY_GATE_LABELS[MasteryGate.MOSTLY_INDEPENDENT]
        return SkipAdvisorResult(
            action="modify",
            rationale=f"Modify: {mostly.label} is {label}. Convert to 1-2 problems + quick check.",
            evidence_level=MasteryGate.MOSTLY_INDEPENDENT,
            skill_tag=mostly.tag,
        )

    definition = SKILL_TAG_MAP.get(item.skill_tags[0])
    if definition is not None:
        return SkipAdvisorResult(
            action="keep",
            rationale=f"Keep: {definition.label} still developing. {definition.evidence}",
            skill_tag=item.skill_tags[0],
        )
    return SkipAdvisorResult(action="keep", rationale="Core priority skill; keep for mastery building.")


def batch_evaluate_skip(
    items: Iterable[PlanItem],
    snapshot: Optional[SkillSnapshot],
) -> Dict[str, SkipAdvisorResult]:
    """Advice for every item keyed by item id. App blocks are always kept."""
    results: Dict[str, SkipAdvisorResult] = {}
    for item in items:
        if item.is_app_block:
            results[item.id] = SkipAdvisorResult(action="keep", rationale="App block runs automatically.")
            continue
        results[item.id] = evaluate_skip_eligibility(item, snapshot)
    return results


__all__ = [
    "batch_evaluate_skip",
    "effective_mastery_gate",
    "evaluate_skip_eligibility",
    "find_matching_skills",
    "skill_level_to_mastery_gate",
]
