"""Per-subject coverage of a weekly plan and its text rendering."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from pydantic import BaseModel, Field

from .models import PrioritySkill, WeeklyPlan
from .taxonomy import tag_label


class CoverageEntry(BaseModel):
    """Accepted work for one subject over the week."""

    subject: str
    total_blocks: int = 0
    total_minutes: int = 0
    priority_hits: int = 0
    details: List[str] = Field(default_factory=list)


def build_coverage_summary(plan: WeeklyPlan, priority_skills: Iterable[PrioritySkill]) -> List[CoverageEntry]:
    priority_tags = {skill.tag for skill in priority_skills}
    entries: Dict[str, CoverageEntry] = {}
    tag_counts: Dict[str, Dict[str, int]] = {}

    for day in plan.days:
        for item in day.items:
            if not item.accepted:
                continue
            entry = entries.setdefault(item.subject_bucket, CoverageEntry(subject=item.subject_bucket))
            counts = tag_counts.setdefault(item.subject_bucket, {})
            entry.total_blocks += 1
            entry.total_minutes += item.estimated_minutes
            for tag in item.skill_tags:
                if tag in priority_tags:
                    entry.priority_hits += 1
                counts[tag] = counts.get(tag, 0) + 1

    for subject, entry in entries.items():
        entry.details = [f"{tag_label(tag)} {count}x" for tag, count in tag_counts[subject].items()]

    # Stable sort keeps first-seen order among equal subjects.
    return sorted(entries.values(), key=lambda entry: (-entry.priority_hits, -entry.total_minutes))


def format_coverage_summary_text(entries: Sequence[CoverageEntry], priority_skills: Sequence[PrioritySkill]) -> str:
    if not entries:
        return "No items scheduled yet."

    lines = ["Coverage this week:"]
    for entry in entries:
        detail = f" ({', '.join(entry.details)})" if entry.details else ""
        lines.append(f"  {entry.subject}: {entry.total_blocks} blocks, {entry.total_minutes}m{detail}")

    if priority_skills:
        hits = sum(entry.priority_hits for entry in entries)
        lines.append(f"\nPriority skill alignment: {hits} blocks match priority skills.")
    return "\n".join(lines)


__all__ = ["CoverageEntry", "build_coverage_summary", "format_coverage_summary_text"]
