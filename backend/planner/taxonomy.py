"""Skill tag taxonomy used for matching plan items to priority skills.

Tags are dot paths (``domain.area.skill``). Levels never appear in the tag;
they live on the :class:`~planner.models.PrioritySkill` instead.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import SkillTagDefinition, SubjectBucket


class ReadingTags:
    PHONEMIC_AWARENESS = "reading.phonemicAwareness"
    LETTER_SOUND = "reading.letterSound"
    CVC_BLEND = "reading.cvcBlend"
    SIGHT_WORDS = "reading.sightWords"
    FLUENCY_SHORT = "reading.fluency.short"


class WritingTags:
    GRIP_POSTURE = "writing.gripPosture"
    LETTER_FORMATION = "writing.letterFormation"
    COPY_WORDS = "writing.copyWords"


class MathTags:
    ADDITION_FACTS = "math.addition.facts"
    SUBTRACTION_NO_REGROUP = "math.subtraction.noRegroup"
    SUBTRACTION_REGROUP = "math.subtraction.regroup"
    PLACE_VALUE = "math.placeValue"
    WORD_PROBLEMS = "math.wordProblems"


class RegulationTags:
    ATTENTION = "regulation.attention"
    FRUSTRATION = "regulation.frustration"
    START_ANYWAY = "regulation.startAnyway"
    STAMINA = "regulation.stamina"


def _definition(tag: str, label: str, evidence: str, supports: Sequence[str]) -> SkillTagDefinition:
    return SkillTagDefinition(tag=tag, label=label, evidence=evidence, common_supports=tuple(supports))


SKILL_TAG_CATALOG: List[SkillTagDefinition] = [
    _definition(
        ReadingTags.PHONEMIC_AWARENESS,
        "Phonemic Awareness",
        "Segments or blends 3+ phonemes in spoken words",
        ["Elkonin boxes", "Clap/tap syllables", "Short bursts (2 min)"],
    ),
    _definition(
        ReadingTags.LETTER_SOUND,
        "Letter-Sound Correspondence",
        "Names sound for 20+ letters without prompt",
        ["Letter tiles", "Finger tracing", "Multisensory (sand/playdough)"],
    ),
    _definition(
        ReadingTags.CVC_BLEND,
        "CVC Blending",
        "Reads 10 CVC words with 2 or fewer prompts",
        ["Tap sounds", "Finger blending", "Short sessions (5-8 min)"],
    ),
    _definition(
        ReadingTags.SIGHT_WORDS,
        "Sight Words",
        "Reads 5+ sight words automatically (< 3 sec each)",
        ["Flash cards", "Word wall", "Repeated reading"],
    ),
    _definition(
        ReadingTags.FLUENCY_SHORT,
        "Short Passage Fluency",
        "Reads a decodable sentence with expression",
        ["Repeated reading", "Echo reading", "Phrase-cued text"],
    ),
    _definition(
        WritingTags.GRIP_POSTURE,
        "Grip & Posture",
        "Holds pencil with tripod grip for 3+ min",
        ["Pencil grip aid", "Slant board", "Short practice (5 min max)"],
    ),
    _definition(
        WritingTags.LETTER_FORMATION,
        "Letter Formation",
        "Forms 15+ letters legibly from memory",
        ["Tracing sheets", "Skywriting", "Verbal cues for strokes"],
    ),
    _definition(
        WritingTags.COPY_WORDS,
        "Copy Words",
        "Copies 3-word phrases legibly with spacing",
        ["Model nearby", "Lined paper", "Short sets (3-5 words)"],
    ),
    _definition(
        MathTags.ADDITION_FACTS,
        "Addition Facts",
        "Solves 10 single-digit addition facts in 2 min",
        ["Number line", "Counters", "Timed sprints (1 min)"],
    ),
    _definition(
        MathTags.SUBTRACTION_NO_REGROUP,
        "Subtraction (no regrouping)",
        "Solves 8/10 two-digit subtraction without regrouping",
        ["Base-ten blocks", "Place value chart", "Color-coded columns"],
    ),
    _definition(
        MathTags.SUBTRACTION_REGROUP,
        "Subtraction (regrouping)",
        "Solves 6/8 two-digit regrouping problems with manipulatives or guided steps",
        ["Base-ten blocks", "Place value chart", "Crossing-out method"],
    ),
    _definition(
        MathTags.PLACE_VALUE,
        "Place Value",
        "Identifies tens and ones in 2-digit numbers",
        ["Base-ten blocks", "Place value mat", "Expanded form practice"],
    ),
    _definition(
        MathTags.WORD_PROBLEMS,
        "Word Problems",
        "Solves 2/3 single-step word problems with drawing",
        ["Draw a picture", "Act it out", "Underline key words"],
    ),
    _definition(
        RegulationTags.ATTENTION,
        "Sustained Attention",
        "Stays on task for 8+ min with 1 redirect",
        ["Timer visible", "Fidget tool", "Break after 8 min"],
    ),
    _definition(
        RegulationTags.FRUSTRATION,
        "Frustration Tolerance",
        "Uses a coping strategy before quitting",
        ["Visual calm-down steps", "Offer choice of 2 tasks", "Reduce difficulty first"],
    ),
    _definition(
        RegulationTags.START_ANYWAY,
        "Start Anyway",
        "Begins a non-preferred task within 60 seconds of a choice card",
        ["Two-choice card", "5-min timer", "First rep together"],
    ),
    _definition(
        RegulationTags.STAMINA,
        "Work Stamina",
        "Completes a 10-min block with at most one break",
        ["Visual schedule", "Movement break", "Easy win first"],
    ),
]

SKILL_TAG_MAP: Dict[str, SkillTagDefinition] = {definition.tag: definition for definition in SKILL_TAG_CATALOG}

ALL_SKILL_TAGS: List[str] = [definition.tag for definition in SKILL_TAG_CATALOG]

_SUBJECT_PREFIXES: Sequence[tuple[Sequence[str], SubjectBucket]] = (
    (("reading", "phonics"), "Reading"),
    (("math",), "Math"),
    (("writing", "language"), "LanguageArts"),
    (("science",), "Science"),
    (("social",), "SocialStudies"),
)


def tag_prefix(tag: str, segments: int = 2) -> str:
    """Return the first ``segments`` dot segments of ``tag`` (``domain.area``)."""
    return ".".join(tag.split(".")[:segments])


def tags_match(left: str, right: str) -> bool:
    """Exact match, or either tag starts with the other's two-segment prefix."""
    normalized_left = left.lower()
    normalized_right = right.lower()
    return (
        normalized_left == normalized_right
        or normalized_left.startswith(tag_prefix(normalized_right))
        or normalized_right.startswith(tag_prefix(normalized_left))
    )


def skill_tag_to_subject(tag: str) -> SubjectBucket:
    lower = tag.lower()
    for prefixes, subject in _SUBJECT_PREFIXES:
        if lower.startswith(prefixes):
            return subject
    return "Other"


def tag_label(tag: str) -> str:
    definition = SKILL_TAG_MAP.get(tag)
    if definition is not None:
        return definition.label
    return tag.split(".")[-1] or tag


def suggest_tags_for_subject(subject_bucket: str) -> List[str]:
    lower = subject_bucket.lower()
    if lower in {"reading", "languagearts"}:
        return [
            ReadingTags.CVC_BLEND,
            ReadingTags.SIGHT_WORDS,
            ReadingTags.PHONEMIC_AWARENESS,
            ReadingTags.FLUENCY_SHORT,
            WritingTags.LETTER_FORMATION,
            WritingTags.COPY_WORDS,
        ]
    if lower == "math":
        return [
            MathTags.SUBTRACTION_REGROUP,
            MathTags.SUBTRACTION_NO_REGROUP,
            MathTags.ADDITION_FACTS,
            MathTags.PLACE_VALUE,
            MathTags.WORD_PROBLEMS,
        ]
    return list(ALL_SKILL_TAGS)


def auto_suggest_tags(subject_bucket: str, priority_skill_tags: Iterable[str]) -> List[str]:
    """Subject tags that are also priority skills, else the first two subject tags."""
    subject_tags = suggest_tags_for_subject(subject_bucket)
    priority = set(priority_skill_tags)
    prioritized = [tag for tag in subject_tags if tag in priority]
    if prioritized:
        return prioritized
    return subject_tags[:2]


__all__ = [
    "ALL_SKILL_TAGS",
    "MathTags",
    "ReadingTags",
    "RegulationTags",
    "SKILL_TAG_CATALOG",
    "SKILL_TAG_MAP",
    "WritingTags",
    "auto_suggest_tags",
    "skill_tag_to_subject",
    "suggest_tags_for_subject",
    "tag_label",
    "tag_prefix",
    "tags_match",
]
