"""Rule-based parser for plan adjustment requests typed by a parent.

Recognised phrasings (case-insensitive, first match wins):

* ``make wed light`` / ``lighten friday``
* ``move math to Tue/Thu``
* ``reduce reading`` / ``less writing``
* ``cap math at 20 min``

Anything else parses to ``None`` so the caller can show help text.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional

from .models import (
    WEEK_DAYS,
    AdjustmentIntent,
    CapSubjectTimeIntent,
    LightenDayIntent,
    MoveSubjectIntent,
    ReduceSubjectIntent,
    SubjectBucket,
    WeekDay,
)
from .telemetry import INTENT_PARSED, emit_event

logger = logging.getLogger(__name__)

REDUCE_FACTOR = 0.5

DAY_ALIASES: Dict[str, WeekDay] = {
    "mon": "Monday",
    "monday": "Monday",
    "tue": "Tuesday",
    "tues": "Tuesday",
    "tuesday": "Tuesday",
    "wed": "Wednesday",
    "wednesday": "Wednesday",
    "thu": "Thursday",
    "thurs": "Thursday",
    "thursday": "Thursday",
    "fri": "Friday",
    "friday": "Friday",
}

SUBJECT_ALIASES: Dict[str, SubjectBucket] = {
    "math": "Math",
    "maths": "Math",
    "reading": "Reading",
    "phonics": "Reading",
    "writing": "LanguageArts",
    "la": "LanguageArts",
    "language arts": "LanguageArts",
    "languagearts": "LanguageArts",
    "science": "Science",
    "social": "SocialStudies",
    "social studies": "SocialStudies",
}

HELP_TEXT = (
    'Try "make Wednesday light", "move math to Tue/Thu", "reduce reading", '
    'or "cap math at 20 min".'
)

_DAY = r"(mon(?:day)?|tue(?:s(?:day)?)?|wed(?:nesday)?|thu(?:rs(?:day)?)?|fri(?:day)?)"
_SUBJECT = r"(math|maths|reading|phonics|writing|la|language\s*arts|science|social(?:\s*studies)?)"

_LIGHTEN_PATTERNS = (
    re.compile(rf"(?:make|set)\s+{_DAY}\s+(?:light|lighter|easy|easier|short|shorter)"),
    re.compile(rf"(?:lighten|ease)\s+{_DAY}"),
)
_MOVE_PATTERN = re.compile(rf"move\s+{_SUBJECT}\s+to\s+(.+)")
_REDUCE_PATTERN = re.compile(rf"(?:reduce|less|cut|lower)\s+{_SUBJECT}")
_CAP_PATTERN = re.compile(rf"cap\s+{_SUBJECT}\s+(?:at|to)\s+(\d+)\s*(?:min|minutes?)?")
_DAY_SEPARATORS = re.compile(r"[/,&]+")


def parse_day(text: str) -> Optional[WeekDay]:
    return DAY_ALIASES.get(text.strip().lower())


def parse_days(text: str) -> List[WeekDay]:
    days: List[WeekDay] = []
    for part in _DAY_SEPARATORS.split(text):
        day = parse_day(part)
        if day is not None:
            days.append(day)
    return days


def parse_subject(text: str) -> Optional[SubjectBucket]:
    normalized = " ".join(text.strip().lower().split())
    return SUBJECT_ALIASES.get(normalized)


def _parse(lower: str) -> Optional[AdjustmentIntent]:
    for pattern in _LIGHTEN_PATTERNS:
        match = pattern.search(lower)
        if match:
            day = parse_day(match.group(1))
            if day is not None:
                return LightenDayIntent(day=day)
            break

    match = _MOVE_PATTERN.search(lower)
    if match:
        subject = parse_subject(match.group(1))
        to_days = parse_days(match.group(2))
        if subject is not None and to_days:
            return MoveSubjectIntent(subject=subject, to_days=to_days)

    match = _REDUCE_PATTERN.search(lower)
    if match:
        subject = parse_subject(match.group(1))
        if subject is not None:
            return ReduceSubjectIntent(subject=subject, factor=REDUCE_FACTOR)

    match = _CAP_PATTERN.search(lower)
    if match:
        subject = parse_subject(match.group(1))
        minutes = int(match.group(2))
        if subject is not None and minutes > 0:
            return CapSubjectTimeIntent(subject=subject, max_minutes_per_day=minutes)

    return None


def parse_adjustment_intent(text: str) -> Optional[AdjustmentIntent]:
    """Map free text to an adjustment intent, or ``None`` when unrecognised."""
    intent = _parse(text.strip().lower())
    if intent is None:
        logger.debug("No adjustment intent recognised in %r", text)
    emit_event(
        INTENT_PARSED,
        recognised=intent is not None,
        intent_type=intent.type if intent is not None else None,
    )
    return intent


def describe_adjustment(intent: AdjustmentIntent) -> str:
    if isinstance(intent, LightenDayIntent):
        return f"Lightening {intent.day}: reducing non-essential items."
    if isinstance(intent, MoveSubjectIntent):
        return f"Moving {intent.subject} to {', '.join(intent.to_days)}."
    if isinstance(intent, ReduceSubjectIntent):
        percent = math.floor((1 - intent.factor) * 100 + 0.5)
        return f"Reducing {intent.subject} time by {percent}%."
    if isinstance(intent, CapSubjectTimeIntent):
        return f"Capping {intent.subject} at {intent.max_minutes_per_day} min/day."
    raise TypeError(f"Unsupported adjustment intent type: {type(intent).__name__}")


def is_valid_intent(intent: AdjustmentIntent) -> bool:
    """Structural check for intents built outside the parser."""
    if isinstance(intent, LightenDayIntent):
        return intent.day in WEEK_DAYS
    if isinstance(intent, MoveSubjectIntent):
        return bool(intent.to_days) and all(day in WEEK_DAYS for day in intent.to_days)
    if isinstance(intent, ReduceSubjectIntent):
        return 0 < intent.factor < 1
    if isinstance(intent, CapSubjectTimeIntent):
        return intent.max_minutes_per_day > 0
    raise TypeError(f"Unsupported adjustment intent type: {type(intent).__name__}")


__all__ = [
    "DAY_ALIASES",
    "HELP_TEXT",
    "REDUCE_FACTOR",
    "SUBJECT_ALIASES",
    "describe_adjustment",
    "is_valid_intent",
    "parse_adjustment_intent",
    "parse_day",
    "parse_days",
    "parse_subject",
]
