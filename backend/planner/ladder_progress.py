"""Mastery ladder progression.

A child climbs one rung at a time. Three consecutive passes at the same or
less support promote to the next rung; a partial or a miss resets the streak.
"""

from __future__ import annotations

import logging
from typing import Optional

from .models import (
    SUPPORT_LEVEL_ORDER,
    LadderCardDefinition,
    LadderProgress,
    LadderSessionEntry,
    LadderSessionInput,
    LadderSessionResult,
    SupportLevel,
)
from .telemetry import LADDER_SESSION_APPLIED, emit_event

logger = logging.getLogger(__name__)

PROMOTION_STREAK = 3


def compare_support_level(left: SupportLevel, right: SupportLevel) -> int:
    """Negative when ``left`` is less support than ``right``, zero when equal."""
    return SUPPORT_LEVEL_ORDER.index(left) - SUPPORT_LEVEL_ORDER.index(right)


def next_rung_id(current_rung_id: str, ladder: LadderCardDefinition) -> Optional[str]:
    """Rung after ``current_rung_id``, or ``None`` on the last or an unknown rung."""
    rung_ids = [rung.rung_id for rung in ladder.rungs]
    try:
        index = rung_ids.index(current_rung_id)
    except ValueError:
        return None
    if index >= len(rung_ids) - 1:
        return None
    return rung_ids[index + 1]


def create_initial_progress(child_id: str, ladder: LadderCardDefinition) -> LadderProgress:
    first_rung = ladder.rungs[0].rung_id if ladder.rungs else ""
    return LadderProgress(
        child_id=child_id,
        ladder_key=ladder.ladder_key,
        current_rung_id=first_rung,
        streak_count=0,
        last_support_level="none",
        history=[],
    )


def ensure_progress(
    existing: Optional[LadderProgress],
    child_id: str,
    ladder: LadderCardDefinition,
) -> LadderProgress:
    """Return the stored progress, creating rung-zero progress on first use."""
    if existing is not None:
        return existing
    return create_initial_progress(child_id, ladder)


def _next_streak(prev: LadderProgress, session: LadderSessionInput) -> int:
    if session.result != "pass":
        return 0
    if prev.streak_count == 0:
        return 1
    if compare_support_level(session.support_level, prev.last_support_level) <= 0:
        return prev.streak_count + 1
    return 1


def apply_session(
    prev: LadderProgress,
    session: LadderSessionInput,
    ladder: LadderCardDefinition,
) -> LadderSessionResult:
    """Apply one logged session and return the new progress.

    ``prev`` is never modified. Partial and miss results keep the previous
    support level so the next pass is compared against the last passing one.
    """
    streak = _next_streak(prev, session)
    support_level = session.support_level if session.result == "pass" else prev.last_support_level
    note = session.note

    promoted = False
    current_rung_id = prev.current_rung_id
    if streak >= PROMOTION_STREAK:
        target = next_rung_id(prev.current_rung_id, ladder)
        if target is not None:
            promoted = True
            current_rung_id = target
            streak = 0
            marker = f"[PROMOTED to {target}]"
            note = f"{note} {marker}" if note else marker
        else:
            streak = PROMOTION_STREAK

    entry = LadderSessionEntry(
        date_key=session.date_key,
        rung_id=prev.current_rung_id,
        support_level=session.support_level,
        result=session.result,
        note=note,
    )
    progress = prev.model_copy(
        update={
            "current_rung_id": current_rung_id,
            "streak_count": streak,
            "last_support_level": support_level,
            "history": [*(past.model_copy() for past in prev.history), entry],
        }
    )

    if promoted:
        logger.info(
            "Ladder %s promoted child=%s from %s to %s",
            ladder.ladder_key,
            prev.child_id,
            prev.current_rung_id,
            current_rung_id,
        )
    emit_event(
        LADDER_SESSION_APPLIED,
        child_id=prev.child_id,
        ladder_key=ladder.ladder_key,
        result=session.result,
        support_level=session.support_level,
        streak_count=streak,
        promoted=promoted,
        rung_id=current_rung_id,
    )
    return LadderSessionResult(
        progress=progress,
        promoted=promoted,
        new_rung_id=current_rung_id if promoted else None,
    )


__all__ = [
    "PROMOTION_STREAK",
    "apply_session",
    "compare_support_level",
    "create_initial_progress",
    "ensure_progress",
    "next_rung_id",
]
