"""Static ladder card definitions."""

from __future__ import annotations

from typing import Dict, List, Optional

from .models import LadderCardDefinition, LadderRungDefinition

GLOBAL_RULE = "Level up on 3 passes in a row with same or less support."


def _rung(rung_id: str, name: str, evidence: str, supports: str) -> LadderRungDefinition:
    return LadderRungDefinition(rung_id=rung_id, name=name, evidence_text=evidence, supports_text=supports)


HANDWRITING = LadderCardDefinition(
    ladder_key="handwriting",
    title="Handwriting + Drawing",
    intent="Build pencil control, letter formation, and visual expression so writing becomes automatic.",
    work_items=(
        "Pencil grip + posture check",
        "Letter formation (uppercase then lowercase)",
        "Copy words with spacing",
        "Sentence dictation",
        "Free draw + label",
    ),
    metric_label="One output produced",
    global_rule_text=GLOBAL_RULE,
    rungs=(
        _rung(
            "R0",
            "Grip + posture",
            "Holds pencil with tripod grip; sits upright for the task.",
            "Hand-over-hand, pencil grip sleeve, slant board.",
        ),
        _rung(
            "R1",
            "Letter formation",
            "Traces or copies 10+ letters staying on the line.",
            'Dotted-line guides, verbal stroke cues ("down, bump, up").',
        ),
        _rung(
            "R2",
            "Word copying",
            "Copies 3+ words with consistent spacing and sizing.",
            "Model word card, highlighted spacing marks.",
        ),
        _rung(
            "R3",
            "Sentence writing",
            "Writes a sentence from dictation with at most 2 formation errors.",
            "Verbal repetition, word bank on desk.",
        ),
        _rung(
            "R4",
            "Free draw + label",
            "Draws a scene and writes a caption/label independently.",
            "Prompt card only; no letter-level help.",
        ),
    ),
)

CVC_READING = LadderCardDefinition(
    ladder_key="cvc_reading",
    title="Phonics: CVC Blending",
    intent="Move from hearing sounds to reading short words without tapping.",
    work_items=(
        "Sound boxes with letter tiles",
        "Tap and slide 5 words",
        "Read a word list",
        "Read a decodable sentence",
    ),
    metric_label="Five words read",
    global_rule_text=GLOBAL_RULE,
    rungs=(
        _rung(
            "R0",
            "Hear the sounds",
            "Segments 3 sounds in a spoken CVC word.",
            "Elkonin boxes, adult says the word slowly.",
        ),
        _rung(
            "R1",
            "Tap and blend",
            "Taps each sound and blends 5 CVC words.",
            "Finger tapping, letter tiles.",
        ),
        _rung(
            "R2",
            "Word list",
            "Reads 10 CVC words with 2 or fewer prompts.",
            "Word list with picture cues.",
        ),
        _rung(
            "R3",
            "Decodable sentence",
            "Reads a decodable sentence with expression.",
            "Echo reading first, then independent.",
        ),
    ),
)

SENSORY_MOVEMENT = LadderCardDefinition(
    ladder_key="sensory_movement",
    title="Sensory + Movement",
    intent="Build body awareness, fine-motor play, and sensory exploration.",
    work_items=(
        "Explore a sensory bin (5 min)",
        "Scoop + pour practice",
        "Pincer grasp activities",
        "Obstacle course / balance",
        "Follow a 2-step movement game",
    ),
    metric_label="One activity completed",
    global_rule_text=GLOBAL_RULE,
    rungs=(
        _rung(
            "R0",
            "Free exploration",
            "Engages with a sensory bin or tactile material for 3+ min.",
            "Materials placed in front, adult models play.",
        ),
        _rung(
            "R1",
            "Scoop + pour",
            "Scoops and pours with a cup or spoon with minimal spilling.",
            "Hand-over-hand guidance, large containers.",
        ),
        _rung(
            "R2",
            "Pincer grasp",
            "Picks up small objects (pom-poms, beads) using thumb and finger.",
            "Tweezers, larger objects to start.",
        ),
        _rung(
            "R3",
            "Balance + obstacle",
            "Completes a simple 3-station obstacle course.",
            "Adult spotting, visual markers on floor.",
        ),
        _rung(
            "R4",
            "Movement game",
            'Follows a 2-step movement instruction ("jump then spin").',
            "Verbal model + demonstration.",
        ),
    ),
)

LADDER_CATALOG: List[LadderCardDefinition] = [HANDWRITING, CVC_READING, SENSORY_MOVEMENT]

_LADDERS_BY_KEY: Dict[str, LadderCardDefinition] = {ladder.ladder_key: ladder for ladder in LADDER_CATALOG}


def get_ladder(ladder_key: str) -> Optional[LadderCardDefinition]:
    return _LADDERS_BY_KEY.get(ladder_key)


__all__ = ["CVC_READING", "GLOBAL_RULE", "HANDWRITING", "LADDER_CATALOG", "SENSORY_MOVEMENT", "get_ladder"]
