"""
Mood derivation from the four pet stats.

derive_mood() evaluates its rules in priority order (first match wins);
MOOD_HIERARCHY is a separate worst-to-best ordering used only to tell
whether a mood change is an improvement.
"""

from __future__ import annotations

from typing import Tuple

from models.pet import PetStats

SAD = "sad"
TIRED = "tired"
HUNGRY = "hungry"
HAPPY = "happy"
CONTENT = "content"

LOW_THRESHOLD = 30.0
HIGH_THRESHOLD = 70.0

# Worst to best. Not the evaluation order of derive_mood().
MOOD_HIERARCHY: Tuple[str, ...] = (SAD, HUNGRY, TIRED, CONTENT, HAPPY)


def derive_mood(stats: PetStats) -> str:
    """Map stats to one of the five moods."""
    if stats.health < LOW_THRESHOLD or stats.spirituality < LOW_THRESHOLD:
        return SAD
    if stats.energy < LOW_THRESHOLD:
        return TIRED
    if stats.happiness < LOW_THRESHOLD:
        return HUNGRY
    if (
        stats.health > HIGH_THRESHOLD
        and stats.spirituality > HIGH_THRESHOLD
        and stats.happiness > HIGH_THRESHOLD
    ):
        return HAPPY
    return CONTENT


def mood_improvement(previous: str, current: str) -> int:
    """
    Number of hierarchy steps from previous to current mood.

    Returns 0 when the mood stayed the same, got worse, or either mood is
    unknown.
    """
    if previous not in MOOD_HIERARCHY or current not in MOOD_HIERARCHY:
        return 0
    return max(0, MOOD_HIERARCHY.index(current) - MOOD_HIERARCHY.index(previous))
