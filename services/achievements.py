"""
Achievement and liveness evaluation.

Stat and age achievements are recomputed from the current record on every
read; only mastery labels (earned through the study track) are stored.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from models.pet import PetStats
from services.tuning import Tuning

# Highest threshold first; only the first matching tier is awarded.
STAT_TIERS: Dict[str, Tuple[Tuple[float, str], ...]] = {
    "spirituality": ((100, "Spiritual Master"), (75, "Spiritual Guide"), (50, "Spiritual Seeker")),
    "health": ((100, "Peak Health"), (75, "Vibrant Health"), (50, "Good Health")),
    "energy": ((100, "Boundless Energy"), (75, "Energetic"), (50, "Active")),
    "happiness": ((100, "Blissful"), (75, "Joyful"), (50, "Content")),
}

AGE_TIERS: Tuple[Tuple[int, str], ...] = ((24, "Wise Elder"), (12, "Mature Soul"), (6, "Growing Soul"))


def _highest_tier(value: float, tiers: Iterable[Tuple[float, str]]) -> Optional[str]:
    for threshold, label in tiers:
        if value >= threshold:
            return label
    return None


def stat_achievements(stats: PetStats) -> List[str]:
    """One label per stat for its highest reached tier, in spirituality/health/energy/happiness order."""
    labels: List[str] = []
    for name, tiers in STAT_TIERS.items():
        label = _highest_tier(stats.get(name), tiers)
        if label:
            labels.append(label)
    return labels


def age_achievements(age: int) -> List[str]:
    label = _highest_tier(age, AGE_TIERS)
    return [label] if label else []


def evaluate_achievements(stats: PetStats, age: int, mastery: Iterable[str] = ()) -> List[str]:
    """
    Full achievement list: recomputed stat and age labels, then persisted
    mastery labels, de-duplicated preserving order.
    """
    labels: List[str] = []
    for label in stat_achievements(stats) + age_achievements(age) + list(mastery):
        if label not in labels:
            labels.append(label)
    return labels


def has_max_stats(stats: PetStats) -> bool:
    """True when every stat has reached the ceiling."""
    return all(stats.get(name) >= Tuning.STAT_MAX for name in Tuning.STAT_NAMES)


def is_alive(stats: PetStats) -> bool:
    """A pet lives while both health and spirituality are above zero."""
    return stats.health > 0 and stats.spirituality > 0
