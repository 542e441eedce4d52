"""
Tuning constants for the pet simulation.

Holds the fixed stat bounds, action rewards, timer intervals and the
closed sets of dhikr categories, prayer slots and study subjects. Times are
in seconds. This module is pure Python, dependency-free, and intended to be
imported wherever simulation values are needed.
"""

from typing import Dict, Final, Tuple


class Tuning:
    """Namespace container for simulation constants. Not meant to be instantiated."""

    # Stat bounds
    STAT_MIN: Final[float] = 0.0
    STAT_MAX: Final[float] = 100.0
    INITIAL_STAT: Final[float] = 20.0
    STAT_NAMES: Final[Tuple[str, ...]] = ("health", "spirituality", "energy", "happiness")

    # Identity defaults
    DEFAULT_NAME: Final[str] = "SoulGotchi"
    DEFAULT_EMOJI: Final[str] = "😌"

    # Decay / aging
    AGE_INTERVAL_S: Final[float] = 3600.0    # One hour of liveness = +1 age
    DECAY_POLL_S: Final[float] = 5.0         # How often the decay condition is checked
    DECAY_THRESHOLD_S: Final[float] = 10.0   # Minimum gap between two decays
    DECAY_AMOUNT: Final[float] = 1.0

    # Dhikr
    DHIKR_SET_SIZE: Final[int] = 33
    DHIKR_BONUS: Final[float] = 0.5          # Every repetition, all stats
    DHIKR_TYPE_BONUS: Final[float] = 0.5     # Every repetition, mapped stat
    SET_BONUS: Final[float] = 3.0            # Completed set, all stats
    SET_TYPE_BONUS: Final[float] = 2.0       # Completed set, mapped stat
    SET_COOLDOWN_S: Final[float] = 2.0
    TAP_DEBOUNCE_S: Final[float] = 0.3
    DHIKR_STAT: Final[Dict[str, str]] = {
        "Subhanallah": "spirituality",
        "Alhamdulillah": "happiness",
        "Allahu Akbar": "energy",
        "Astaghfirullah": "health",
    }

    # Prayer
    PRAYER_SLOTS: Final[Tuple[str, ...]] = ("Fajr", "Dhuhr", "Asr", "Maghrib", "Isha", "Tahajjud")
    PRAYER_BONUS: Final[Dict[str, float]] = {
        "spirituality": 15.0,
        "happiness": 10.0,
        "energy": 8.0,
        "health": 8.0,
    }

    # Rest
    REST_BONUS: Final[Dict[str, float]] = {"energy": 20.0, "health": 5.0}

    # Study
    STUDY_SUBJECTS: Final[Tuple[str, ...]] = ("Quran", "Hadith", "Fiqh", "Islamic History")
    STUDY_COOLDOWN_S: Final[float] = 3600.0
    STUDY_PROGRESS_STEP: Final[int] = 5
    STUDY_PROGRESS_MAX: Final[int] = 100
    STUDY_EFFECT: Final[Dict[str, float]] = {
        "spirituality": 10.0,
        "happiness": 5.0,
        "energy": -5.0,
    }

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is not instantiable")


def clamp(n: float, lo: float = Tuning.STAT_MIN, hi: float = Tuning.STAT_MAX) -> float:
    """
    Clamp a numeric value between inclusive lower and upper bounds.

    Args:
        n: The value to clamp.
        lo: Minimum allowed value (defaults to the stat floor).
        hi: Maximum allowed value (defaults to the stat ceiling).

    Returns:
        float: n limited to the range [lo, hi].

    Examples:
        >>> clamp(120)
        100.0
        >>> clamp(-5)
        0.0
    """
    return float(max(lo, min(n, hi)))
