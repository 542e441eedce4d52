# services/stat_store.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Protocol

from models.pet import PetDetails, PetRecord, PetStats
from services.achievements import is_alive
from services.mood import derive_mood
from services.tuning import Tuning

logger = logging.getLogger(__name__)


class StatPort(Protocol):
    """
    The narrow view of the stat store handed to the engines.

    Engines read current stats, submit absolute target values and stamp
    user interactions; they never write fields directly.
    """

    @property
    def stats(self) -> PetStats:
        ...

    @property
    def is_alive(self) -> bool:
        ...

    def update_stats(self, updates: Optional[Dict[str, float]] = None, **values: float) -> None:
        ...

    def mark_interaction(self, now: float) -> None:
        ...

    def add_achievement(self, label: str) -> None:
        ...


class StatStore:
    """
    Owner of the pet's stats, details and stored achievements.

    update_stats() is the single entry point for stat mutation: it clamps
    every supplied value to [0, 100], merges it, re-derives mood and
    liveness, and notifies observers. Death is one-way until reset().
    """

    def __init__(self, record: Optional[PetRecord] = None) -> None:
        self.record = record if record is not None else PetRecord()
        self._alive = is_alive(self.record.stats)
        self.record.mood = derive_mood(self.record.stats)
        self._observers: List[Callable[[], None]] = []

    # --- Observers ---
    def add_observer(self, cb: Callable[[], None]) -> None:
        """Register a no-arg callback invoked after every mutation."""
        if cb not in self._observers:
            self._observers.append(cb)

    def _notify(self) -> None:
        """Invoke all registered observers; a failing observer is logged and skipped."""
        for cb in list(self._observers):
            try:
                cb()
            except Exception:
                logger.warning("stat store observer failed", exc_info=True)

    # --- Queries ---
    @property
    def stats(self) -> PetStats:
        return self.record.stats

    @property
    def details(self) -> PetDetails:
        return self.record.details

    @property
    def mood(self) -> str:
        return self.record.mood

    @property
    def achievements(self) -> List[str]:
        """Stored (mastery) achievements only; see services.achievements for the full list."""
        return list(self.record.achievements)

    @property
    def is_alive(self) -> bool:
        return self._alive

    # --- Mutations ---
    def update_stats(self, updates: Optional[Dict[str, float]] = None, **values: float) -> None:
        """
        Clamp-and-merge the supplied absolute stat values.

        Unknown keys are ignored and omitted stats are left untouched.
        Out-of-range values are clamped, never rejected.
        """
        merged: Dict[str, float] = dict(updates or {})
        merged.update(values)
        if not merged:
            return
        self.record.stats = self.record.stats.merged(merged)
        self._refresh_derived()
        self._notify()

    def _refresh_derived(self) -> None:
        self.record.mood = derive_mood(self.record.stats)
        if self._alive and not is_alive(self.record.stats):
            self._alive = False
            logger.warning(
                "%s has passed away at age %sh (health=%.1f, spirituality=%.1f)",
                self.record.details.name,
                self.record.details.age,
                self.record.stats.health,
                self.record.stats.spirituality,
            )

    def set_pet_details(self, details: PetDetails) -> None:
        """Replace the details record wholesale."""
        self.record.details = replace(details)
        self._notify()

    def mark_interaction(self, now: float) -> None:
        """Stamp a user action; this also postpones the next decay."""
        self.record.last_interaction = float(now)
        self.record.details = replace(self.record.details, last_decay=float(now))
        self._notify()

    def add_achievement(self, label: str) -> None:
        """Store an achievement permanently; duplicates are ignored."""
        if label in self.record.achievements:
            return
        self.record.achievements.append(label)
        logger.info("achievement earned: %s", label)
        self._notify()

    def set_setup_complete(self, complete: bool) -> None:
        self.record.is_setup_complete = bool(complete)
        self._notify()

    def reset(self, now: float, name: str = Tuning.DEFAULT_NAME, emoji: str = Tuning.DEFAULT_EMOJI) -> None:
        """Recreate the pet with initial stats, age 0 and no achievements."""
        self.record = PetRecord(details=PetDetails(name=name, emoji=emoji, age=0, last_decay=float(now)))
        self.record.last_interaction = float(now)
        self.record.mood = derive_mood(self.record.stats)
        self._alive = True
        logger.info("new pet %s %s", name, emoji)
        self._notify()

    # --- Serialization ---
    def to_dict(self) -> Dict[str, object]:
        return self.record.to_dict()

    def from_dict(self, d: Dict[str, object]) -> None:
        """
        Load the pet record from a dict produced by to_dict().

        Mood and liveness are recomputed from the loaded stats.
        """
        self.record = PetRecord.from_dict(d)
        self.record.mood = derive_mood(self.record.stats)
        self._alive = is_alive(self.record.stats)
        self._notify()
