# services/controller.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from services.achievements import evaluate_achievements, has_max_stats
from services.activity import ActivityEngine
from services.decay import DecayScheduler
from services.feedback import CELEBRATE, DEATH, Feedback, LogFeedback, emit
from services.learning import LearningTrack
from services.mood import mood_improvement
from services.persistence import RECORD_NAMES, JsonRepository
from services.scheduler import Scheduler
from services.stat_store import StatStore
from services.tuning import Tuning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DhikrProgress:
    category: str
    count: int
    in_set: int
    percent: int
    sets: int


@dataclass(frozen=True)
class PetSnapshot:
    """Read-only view of everything the presentation layer shows."""
    name: str
    emoji: str
    age: int
    stats: Dict[str, float]
    mood: str
    alive: bool
    seconds_until_decay: int
    dhikr: Tuple[DhikrProgress, ...]
    prayers: Dict[str, bool]
    blocked_dhikr: Optional[str]
    achievements: Tuple[str, ...]
    has_max_stats: bool
    learning: Dict[str, int]
    last_action_message: Optional[str]
    is_setup_complete: bool


class PetController:
    """
    Application-level owner of the simulation.

    Builds the stat store and the engines around one scheduler, loads each
    record from its repository at startup (seeding a new pet when nothing
    usable is saved), saves a record after every change to it, and turns
    mood and liveness changes into feedback events.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        feedback: Optional[Feedback] = None,
        repos: Optional[Dict[str, JsonRepository]] = None,
    ) -> None:
        self.scheduler = scheduler
        self.feedback = feedback if feedback is not None else LogFeedback()
        self.repos = repos if repos is not None else {name: JsonRepository(name) for name in RECORD_NAMES}
        self.store = StatStore()
        self.activity = ActivityEngine(self.store, scheduler, self.feedback)
        self.learning = LearningTrack(
            self.store, scheduler, self.feedback, announce=self.activity.announce
        )
        self.decay = DecayScheduler(self.store, scheduler)
        self._last_mood = self.store.mood
        self._was_alive = self.store.is_alive
        self._wired = False

    # ---------- Startup ----------
    def load_or_seed(self) -> bool:
        """
        Load saved records, seeding a fresh pet when none is usable.

        Returns:
            bool: True if a saved pet was restored.
        """
        restored = self._load_pet()
        self._load_into("activity", self.activity)
        self._load_into("learning", self.learning)
        if not restored:
            self.store.reset(self.scheduler.now())
        self._last_mood = self.store.mood
        self._was_alive = self.store.is_alive
        self._wire()
        if self.store.is_alive:
            self.decay.start()
        self.save_all()
        return restored

    def _load_pet(self) -> bool:
        data = self.repos["pet"].load()
        if not data:
            return False
        try:
            self.store.from_dict(data)
        except (ValueError, TypeError, KeyError):
            logger.warning("saved pet record is invalid; starting a new pet", exc_info=True)
            return False
        return True

    def _load_into(self, name: str, target) -> None:
        data = self.repos[name].load()
        if not data:
            return
        try:
            target.from_dict(data)
        except (ValueError, TypeError, KeyError):
            logger.warning("saved %s record is invalid; using defaults", name, exc_info=True)
            target.reset()

    def _wire(self) -> None:
        if self._wired:
            return
        self.store.add_observer(self._on_pet_change)
        self.activity.add_observer(lambda: self._save("activity"))
        self.learning.add_observer(lambda: self._save("learning"))
        self._wired = True

    # ---------- Observers ----------
    def _on_pet_change(self) -> None:
        mood = self.store.mood
        steps = mood_improvement(self._last_mood, mood)
        if steps > 0:
            emit(self.feedback, CELEBRATE, previous=self._last_mood, mood=mood, level=steps)
        self._last_mood = mood

        if self._was_alive and not self.store.is_alive:
            self.decay.stop()
            self.activity.teardown()
            emit(self.feedback, DEATH, name=self.store.details.name, age=self.store.details.age)
        self._was_alive = self.store.is_alive
        self._save("pet")

    # ---------- Persistence ----------
    def _payload(self, name: str) -> Dict[str, object]:
        if name == "pet":
            return self.store.to_dict()
        if name == "activity":
            return self.activity.to_dict()
        return self.learning.to_dict()

    def _save(self, name: str) -> bool:
        return self.repos[name].save(self._payload(name))

    def save_all(self) -> bool:
        results = [self._save(name) for name in RECORD_NAMES]
        return all(results)

    # ---------- Resets ----------
    def reset_pet(self, name: str = Tuning.DEFAULT_NAME, emoji: str = Tuning.DEFAULT_EMOJI) -> None:
        """
        Replace the pet with a new one: initial stats, zero counts, no
        prayers, no block. Study progress is kept.
        """
        self.decay.stop()
        self.activity.reset()
        self.store.reset(self.scheduler.now(), name=name, emoji=emoji)
        self.store.set_setup_complete(True)
        self.decay.start()

    def reset_all(self) -> None:
        """Delete every saved record and start over with defaults."""
        for repo in self.repos.values():
            repo.clear()
        self.learning.reset()
        self.reset_pet()
        logger.info("all data reset")

    def teardown(self) -> None:
        """Cancel every timer and write the final state."""
        self.decay.stop()
        self.activity.teardown()
        self.save_all()

    # ---------- Produced interface ----------
    def snapshot(self) -> PetSnapshot:
        stats = self.store.stats
        details = self.store.details
        dhikr = tuple(
            DhikrProgress(
                category=category,
                count=self.activity.dhikr_count(category),
                in_set=self.activity.dhikr_progress(category),
                percent=self.activity.dhikr_progress_pct(category),
                sets=self.activity.completed_sets(category),
            )
            for category in Tuning.DHIKR_STAT
        )
        return PetSnapshot(
            name=details.name,
            emoji=details.emoji,
            age=details.age,
            stats=stats.to_dict(),
            mood=self.store.mood,
            alive=self.store.is_alive,
            seconds_until_decay=self.decay.seconds_until_next_decay(),
            dhikr=dhikr,
            prayers=dict(self.activity.record.prayer_status),
            blocked_dhikr=self.activity.blocked_dhikr,
            achievements=tuple(evaluate_achievements(stats, details.age, self.store.achievements)),
            has_max_stats=has_max_stats(stats),
            learning=dict(self.learning.record.progress),
            last_action_message=self.activity.record.last_action_message,
            is_setup_complete=self.store.record.is_setup_complete,
        )
