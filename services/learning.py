# services/learning.py
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from models.activity import LearningRecord
from services.feedback import CLICK, Feedback, emit
from services.scheduler import Scheduler
from services.stat_store import StatPort
from services.tuning import Tuning

logger = logging.getLogger(__name__)


class LearningTrack:
    """
    Study sessions per subject and the mastery achievements they unlock.

    Each subject can be studied once per STUDY_COOLDOWN_S. A session costs
    energy, lifts spirituality and happiness, and adds progress; reaching
    100 stores "<subject> Mastery" on the pet permanently. When an announce
    callback is given it receives "Studied: <subject>" after each session.
    """

    def __init__(
        self,
        stats: StatPort,
        scheduler: Scheduler,
        feedback: Optional[Feedback] = None,
        record: Optional[LearningRecord] = None,
        announce: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.stats = stats
        self.scheduler = scheduler
        self.feedback = feedback
        self.record = record if record is not None else LearningRecord()
        self.announce = announce
        self._observers: List[Callable[[], None]] = []

    def add_observer(self, cb: Callable[[], None]) -> None:
        if cb not in self._observers:
            self._observers.append(cb)

    def _notify(self) -> None:
        for cb in list(self._observers):
            try:
                cb()
            except Exception:
                logger.warning("learning observer failed", exc_info=True)

    def progress(self, subject: str) -> int:
        return self.record.progress.get(subject, 0)

    def can_study(self, subject: str, now: Optional[float] = None) -> bool:
        if subject not in Tuning.STUDY_SUBJECTS:
            return False
        now_ts = self.scheduler.now() if now is None else float(now)
        return now_ts - self.record.last_study.get(subject, 0.0) >= Tuning.STUDY_COOLDOWN_S

    def study(self, subject: str) -> bool:
        """
        Run one study session.

        Returns:
            bool: True if the session happened, False if the subject is
            unknown, still cooling down, or the pet is dead.
        """
        if not self.stats.is_alive:
            return False
        now = self.scheduler.now()
        if not self.can_study(subject, now):
            logger.debug("study of %r skipped", subject)
            return False

        current = self.stats.stats
        self.stats.update_stats({
            name: current.get(name) + delta for name, delta in Tuning.STUDY_EFFECT.items()
        })
        self.stats.mark_interaction(now)

        new_progress = min(Tuning.STUDY_PROGRESS_MAX, self.progress(subject) + Tuning.STUDY_PROGRESS_STEP)
        self.record.progress[subject] = new_progress
        self.record.last_study[subject] = now
        if new_progress >= Tuning.STUDY_PROGRESS_MAX:
            self.stats.add_achievement(f"{subject} Mastery")
        if self.announce is not None:
            self.announce(f"Studied: {subject}")
        emit(self.feedback, CLICK, action="study", subject=subject)
        self._notify()
        return True

    def reset_daily_learning(self) -> None:
        """Lift every study cooldown; progress is kept."""
        self.record.last_study = {s: 0.0 for s in Tuning.STUDY_SUBJECTS}
        self._notify()

    def reset(self) -> None:
        self.record = LearningRecord()
        self._notify()

    def to_dict(self) -> Dict[str, object]:
        return self.record.to_dict()

    def from_dict(self, d: Dict[str, object]) -> None:
        self.record = LearningRecord.from_dict(d)
        self._notify()
