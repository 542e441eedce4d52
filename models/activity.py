from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from services.tuning import Tuning


def _initial_prayers() -> Dict[str, bool]:
    return {slot: False for slot in Tuning.PRAYER_SLOTS}


@dataclass
class ActivityRecord:
    """
    Devotional activity owned by the activity engine.

    Fields:
        dhikr_counts: Category name -> total repetitions (non-negative).
        prayer_status: Prayer slot -> completed today.
        blocked_dhikr: Category in set-completion cooldown, if any.
        last_action_message: Short text describing the latest action.

    Enforces:
      - counts are non-negative integers
      - prayer_status always holds every known slot
    """
    dhikr_counts: Dict[str, int] = field(default_factory=dict)
    prayer_status: Dict[str, bool] = field(default_factory=_initial_prayers)
    blocked_dhikr: Optional[str] = None
    last_action_message: Optional[str] = None

    def __post_init__(self) -> None:
        for name, count in self.dhikr_counts.items():
            if not isinstance(count, int) or count < 0:
                raise ValueError(f"dhikr count for {name!r} must be a non-negative integer.")
        prayers = _initial_prayers()
        prayers.update({k: bool(v) for k, v in self.prayer_status.items() if k in prayers})
        self.prayer_status = prayers

    def count(self, category: str) -> int:
        """Return the repetitions for a category; unknown categories read as 0."""
        return self.dhikr_counts.get(category, 0)

    def prayed(self, slot: str) -> bool:
        """Return the completion flag for a slot; unknown slots read as False."""
        return self.prayer_status.get(slot, False)

    def to_dict(self) -> Dict[str, object]:
        return {
            "dhikr_counts": dict(self.dhikr_counts),
            "prayer_status": dict(self.prayer_status),
            "blocked_dhikr": self.blocked_dhikr,
            "last_action_message": self.last_action_message,
        }

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "ActivityRecord":
        """
        Deserialize from a dict produced by to_dict().

        A stored block is dropped: nothing would be left to release it.
        """
        counts = {str(k): int(v) for k, v in dict(d.get("dhikr_counts", {})).items()}  # type: ignore[arg-type]
        prayers = {str(k): bool(v) for k, v in dict(d.get("prayer_status", {})).items()}  # type: ignore[arg-type]
        message = d.get("last_action_message")
        return ActivityRecord(
            dhikr_counts=counts,
            prayer_status=prayers,
            blocked_dhikr=None,
            last_action_message=None if message is None else str(message),
        )


@dataclass
class LearningRecord:
    """
    Study progress per subject, 0–100, and the time each was last studied.
    """
    progress: Dict[str, int] = field(
        default_factory=lambda: {s: 0 for s in Tuning.STUDY_SUBJECTS}
    )
    last_study: Dict[str, float] = field(
        default_factory=lambda: {s: 0.0 for s in Tuning.STUDY_SUBJECTS}
    )

    def __post_init__(self) -> None:
        for subject, value in self.progress.items():
            if not (0 <= value <= Tuning.STUDY_PROGRESS_MAX):
                raise ValueError(f"progress for {subject!r} must be in [0, 100].")

    def to_dict(self) -> Dict[str, object]:
        return {"progress": dict(self.progress), "last_study": dict(self.last_study)}

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "LearningRecord":
        """Deserialize from a dict produced by to_dict(); unknown subjects are dropped."""
        progress = {s: 0 for s in Tuning.STUDY_SUBJECTS}
        last_study = {s: 0.0 for s in Tuning.STUDY_SUBJECTS}
        for k, v in dict(d.get("progress", {})).items():  # type: ignore[arg-type]
            if k in progress:
                progress[k] = int(v)
        for k, v in dict(d.get("last_study", {})).items():  # type: ignore[arg-type]
            if k in last_study:
                last_study[k] = float(v)
        return LearningRecord(progress=progress, last_study=last_study)
