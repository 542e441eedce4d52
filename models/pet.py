from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from services.tuning import Tuning, clamp


@dataclass
class PetStats:
    """
    The four bounded well-being meters of the pet.

    Fields:
        health: Physical condition, 0–100.
        spirituality: Devotional condition, 0–100.
        energy: Stamina, 0–100.
        happiness: Contentment, 0–100.

    Construction stores values as given; merged() and from_dict() are the
    paths that clamp.
    """
    health: float = Tuning.INITIAL_STAT
    spirituality: float = Tuning.INITIAL_STAT
    energy: float = Tuning.INITIAL_STAT
    happiness: float = Tuning.INITIAL_STAT

    def __post_init__(self) -> None:
        for name in Tuning.STAT_NAMES:
            setattr(self, name, float(getattr(self, name)))

    def get(self, name: str) -> float:
        """Return a stat by name; unknown names read as 0."""
        if name not in Tuning.STAT_NAMES:
            return 0.0
        return getattr(self, name)

    def merged(self, updates: Dict[str, float]) -> "PetStats":
        """
        Return a copy with the supplied stats replaced by their clamped values.

        Keys outside the four stat names are ignored.
        """
        values = self.to_dict()
        for key, value in updates.items():
            if key in values:
                values[key] = clamp(float(value))
        return PetStats(**values)

    def to_dict(self) -> Dict[str, float]:
        """Serialize to a plain dict suitable for JSON storage."""
        return {name: getattr(self, name) for name in Tuning.STAT_NAMES}

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "PetStats":
        """
        Deserialize from a dict produced by to_dict().

        Missing stats use the initial value; stored ones are clamped.
        """
        return PetStats(**{
            name: clamp(float(d.get(name, Tuning.INITIAL_STAT)))  # type: ignore[arg-type]
            for name in Tuning.STAT_NAMES
        })


@dataclass
class PetDetails:
    """
    Identity and lifecycle metadata.

    Fields:
        name: Display name.
        emoji: Glyph shown for the pet.
        age: Whole hours of liveness (non-negative).
        last_decay: Epoch seconds of the latest decay or user action.
    """
    name: str = Tuning.DEFAULT_NAME
    emoji: str = Tuning.DEFAULT_EMOJI
    age: int = 0
    last_decay: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.age, int) or self.age < 0:
            raise ValueError("age must be a non-negative integer.")

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "emoji": self.emoji,
            "age": self.age,
            "last_decay": float(self.last_decay),
        }

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "PetDetails":
        required = {"name", "emoji", "age", "last_decay"}
        missing = required - d.keys()
        if missing:
            raise ValueError(f"Missing fields: {sorted(missing)}")
        return PetDetails(
            name=str(d["name"]),
            emoji=str(d["emoji"]),
            age=int(d["age"]),  # type: ignore[arg-type]
            last_decay=float(d["last_decay"]),  # type: ignore[arg-type]
        )


@dataclass
class PetRecord:
    """
    Everything the stat store persists for one pet.

    Mood and liveness are derived from stats; mood is stored for the
    presentation layer, liveness is recomputed on load.
    """
    stats: PetStats = field(default_factory=PetStats)
    details: PetDetails = field(default_factory=PetDetails)
    achievements: List[str] = field(default_factory=list)
    mood: str = "content"
    is_setup_complete: bool = True
    last_interaction: Optional[float] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "stats": self.stats.to_dict(),
            "details": self.details.to_dict(),
            "achievements": list(self.achievements),
            "mood": self.mood,
            "is_setup_complete": self.is_setup_complete,
            "last_interaction": self.last_interaction,
        }

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "PetRecord":
        """
        Deserialize from a dict produced by to_dict().

        Achievements are de-duplicated preserving order.
        """
        if "stats" not in d or "details" not in d:
            raise ValueError("Pet record requires 'stats' and 'details'.")
        unique: List[str] = []
        for label in list(d.get("achievements", [])):  # type: ignore[arg-type]
            if str(label) not in unique:
                unique.append(str(label))
        last = d.get("last_interaction")
        return PetRecord(
            stats=PetStats.from_dict(dict(d["stats"])),  # type: ignore[arg-type]
            details=PetDetails.from_dict(dict(d["details"])),  # type: ignore[arg-type]
            achievements=unique,
            mood=str(d.get("mood", "content")),
            is_setup_complete=bool(d.get("is_setup_complete", True)),
            last_interaction=None if last is None else float(last),  # type: ignore[arg-type]
        )
