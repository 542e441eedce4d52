# services/activity.py
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Dict, List, Optional

from models.activity import ActivityRecord
from services.feedback import CLICK, COMPLETION, PRAYER, Feedback, emit
from services.scheduler import ScheduledEvent, Scheduler
from services.stat_store import StatPort
from services.tuning import Tuning

logger = logging.getLogger(__name__)


class GateState(Enum):
    IDLE = auto()
    BLOCKED = auto()     # cooldown after a completed set of 33
    DEBOUNCED = auto()   # short guard after an ordinary repetition


class SetCompletionGate:
    """
    Accept/reject state machine for dhikr taps.

    IDLE -> BLOCKED -> IDLE after SET_COOLDOWN_S
    IDLE -> DEBOUNCED -> IDLE after TAP_DEBOUNCE_S

    Exits are scheduled on the shared scheduler, so they happen at exact
    virtual times under a ManualClock. Entering a state replaces any
    pending exit.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_release: Optional[Callable[[], None]] = None,
        cooldown_s: float = Tuning.SET_COOLDOWN_S,
        debounce_s: float = Tuning.TAP_DEBOUNCE_S,
    ) -> None:
        self.scheduler = scheduler
        self.on_release = on_release
        self.cooldown_s = cooldown_s
        self.debounce_s = debounce_s
        self.state = GateState.IDLE
        self._exit: Optional[ScheduledEvent] = None

    def accepts(self) -> bool:
        return self.state is GateState.IDLE

    def block(self) -> None:
        self._enter(GateState.BLOCKED, self.cooldown_s)

    def debounce(self) -> None:
        self._enter(GateState.DEBOUNCED, self.debounce_s)

    def _enter(self, state: GateState, duration: float) -> None:
        self._cancel_exit()
        self.state = state
        self._exit = self.scheduler.schedule_once(self._release, duration)

    def _release(self) -> None:
        self.state = GateState.IDLE
        self._exit = None
        if self.on_release is not None:
            self.on_release()

    def _cancel_exit(self) -> None:
        if self._exit is not None:
            self._exit.cancel()
            self._exit = None

    def reset(self) -> None:
        """Drop any block or debounce immediately without firing on_release."""
        self._cancel_exit()
        self.state = GateState.IDLE


class ActivityEngine:
    """
    Dhikr counting, prayer flags and rest, applied to the pet through a StatPort.

    Every accepted action submits absolute stat targets to the port and
    stamps the interaction (which postpones decay). Actions are silently
    ignored (return False) while the pet is dead, while the gate rejects a
    tap, or for unknown categories and slots.
    """

    def __init__(
        self,
        stats: StatPort,
        scheduler: Scheduler,
        feedback: Optional[Feedback] = None,
        record: Optional[ActivityRecord] = None,
    ) -> None:
        self.stats = stats
        self.scheduler = scheduler
        self.feedback = feedback
        self.record = record if record is not None else ActivityRecord()
        self.gate = SetCompletionGate(scheduler, on_release=self._on_gate_release)
        self._observers: List[Callable[[], None]] = []

    # --- Observers ---
    def add_observer(self, cb: Callable[[], None]) -> None:
        if cb not in self._observers:
            self._observers.append(cb)

    def _notify(self) -> None:
        for cb in list(self._observers):
            try:
                cb()
            except Exception:
                logger.warning("activity observer failed", exc_info=True)

    def _on_gate_release(self) -> None:
        if self.record.blocked_dhikr is not None:
            logger.debug("%s unblocked", self.record.blocked_dhikr)
            self.record.blocked_dhikr = None
            self._notify()

    # --- Queries ---
    @property
    def blocked_dhikr(self) -> Optional[str]:
        return self.record.blocked_dhikr

    def dhikr_count(self, category: str) -> int:
        return self.record.count(category)

    def dhikr_progress(self, category: str) -> int:
        """Repetitions within the current set of 33."""
        return self.record.count(category) % Tuning.DHIKR_SET_SIZE

    def dhikr_progress_pct(self, category: str) -> int:
        return (self.dhikr_progress(category) * 100) // Tuning.DHIKR_SET_SIZE

    def completed_sets(self, category: str) -> int:
        return self.record.count(category) // Tuning.DHIKR_SET_SIZE

    def is_prayed(self, slot: str) -> bool:
        return self.record.prayed(slot)

    # --- Helpers ---
    def _apply(self, bonus: Dict[str, float], sign: float = 1.0) -> None:
        """Submit current + sign * bonus for each stat in bonus."""
        current = self.stats.stats
        self.stats.update_stats({
            name: current.get(name) + sign * amount for name, amount in bonus.items()
        })

    def _message(self, text: str) -> None:
        self.record.last_action_message = text

    def announce(self, text: str) -> None:
        """Show text as the latest action message for actions run elsewhere."""
        self._message(text)
        self._notify()

    # --- Dhikr ---
    def perform_dhikr(self, category: str) -> bool:
        """
        Record one repetition of a dhikr category.

        Every 33rd repetition of a category earns the set bonus and blocks
        all dhikr for the cooldown; other repetitions arm the tap debounce.

        Returns:
            bool: True if the repetition was accepted.
        """
        if category not in Tuning.DHIKR_STAT:
            logger.debug("unknown dhikr %r ignored", category)
            return False
        if not self.stats.is_alive:
            return False
        if self.record.blocked_dhikr is not None or not self.gate.accepts():
            logger.debug("dhikr %r rejected (gate %s)", category, self.gate.state.name)
            return False

        count = self.record.count(category) + 1
        self.record.dhikr_counts[category] = count

        bonus = {name: Tuning.DHIKR_BONUS for name in Tuning.STAT_NAMES}
        mapped = Tuning.DHIKR_STAT[category]
        bonus[mapped] += Tuning.DHIKR_TYPE_BONUS
        completed = count % Tuning.DHIKR_SET_SIZE == 0
        if completed:
            for name in Tuning.STAT_NAMES:
                bonus[name] += Tuning.SET_BONUS
            bonus[mapped] += Tuning.SET_TYPE_BONUS
        self._apply(bonus)
        self.stats.mark_interaction(self.scheduler.now())

        self._message(f"Recited: {category} ({count}x)")
        emit(self.feedback, CLICK, category=category, count=count)
        if completed:
            self.gate.block()
            self.record.blocked_dhikr = category
            logger.info("completed set %d of %s", count // Tuning.DHIKR_SET_SIZE, category)
            emit(self.feedback, COMPLETION, category=category, sets=count // Tuning.DHIKR_SET_SIZE)
        else:
            self.gate.debounce()
        self._notify()
        return True

    # --- Prayer ---
    def complete_prayer(self, slot: str) -> bool:
        """Mark a prayer slot done and apply the prayer bonus once."""
        if slot not in Tuning.PRAYER_SLOTS or not self.stats.is_alive:
            return False
        if self.record.prayed(slot):
            return False
        self.record.prayer_status[slot] = True
        self._apply(Tuning.PRAYER_BONUS)
        self.stats.mark_interaction(self.scheduler.now())
        self._message(f"Completed {slot} prayer")
        emit(self.feedback, PRAYER, slot=slot, completed=True)
        self._notify()
        return True

    def unmark_prayer(self, slot: str) -> bool:
        """Clear a completed prayer slot and take back exactly its bonus."""
        if slot not in Tuning.PRAYER_SLOTS or not self.stats.is_alive:
            return False
        if not self.record.prayed(slot):
            return False
        self.record.prayer_status[slot] = False
        self._apply(Tuning.PRAYER_BONUS, sign=-1.0)
        self.stats.mark_interaction(self.scheduler.now())
        self._message(f"Unmarked {slot} prayer")
        emit(self.feedback, PRAYER, slot=slot, completed=False)
        self._notify()
        return True

    def toggle_prayer(self, slot: str) -> bool:
        if self.record.prayed(slot):
            return self.unmark_prayer(slot)
        return self.complete_prayer(slot)

    # --- Rest ---
    def rest(self) -> bool:
        if not self.stats.is_alive:
            return False
        self._apply(Tuning.REST_BONUS)
        self.stats.mark_interaction(self.scheduler.now())
        self._message("Rested")
        emit(self.feedback, CLICK, action="rest")
        self._notify()
        return True

    # --- Resets ---
    def reset_daily_activities(self) -> None:
        """Clear prayer flags and the action message; stats and counts stay."""
        self.record.prayer_status = {slot: False for slot in Tuning.PRAYER_SLOTS}
        self.record.last_action_message = None
        self._notify()

    def reset(self) -> None:
        """Start over: zero counts, no prayers, nothing blocked or debounced."""
        self.gate.reset()
        self.record = ActivityRecord()
        self._notify()

    def teardown(self) -> None:
        self.gate.reset()
        self.record.blocked_dhikr = None

    # --- Serialization ---
    def to_dict(self) -> Dict[str, object]:
        return self.record.to_dict()

    def from_dict(self, d: Dict[str, object]) -> None:
        self.gate.reset()
        self.record = ActivityRecord.from_dict(d)
        self._notify()
