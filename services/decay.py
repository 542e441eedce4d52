# services/decay.py
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional

from services.scheduler import ScheduledEvent, Scheduler
from services.stat_store import StatStore
from services.tuning import Tuning

logger = logging.getLogger(__name__)


class DecayScheduler:
    """
    Ages the pet and drains its stats over time.

    Two interval events run on the shared scheduler:
      - age: every AGE_INTERVAL_S, age += 1.
      - decay poll: every DECAY_POLL_S, if at least DECAY_THRESHOLD_S have
        passed since details.last_decay, every stat drops by DECAY_AMOUNT
        (floored at 0) and last_decay moves to now.
    Both are no-ops while the pet is dead. User actions move last_decay
    forward, which postpones the next drain.
    """

    def __init__(self, store: StatStore, scheduler: Scheduler) -> None:
        self.store = store
        self.scheduler = scheduler
        self._age_event: Optional[ScheduledEvent] = None
        self._poll_event: Optional[ScheduledEvent] = None

    @property
    def running(self) -> bool:
        return self._poll_event is not None and self._poll_event.active

    def start(self) -> None:
        """Register both periodic processes; calling twice has no extra effect."""
        if self.running:
            return
        self._age_event = self.scheduler.schedule_interval(self.age_tick, Tuning.AGE_INTERVAL_S)
        self._poll_event = self.scheduler.schedule_interval(self.decay_tick, Tuning.DECAY_POLL_S)

    def stop(self) -> None:
        for event in (self._age_event, self._poll_event):
            if event is not None:
                event.cancel()
        self._age_event = None
        self._poll_event = None

    def age_tick(self) -> None:
        if not self.store.is_alive:
            return
        details = self.store.details
        self.store.set_pet_details(replace(details, age=details.age + 1))

    def decay_tick(self) -> bool:
        """
        Apply one decay step if the threshold has elapsed.

        Returns:
            bool: True if stats were drained.
        """
        if not self.store.is_alive:
            return False
        now = self.scheduler.now()
        if now - self.store.details.last_decay < Tuning.DECAY_THRESHOLD_S:
            return False
        stats = self.store.stats
        self.store.update_stats({
            name: max(Tuning.STAT_MIN, stats.get(name) - Tuning.DECAY_AMOUNT)
            for name in Tuning.STAT_NAMES
        })
        self.store.set_pet_details(replace(self.store.details, last_decay=now))
        logger.debug("decay applied at %.3f: %s", now, self.store.stats.to_dict())
        return True

    def seconds_until_next_decay(self, now: Optional[float] = None) -> int:
        """Whole seconds until the decay threshold is reached, never negative."""
        now_ts = self.scheduler.now() if now is None else float(now)
        remaining = Tuning.DECAY_THRESHOLD_S - (now_ts - self.store.details.last_decay)
        return max(0, math.ceil(remaining))
