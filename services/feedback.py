"""
Feedback port for haptic/audio side effects.

The engine announces events; whatever implements Feedback turns them into
vibration or sound. Delivery is fire-and-forget: emit() never lets a
failing implementation reach engine state.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

CLICK = "click"
COMPLETION = "completion"
PRAYER = "prayer"
CELEBRATE = "celebrate"
DEATH = "death"


class Feedback(Protocol):
    def trigger(self, event: str, **info: Any) -> None:
        ...


class LogFeedback:
    """Default sink: records events in the log only."""

    def trigger(self, event: str, **info: Any) -> None:
        logger.debug("feedback %s %s", event, info)


class RecordingFeedback:
    """Keeps every event in memory; handy for headless runs and tests."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, dict]] = []

    def trigger(self, event: str, **info: Any) -> None:
        self.events.append((event, dict(info)))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]


def emit(feedback: Optional[Feedback], event: str, **info: Any) -> None:
    """Deliver an event, logging and discarding any failure."""
    if feedback is None:
        return
    try:
        feedback.trigger(event, **info)
    except Exception:
        logger.warning("feedback %r failed", event, exc_info=True)
