"""
High traffic alarm.

The signal is the number of records inside the retention window, checked once
per tick against an absolute threshold:

    NORMAL --hits >= T--> BREACH     append a breach event, start tracking the peak
    BREACH --hits >= T--> BREACH     peak = max(peak, hits)
    BREACH --hits <  T--> NORMAL     finalize the breach hits to the peak, append a recovery

The breach event's hits is the only field ever rewritten, and only once, when
its recovery is appended.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import List, Optional

from tailmon.models import AlertEvent, AlertType

logger = logging.getLogger(__name__)

NO_PEAK = -1


class AlarmEngine:
    def __init__(self, threshold: int):
        self.threshold = threshold
        self.peak_hits = NO_PEAK
        self._events: List[AlertEvent] = []
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        with self._lock:
            return self._is_active()

    def _is_active(self) -> bool:
        return bool(self._events) and self._events[-1].type == AlertType.BREACH

    def events(self) -> List[AlertEvent]:
        """Alert history, most recent first."""
        with self._lock:
            return list(reversed(self._events))

    def evaluate(self, current_hits: int, now: Optional[float] = None) -> Optional[AlertEvent]:
        now = time.time() if now is None else now
        with self._lock:
            if self._is_active():
                if current_hits < self.threshold:
                    return self._recover(current_hits, now)
                self.peak_hits = max(self.peak_hits, current_hits)
                return None
            if current_hits >= self.threshold:
                return self._breach(current_hits, now)
            return None

    def _breach(self, hits: int, now: float) -> AlertEvent:
        event = AlertEvent(type=AlertType.BREACH, timestamp=now, hits=hits)
        self._events.append(event)
        self.peak_hits = hits
        logger.warning("high traffic alert: hits=%d threshold=%d", hits, self.threshold)
        return event

    def _finalize_breach(self) -> None:
        pending = self._events[-1]
        self._events[-1] = pending.model_copy(update={"hits": self.peak_hits})
        self.peak_hits = NO_PEAK

    def _recover(self, hits: int, now: float) -> AlertEvent:
        peak = self.peak_hits
        self._finalize_breach()
        event = AlertEvent(type=AlertType.RECOVERY, timestamp=now, hits=hits)
        self._events.append(event)
        logger.info("traffic back to normal: hits=%d peak=%d", hits, peak)
        return event
