from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List, Optional

from tailmon.models import LogRecord


class RecordStore:
    """
    Records currently inside the retention window, in the order they were tailed.

    With ignore_timestamp the effective timestamp is processed_at, which the
    monitor never stamps backwards, so pruning pops from the left. Otherwise
    time_local decides and replayed logs can be out of order, so the whole
    window is filtered.
    """

    def __init__(self, ignore_timestamp: bool = True):
        self.ignore_timestamp = ignore_timestamp
        self._records: Deque[LogRecord] = deque()
        self._lock = threading.Lock()

    def effective_timestamp(self, record: LogRecord) -> Optional[float]:
        if self.ignore_timestamp:
            return record.processed_at
        if record.time_local is None:
            return None
        return record.time_local.timestamp()

    def _is_expired(self, record: LogRecord, cutoff: float) -> bool:
        ts = self.effective_timestamp(record)
        return ts is not None and ts < cutoff

    def ingest(self, record: LogRecord) -> None:
        with self._lock:
            self._records.append(record)

    def prune_older_than(self, cutoff: float) -> int:
        with self._lock:
            before = len(self._records)
            if self.ignore_timestamp:
                while self._records and self._is_expired(self._records[0], cutoff):
                    self._records.popleft()
            else:
                kept = [r for r in self._records if not self._is_expired(r, cutoff)]
                if len(kept) != before:
                    self._records = deque(kept)
            return before - len(self._records)

    def size(self) -> int:
        with self._lock:
            return len(self._records)

    def last_n(self, n: int) -> List[LogRecord]:
        with self._lock:
            if not self._records:
                # renderers always get one row to draw
                return [LogRecord.placeholder()]
            if n <= 0:
                return []
            return list(self._records)[-n:]
