from __future__ import annotations

import threading
from typing import Dict, List, Optional, Tuple


def _top(counts: Dict[str, int], n: Optional[int]) -> List[Tuple[str, int]]:
    # sorted() is stable and dicts keep insertion order, so ties stay first-seen
    items = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    if n is None:
        return items
    return items[:max(n, 0)]


class StatsAggregator:
    """Hit counters since the last reset, independent of the retention window."""

    def __init__(self):
        self._section_hits: Dict[str, int] = {}
        self._user_hits: Dict[str, int] = {}
        self._total_hits = 0
        self._lock = threading.Lock()

    def record_hit(self, section: str, user: str) -> None:
        with self._lock:
            self._section_hits[section] = self._section_hits.get(section, 0) + 1
            self._user_hits[user] = self._user_hits.get(user, 0) + 1
            self._total_hits += 1

    def top_sections(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        with self._lock:
            return _top(self._section_hits, n)

    def top_users(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        with self._lock:
            return _top(self._user_hits, n)

    @property
    def total_hits(self) -> int:
        with self._lock:
            return self._total_hits

    def reset(self) -> None:
        with self._lock:
            self._section_hits = {}
            self._user_hits = {}
            self._total_hits = 0
