from __future__ import annotations

import asyncio
import logging
import queue
import threading
import time
from typing import List, Optional, Tuple

from tailmon.alarm import AlarmEngine
from tailmon.config import MonitorConfig
from tailmon.errors import ConfigurationError, ParseError, TickError
from tailmon.models import AlertEvent, LogRecord, ParseFailure
from tailmon.parser import parse_line
from tailmon.stats import StatsAggregator
from tailmon.store import RecordStore
from tailmon.tail import TailHandle, start_tail_thread

logger = logging.getLogger(__name__)

LINE_WAIT_S = 0.25


class LogMonitor:
    """
    Owns the retention window, the hit counters, the alert history and the
    parse error log. Lines and ticks are applied one at a time under a single
    lock; the query methods return copies and never raise.
    """

    def __init__(self, config: MonitorConfig):
        if not config.log_file_path:
            raise ConfigurationError("empty log file path")
        if config.retention_seconds <= 0 or config.alarm_threshold <= 0 or config.tick_interval_ms <= 0:
            raise ConfigurationError("retention, threshold and tick interval must be positive")
        self.config = config
        self.store = RecordStore(ignore_timestamp=config.ignore_timestamp)
        self.stats = StatsAggregator()
        self.alarm = AlarmEngine(threshold=config.alarm_threshold)
        self.tick_errors = 0
        self.started_at: Optional[float] = None
        self._last_processed_at = 0.0

        self._errors: List[ParseFailure] = []
        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._tail: Optional[TailHandle] = None
        self._tasks: List[asyncio.Task] = []

    # ----------------------------
    # Ingestion
    # ----------------------------
    def handle_line(self, raw: str) -> Optional[LogRecord]:
        with self._lock:
            # never stamp earlier than the previous line, so pruning can pop from the left
            now = max(time.time(), self._last_processed_at)
            try:
                record = parse_line(raw, now=now)
            except ParseError as e:
                self._errors.append(ParseFailure(cause=e.cause, line=e.line))
                logger.debug("dropped line: %s", e)
                return None
            self._last_processed_at = now
            self.store.ingest(record)
            self.stats.record_hit(record.section, record.remote_user)
            return record

    def tick(self, now: Optional[float] = None) -> Optional[AlertEvent]:
        now = time.time() if now is None else now
        with self._lock:
            try:
                self.store.prune_older_than(now - self.config.retention_seconds)
                return self.alarm.evaluate(self.store.size(), now)
            except Exception as e:
                raise TickError(f"tick failed: {e}") from e

    def clear_cached_stats(self) -> None:
        self.stats.reset()

    reset_short_term_stats = clear_cached_stats

    # ----------------------------
    # Queries
    # ----------------------------
    def size(self) -> int:
        return self.store.size()

    def last_n(self, n: int) -> List[LogRecord]:
        return self.store.last_n(n)

    def top_sections(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        return self.stats.top_sections(n)

    def top_users(self, n: Optional[int] = None) -> List[Tuple[str, int]]:
        return self.stats.top_users(n)

    def total_hits(self) -> int:
        return self.stats.total_hits

    def alerts(self) -> List[AlertEvent]:
        """Most recent first."""
        return self.alarm.events()

    def alarm_active(self) -> bool:
        return self.alarm.active

    def errors(self) -> List[ParseFailure]:
        with self._lock:
            return list(self._errors)

    # ----------------------------
    # Lifecycle
    # ----------------------------
    @property
    def running(self) -> bool:
        return bool(self._tasks)

    async def start(self) -> None:
        if self._tasks:
            raise RuntimeError("monitor already started")
        self._stop.clear()
        self.started_at = time.time()
        self._tail = start_tail_thread(self.config.log_file_path, self.config.tail_from_start, self._stop)
        self._tasks = [
            asyncio.create_task(self._consume_lines(self._tail), name="tailmon-lines"),
            asyncio.create_task(self._tick_loop(), name="tailmon-tick"),
        ]
        logger.info(
            "monitoring %s (retention=%ss threshold=%d tick=%dms)",
            self.config.log_file_path,
            self.config.retention_seconds,
            self.config.alarm_threshold,
            self.config.tick_interval_ms,
        )

    async def stop(self) -> None:
        self._stop.set()
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._tail is not None:
            await asyncio.to_thread(self._tail.thread.join, 1.0)
            self._tail = None

    async def _consume_lines(self, handle: TailHandle) -> None:
        while not self._stop.is_set():
            try:
                line = await asyncio.to_thread(handle.q.get, True, LINE_WAIT_S)
            except queue.Empty:
                continue
            self.handle_line(line)

    async def _tick_loop(self) -> None:
        interval = self.config.tick_interval_ms / 1000.0
        while not self._stop.is_set():
            try:
                self.tick()
            except TickError:
                self.tick_errors += 1
                logger.exception("tick failed (%d so far)", self.tick_errors)
            await asyncio.sleep(interval)
