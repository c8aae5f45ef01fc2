from __future__ import annotations

import logging
import os
import queue
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)

POLL_S = 0.2
REOPEN_S = 1.0
MAX_PENDING_LINES = 10000


@dataclass
class TailHandle:
    thread: threading.Thread
    q: "queue.Queue[str]"
    stop: threading.Event


def _follow(path: str, from_start: bool, q: "queue.Queue[str]", stop: threading.Event) -> None:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        if not from_start:
            f.seek(0, os.SEEK_END)
        partial = ""
        while not stop.is_set():
            line = f.readline()
            if not line:
                if os.stat(path).st_size < f.tell():
                    logger.info("%s was truncated, reading from the start", path)
                    f.seek(0)
                    partial = ""
                    continue
                stop.wait(POLL_S)
                continue
            if not line.endswith("\n"):
                # writer is mid-line, wait for the rest
                partial += line
                continue
            try:
                q.put_nowait(partial + line)
            except queue.Full:
                # drop lines under pressure
                pass
            partial = ""


def start_tail_thread(path: str, from_start: bool, stop: threading.Event) -> TailHandle:
    q: "queue.Queue[str]" = queue.Queue(maxsize=MAX_PENDING_LINES)

    def worker():
        # a file that shows up or comes back later is read from its start
        first = True
        while not stop.is_set():
            try:
                _follow(path, from_start or not first, q, stop)
            except OSError as e:
                logger.warning("cannot follow %s: %s", path, e)
                stop.wait(REOPEN_S)
            first = False

    t = threading.Thread(target=worker, name=f"tail:{path}", daemon=True)
    t.start()
    return TailHandle(thread=t, q=q, stop=stop)
