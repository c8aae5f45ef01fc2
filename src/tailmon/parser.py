"""
Common access-log line parsing.

    127.0.0.1 - jill [09/May/2018:16:00:39 +0000] "GET /api/user HTTP/1.0" 200 234

Anything after the size field (referrer, user agent of the combined format) is
accepted and ignored.
"""
from __future__ import annotations

import re
import time
from datetime import datetime
from typing import Optional

from tailmon.errors import ParseError
from tailmon.models import LogRecord

CLF_TIME_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

_ACCESS_LINE_RE = re.compile(
    r"""
    ^(?P<remote_addr>\S+)\s
    (?P<ident>\S+)\s
    (?P<remote_user>\S+)\s
    \[(?P<time_local>[^\]]+)\]\s
    "(?P<request>[^"]*)"\s
    (?P<status>\d{3})\s
    (?P<body_bytes>\d+|-)
    (?:\s.*)?$
    """,
    re.VERBOSE
)


def section_of(path: str) -> str:
    """
    Everything up to (not including) the first '/' at index 1 or later.
    Works on raw indices, so "report/test/api" -> "report" and "//x" -> "/".
    """
    for i in range(1, len(path)):
        if path[i] == "/":
            return path[:i]
    return path


def parse_clf_time(value: str) -> datetime:
    return datetime.strptime(value, CLF_TIME_FORMAT)


def parse_line(raw: str, now: Optional[float] = None) -> LogRecord:
    line = raw.rstrip("\r\n")
    m = _ACCESS_LINE_RE.match(line)
    if not m:
        raise ParseError("line does not match the access log format", line)

    try:
        time_local = parse_clf_time(m.group("time_local"))
    except ValueError:
        raise ParseError("invalid time_local", line) from None

    request = m.group("request").split()
    if len(request) < 2:
        raise ParseError("request line needs a method and a path", line)
    method, path = request[0], request[1]

    body_bytes = m.group("body_bytes")
    return LogRecord(
        remote_addr=m.group("remote_addr"),
        remote_user=m.group("remote_user"),
        time_local=time_local,
        method=method,
        path=path,
        section=section_of(path),
        status_code=int(m.group("status")),
        body_bytes=0 if body_bytes == "-" else int(body_bytes),
        processed_at=time.time() if now is None else now,
        raw=line,
    )
