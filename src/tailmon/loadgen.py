from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Optional

from tailmon.parser import CLF_TIME_FORMAT

TEST_USERS = ["jon", "jane", "bob", "mary"]
TEST_PATHS = ["report/test/api", "/users/create", "/users/delete", "api/user/create", "api/user/delete"]


def clf_date(dt: Optional[datetime] = None) -> str:
    dt = dt or datetime.now(timezone.utc).astimezone()
    return dt.strftime(CLF_TIME_FORMAT)


def make_test_line(dt: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    user = rng.choice(TEST_USERS)
    path = rng.choice(TEST_PATHS)
    return f'127.0.0.1 - {user} [{clf_date(dt)}] "GET {path} HTTP/1.0" 200 123\n'


def append_test_lines(path: str, count: int, rng: Optional[random.Random] = None) -> int:
    with open(path, "a", encoding="utf-8") as f:
        for _ in range(count):
            f.write(make_test_line(rng=rng))
    return count
