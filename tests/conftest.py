from datetime import datetime, timedelta, timezone

import pytest

from tailmon.config import build_config
from tailmon.loadgen import clf_date
from tailmon.monitor import LogMonitor

BASE = datetime(2018, 5, 9, 16, 0, 0, tzinfo=timezone.utc)


def make_line(user="james", request="GET /report HTTP/1.0", at=None, status=200, size=123):
    at = at or BASE
    return f'127.0.0.1 - {user} [{clf_date(at)}] "{request}" {status} {size}'


def at_offset(seconds):
    return BASE + timedelta(seconds=seconds)


TEST_LINES = [
    make_line("james", "GET /report HTTP/1.0", size=123),
    make_line("jill", "GET /api/user HTTP/1.0", size=234),
    make_line("frank", "POST /api/user HTTP/1.0", size=34),
    make_line("mary", "POST /api/user HTTP/1.0", status=503, size=12),
]


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "access.log"
    path.write_text("")
    return path


@pytest.fixture
def make_monitor(log_file):
    def factory(**overrides):
        values = {"log_file_path": str(log_file)}
        values.update(overrides)
        return LogMonitor(build_config(**values))
    return factory
