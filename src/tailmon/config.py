from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from tailmon.errors import ConfigurationError

DEFAULT_LOG_FILE = "/tmp/access.log"


class MonitorConfig(BaseModel):
    log_file_path: str
    retention_seconds: float = Field(default=120, gt=0)
    # absolute number of records inside the retention window, not a rate
    alarm_threshold: int = Field(default=10, gt=0)
    # prune on ingestion time; replayed or synthetic logs carry stale time_local values
    ignore_timestamp: bool = True
    tick_interval_ms: int = Field(default=100, gt=0)
    tail_from_start: bool = False
    refresh_seconds: float = Field(default=10, gt=0)


def build_config(**values) -> MonitorConfig:
    if not values.get("log_file_path"):
        raise ConfigurationError("empty log file path")
    try:
        return MonitorConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def load_config(env: Optional[Mapping[str, str]] = None) -> MonitorConfig:
    """
    Reads TAILMON_* variables:
      TAILMON_LOG_FILE, TAILMON_RETENTION_S, TAILMON_ALARM_THRESHOLD,
      TAILMON_IGNORE_TIMESTAMP, TAILMON_TICK_MS, TAILMON_TAIL_FROM_START,
      TAILMON_REFRESH_S
    """
    env = os.environ if env is None else env
    return build_config(
        log_file_path=env.get("TAILMON_LOG_FILE", DEFAULT_LOG_FILE).strip(),
        retention_seconds=env.get("TAILMON_RETENTION_S", "120"),
        alarm_threshold=env.get("TAILMON_ALARM_THRESHOLD", "10"),
        ignore_timestamp=env.get("TAILMON_IGNORE_TIMESTAMP", "1") == "1",
        tick_interval_ms=env.get("TAILMON_TICK_MS", "100"),
        tail_from_start=env.get("TAILMON_TAIL_FROM_START", "0") == "1",
        refresh_seconds=env.get("TAILMON_REFRESH_S", "10"),
    )
