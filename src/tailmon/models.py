from __future__ import annotations

import time
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LogRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    remote_addr: str = ""
    remote_user: str = ""
    time_local: Optional[datetime] = None
    method: str = ""
    path: str = ""
    section: str = ""
    status_code: Optional[int] = None
    body_bytes: Optional[int] = None
    processed_at: Optional[float] = None   # epoch seconds, stamped at parse time
    raw: str = ""

    @classmethod
    def placeholder(cls) -> "LogRecord":
        return cls()

    @property
    def request(self) -> str:
        if not self.method and not self.path:
            return ""
        return f"{self.method} {self.path}"


class AlertType(str, Enum):
    BREACH = "breach"
    RECOVERY = "recover"


class AlertEvent(BaseModel):
    type: AlertType
    timestamp: float = Field(default_factory=lambda: time.time())
    hits: int


class ParseFailure(BaseModel):
    cause: str
    line: str
    timestamp: float = Field(default_factory=lambda: time.time())
