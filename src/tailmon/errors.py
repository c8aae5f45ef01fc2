from __future__ import annotations


class TailmonError(Exception):
    """Base class for everything the monitor raises on purpose."""


class ParseError(TailmonError):
    """A log line that does not match the access-log grammar."""

    def __init__(self, cause: str, line: str):
        super().__init__(f"{cause}: {line!r}")
        self.cause = cause
        self.line = line


class ConfigurationError(TailmonError):
    pass


class TickError(TailmonError):
    """Raised when pruning or alarm evaluation fails inside a tick."""
