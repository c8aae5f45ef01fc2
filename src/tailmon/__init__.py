from tailmon.config import MonitorConfig, build_config, load_config
from tailmon.errors import ConfigurationError, ParseError, TailmonError, TickError
from tailmon.models import AlertEvent, AlertType, LogRecord, ParseFailure
from tailmon.monitor import LogMonitor
from tailmon.parser import parse_line, section_of

__version__ = "0.1.0"

__all__ = [
    "AlertEvent", "AlertType", "ConfigurationError", "LogMonitor", "LogRecord",
    "MonitorConfig", "ParseError", "ParseFailure", "TailmonError", "TickError",
    "build_config", "load_config", "parse_line", "section_of",
]
