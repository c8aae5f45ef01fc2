import logging
import os
import sys

import requests
import uvicorn

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def main():
    host = os.getenv("TAILMON_HOST", "127.0.0.1")
    port = int(os.getenv("TAILMON_PORT", "7000"))
    reload_ = os.getenv("TAILMON_RELOAD", "0") == "1"
    log_level = os.getenv("TAILMON_LOG_LEVEL", "info")

    _configure_logging(log_level)
    uvicorn.run(
        "tailmon.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload_,
        log_level=log_level,
    )


def burst(count=None, url=None, timeout=5.0) -> int:
    """Ask a running server to append `count` synthetic lines to its log file."""
    count = int(count if count is not None else os.getenv("TAILMON_BURST_COUNT", "20"))
    url = url or os.getenv("TAILMON_URL", "http://127.0.0.1:7000")
    try:
        resp = requests.post(f"{url.rstrip('/')}/loadgen", params={"count": count}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        print(f"burst failed: {e}", file=sys.stderr)
        return 1
    print(resp.json())
    return 0


def burst_main():
    sys.exit(burst())
