from __future__ import annotations

import asyncio
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from rich.console import Console

from tailmon import __version__
from tailmon.config import load_config
from tailmon.display import refresh_loop
from tailmon.loadgen import append_test_lines
from tailmon.monitor import LogMonitor


def _record_row(r) -> dict:
    return {
        "remote_addr": r.remote_addr,
        "remote_user": r.remote_user,
        "time_local": r.time_local.isoformat() if r.time_local else "",
        "request": r.request,
        "section": r.section,
        "status": r.status_code,
        "bytes": r.body_bytes,
    }


def create_app(
    monitor: Optional[LogMonitor] = None,
    *,
    console_enabled: Optional[bool] = None,
    loadgen_enabled: Optional[bool] = None,
) -> FastAPI:
    """
    App factory; anything left as None comes from the environment
    (TAILMON_* for the monitor, TAILMON_CONSOLE and TAILMON_LOADGEN here).
    """
    if monitor is None:
        monitor = LogMonitor(load_config())
    if console_enabled is None:
        console_enabled = os.getenv("TAILMON_CONSOLE", "1") == "1"
    if loadgen_enabled is None:
        loadgen_enabled = os.getenv("TAILMON_LOADGEN", "1") == "1"

    app = FastAPI(title="tailmon", version=__version__)
    app.state.monitor = monitor

    @app.on_event("startup")
    async def _startup():
        await monitor.start()
        app.state.refresh_task = asyncio.create_task(
            refresh_loop(monitor, Console(), render_enabled=console_enabled)
        )

    @app.on_event("shutdown")
    async def _shutdown():
        task = getattr(app.state, "refresh_task", None)
        if task:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await monitor.stop()

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz():
        return "ok"

    @app.get("/metrics")
    def metrics():
        cfg = monitor.config
        return {
            "log_file": cfg.log_file_path,
            "retention_s": cfg.retention_seconds,
            "alarm_threshold": cfg.alarm_threshold,
            "cached_records": monitor.size(),
            "recent_hits": monitor.total_hits(),
            "alarm_active": monitor.alarm_active(),
            "parse_errors": len(monitor.errors()),
            "tick_errors": monitor.tick_errors,
        }

    @app.get("/sections")
    def sections(limit: int = 10):
        return [{"section": k, "hits": v} for k, v in monitor.top_sections(limit)]

    @app.get("/users")
    def users(limit: int = 10):
        return [{"user": k, "hits": v} for k, v in monitor.top_users(limit)]

    @app.get("/requests")
    def recent_requests(limit: int = 10):
        return [_record_row(r) for r in monitor.last_n(limit)]

    @app.get("/alerts")
    def alerts():
        return [a.model_dump(mode="json") for a in monitor.alerts()]

    @app.get("/errors")
    def errors(limit: int = 50):
        items = monitor.errors()[-limit:] if limit > 0 else []
        return [e.model_dump() for e in items]

    if loadgen_enabled:
        @app.post("/loadgen")
        def loadgen(count: int = 1):
            if count < 0:
                raise HTTPException(400, "count must not be negative")
            written = append_test_lines(monitor.config.log_file_path, count)
            return {"ok": True, "written": written}

    return app
