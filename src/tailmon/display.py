"""Console view of a running monitor, redrawn every refresh interval."""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime

from rich import box
from rich.console import Console
from rich.table import Table

from tailmon.models import AlertType
from tailmon.monitor import LogMonitor

logger = logging.getLogger(__name__)

LAST_REQUESTS = 10


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M:%S")


def _counts_table(title: str, key_label: str, rows) -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column(key_label, style="cyan")
    table.add_column("Hits", justify="right")
    for key, count in rows:
        table.add_row(key, str(count))
    return table


def render(monitor: LogMonitor, console: Console) -> None:
    cfg = monitor.config
    uptime = time.time() - (monitor.started_at or time.time())

    console.print("HTTP MON", style="bold cyan")
    console.print(
        f"uptime: {uptime:.1f}s, cached records: {monitor.size()}, "
        f"parse errors: {len(monitor.errors())}, tick errors: {monitor.tick_errors}"
    )
    console.print(
        f"Monitoring [cyan]{cfg.log_file_path}[/], refreshing every {cfg.refresh_seconds:g}s, "
        f"retaining records for {cfg.retention_seconds:g}s, alarm at {cfg.alarm_threshold} records"
    )

    console.print(_counts_table("Top Sections", "Section", monitor.top_sections()))
    console.print(_counts_table("Top Users", "User", monitor.top_users()))

    for alert in monitor.alerts():
        when = _fmt_ts(alert.timestamp)
        if alert.type == AlertType.BREACH:
            console.print(f"[red]High traffic generated an alert - hits = {alert.hits}, triggered at {when}[/]")
        else:
            console.print(f"[green]Traffic levels have returned to normal, triggered at {when}[/]")

    table = Table(title=f"Last {LAST_REQUESTS} Requests", box=box.ROUNDED)
    for col in ("remote_addr", "remote_user", "time_local", "request"):
        table.add_column(col)
    for r in monitor.last_n(LAST_REQUESTS):
        table.add_row(
            r.remote_addr,
            r.remote_user,
            r.time_local.isoformat() if r.time_local else "",
            r.request,
        )
    console.print(table)


async def refresh_loop(monitor: LogMonitor, console: Console, render_enabled: bool = True) -> None:
    """Draw, then start a fresh short-term stats window."""
    while True:
        if render_enabled:
            try:
                console.clear()
                render(monitor, console)
            except Exception:
                logger.exception("display refresh failed")
        monitor.clear_cached_stats()
        await asyncio.sleep(monitor.config.refresh_seconds)
