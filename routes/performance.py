"""
routes/performance.py -- Service diagnostics (GET /performance)

Uptime since boot as "HH:mm:ss.SSS", resident memory in MB as "XX.XX"
(no unit suffix), and the process thread count.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import APIRouter

from app.models import PerformanceResponse

router = APIRouter()


def format_uptime(uptime: timedelta) -> str:
    total_seconds = int(uptime.total_seconds())
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    ms = uptime.microseconds // 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


@router.get("/performance", response_model=PerformanceResponse)
def performance() -> PerformanceResponse:
    # Lazy import: app.main imports this module
    import app.main as _main

    uptime = datetime.now(timezone.utc) - _main.START_TIME
    rss_mb = _main.PROCESS.memory_info().rss / (1024 * 1024)

    return PerformanceResponse(
        time=format_uptime(uptime),
        memory=f"{rss_mb:.2f}",
        threads=_main.PROCESS.num_threads(),
    )
