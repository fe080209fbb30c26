"""
routes/performance.py -- Service health report (GET /performance)

Uptime is measured from module import with a monotonic clock, so it is
unaffected by wall-clock changes.

Time format:   "HH:mm:ss.SSS"
Memory format: resident set size in MB, "XX.XX" (no unit suffix)
"""
from __future__ import annotations

import time

import psutil
from fastapi import APIRouter

from app.models import PerformanceResponse
from app.registry import CALCULATORS

router = APIRouter()

# Captured once at boot
_STARTED_AT: float = time.monotonic()
_PROCESS: psutil.Process = psutil.Process()


def format_uptime(seconds: float) -> str:
    whole = int(seconds)
    hours, remainder = divmod(whole, 3600)
    minutes, secs = divmod(remainder, 60)
    ms = int((seconds - whole) * 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{ms:03d}"


@router.get("/performance", response_model=PerformanceResponse)
def performance() -> PerformanceResponse:
    rss_mb = _PROCESS.memory_info().rss / (1024 * 1024)
    return PerformanceResponse(
        time=format_uptime(time.monotonic() - _STARTED_AT),
        memory=f"{rss_mb:.2f}",
        threads=_PROCESS.num_threads(),
        calculators=len(CALCULATORS),
    )
