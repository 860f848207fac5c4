"""
Health Routes
=============

Liveness endpoint with store connectivity and process statistics.

Version: 0.1.0
"""

import resource
import sys
import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from warden import __version__
from warden.auth.dependencies import get_store
from warden.models import HealthResponse
from warden.store.base import CredentialStore

router = APIRouter()


def _memory_stats() -> dict[str, Any]:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is reported in KiB on Linux and bytes on macOS
    scale = 1 if sys.platform == "darwin" else 1024
    return {
        "max_rss_bytes": usage.ru_maxrss * scale,
        "user_cpu_seconds": round(usage.ru_utime, 3),
        "system_cpu_seconds": round(usage.ru_stime, 3),
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    store: Annotated[CredentialStore, Depends(get_store)],
) -> HealthResponse:
    """
    Service health check.

    Used by load balancers and monitoring; never requires authentication.
    """
    connected = await store.ping()
    return HealthResponse(
        database="connected" if connected else "disconnected",
        uptime=round(time.monotonic() - request.app.state.started_at, 3),
        memory=_memory_stats(),
        version=__version__,
    )
