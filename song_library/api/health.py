"""
Health check and metrics endpoints for observability.

- /ping - Plain liveness answer
- /health - Basic liveness check
- /health/ready - Readiness check (database, cache, memory)
- /metrics - Prometheus exposition format
"""

import time
import psutil
from typing import Dict, Any, Optional
from datetime import datetime, timezone

from fastapi import APIRouter, Request, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from song_library import __version__
from song_library.common.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["health"])

# Track startup time for uptime calculation
_start_time = time.time()


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
    uptime_seconds: float
    version: str = __version__
    details: Optional[Dict[str, Any]] = None


class ReadinessStatus(BaseModel):
    """Readiness check response model."""
    ready: bool
    timestamp: str
    checks: Dict[str, Dict[str, Any]]


async def _ping_health(component, name: str) -> Dict[str, Any]:
    if component is None:
        return {"status": "unhealthy", "error": f"{name} not initialized"}
    if await component.ping():
        return {"status": "healthy"}
    logger.warning(f"{name} health check failed")
    return {"status": "unhealthy"}


def get_memory_health() -> Dict[str, Any]:
    """Check memory usage."""
    mem = psutil.virtual_memory()
    status_ = "healthy" if mem.percent < 85 else "degraded" if mem.percent < 95 else "critical"

    return {
        "status": status_,
        "total_mb": round(mem.total / (1024**2), 2),
        "available_mb": round(mem.available / (1024**2), 2),
        "used_percent": round(mem.percent, 1),
    }


@router.get("/ping")
async def ping():
    return "pong"


@router.get("/health", response_model=HealthStatus)
async def health_check(request: Request):
    """
    Basic health check endpoint (liveness probe).

    Returns 200 if service is running.
    """
    settings = getattr(request.app.state, "settings", None)

    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(time.time() - _start_time, 2),
        details={
            "service": "song-library",
            "environment": settings.env.value if settings else "unknown",
        },
    )


@router.get("/health/ready", response_model=ReadinessStatus)
async def readiness_check(request: Request, response: Response):
    """
    Readiness check endpoint (readiness probe).

    Checks the database, the cache and memory.
    Returns 200 if ready, 503 if not ready.
    """
    state = request.app.state
    checks = {
        "database": await _ping_health(getattr(state, "store", None), "database"),
        "cache": await _ping_health(getattr(state, "cache", None), "cache"),
        "memory": get_memory_health(),
    }

    all_healthy = all(
        check.get("status") in ("healthy", "degraded")
        for check in checks.values()
    )

    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessStatus(
        ready=all_healthy,
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
    )


@router.get("/metrics", response_class=Response)
async def metrics():
    """Prometheus metrics: cache, repository and metadata lookup counters."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
