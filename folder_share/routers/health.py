# folder_share/routers/health.py
# Liveness/readiness probes for the metadata database and the blob store

import time
import logging
from typing import Awaitable, Callable, Dict

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from folder_share.config import get_settings
from folder_share.repositories.share_repository import ShareRepository
from folder_share.storage.blob_store import build_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class ComponentHealth(BaseModel):
    status: str
    latency_ms: float = 0.0
    message: str = ""


class HealthStatus(BaseModel):
    status: str  # "healthy", "unhealthy"
    timestamp: float
    checks: Dict[str, ComponentHealth] = {}


async def _timed_check(label: str, probe: Callable[[], Awaitable[bool]]) -> ComponentHealth:
    """Run one probe; failures become an unhealthy component, never an exception."""
    start = time.perf_counter()
    try:
        ok = await probe()
        message = "" if ok else f"{label} probe returned an unexpected result"
    except Exception as e:
        logger.error(f"{label} health check failed: {type(e).__name__}")
        ok, message = False, f"{label} error: {type(e).__name__}"
    return ComponentHealth(
        status="healthy" if ok else "unhealthy",
        latency_ms=round((time.perf_counter() - start) * 1000, 2),
        message=message,
    )


async def check_database_health() -> ComponentHealth:
    return await _timed_check("Database", ShareRepository().ping)


async def check_blob_store_health() -> ComponentHealth:
    return await _timed_check("Blob store", build_blob_store(get_settings()).ping)


@router.get("/health/live")
async def liveness():
    """Process is up; no dependency checks."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=HealthStatus)
async def readiness(response: Response) -> HealthStatus:
    """Ready when both the metadata store and the blob store answer."""
    checks = {
        "database": await check_database_health(),
        "blob_store": await check_blob_store_health(),
    }
    healthy = all(c.status == "healthy" for c in checks.values())
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthStatus(
        status="healthy" if healthy else "unhealthy",
        timestamp=time.time(),
        checks=checks,
    )
