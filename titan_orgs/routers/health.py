"""Health check endpoints for production monitoring."""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from titan_orgs.schemas.health import HealthResponse, ServiceHealth

router = APIRouter(tags=["health"])


async def _check_service(name: str, check_fn: Callable[[], None]) -> ServiceHealth:
    """Run a blocking check in the threadpool and time it."""
    start = time.monotonic()
    try:
        await run_in_threadpool(check_fn)
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(service=name, status="healthy", latency_ms=round(latency, 2))
    except Exception as exc:
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(
            service=name,
            status="unhealthy",
            latency_ms=round(latency, 2),
            details=str(exc)[:200],
        )


def _response(request: Request, services: list[ServiceHealth], failed: str) -> HealthResponse:
    settings = request.app.state.settings
    overall = "healthy" if all(s.status == "healthy" for s in services) else failed
    return HealthResponse(
        app_name=settings.app_name,
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        checked_at=datetime.now(timezone.utc),
        services=services,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Basic health check — is the application and its store up?"""
    database = request.app.state.database
    services = [await _check_service("database", database.ping)]
    return _response(request, services, failed="degraded")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(request: Request) -> HealthResponse:
    """Readiness check — can requests be served against the store?

    The profile store is not consulted; responses degrade to bare user ids
    without it.
    """
    database = request.app.state.database
    services = [await _check_service("database", database.ping)]
    return _response(request, services, failed="unhealthy")


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe — is the process alive?"""
    return {"status": "alive"}
