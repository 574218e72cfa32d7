"""Probe payloads for ``/health`` and ``/health/ready``."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ProbeStatus = Literal["healthy", "unhealthy"]
OverallStatus = Literal["healthy", "degraded", "unhealthy"]


class ServiceHealth(BaseModel):
    """Outcome of probing the relational store."""

    service: str
    status: ProbeStatus
    latency_ms: float | None = Field(default=None, ge=0)
    details: str | None = Field(default=None, max_length=200)


class HealthResponse(BaseModel):
    """Roll-up of every probe; any failing probe lowers ``status``."""

    app_name: str
    status: OverallStatus
    version: str
    environment: str
    checked_at: datetime
    services: list[ServiceHealth]
