"""Titan Organizations — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from titan_orgs.config import Settings, get_settings
from titan_orgs.middleware import (
    configure_cors,
    configure_error_handlers,
    configure_rate_limiting,
    configure_request_logging,
    lifespan,
)
from titan_orgs.routers import health, organizations, reports, roles
from titan_orgs.services.profiles import ProfileClient
from titan_orgs.store import Database


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Organization hierarchy, chain of command and report acknowledgment",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Collaborators on app state
    app.state.settings = settings
    app.state.database = database or Database(settings)
    app.state.profile_client = ProfileClient(
        settings.profile_api_url,
        timeout=settings.profile_api_timeout,
        avatar_base_url=settings.avatar_base_url,
    )

    # Middleware
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)
    configure_request_logging(app)
    configure_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(reports.router)
    app.include_router(roles.router)
    app.include_router(organizations.router)

    return app
