"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings
from .errors import register_exception_handlers
from .models.errors import ERROR_RESPONSES
from .routes import health, users
from modules.analytics.routes import router as analytics_router
from modules.cards.routes import router as cards_router
from modules.entitlements.routes import router as organizations_router
from modules.profiles.routes import (
    router as profiles_router,
    public_router,
    templates_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Digital business card profiles, NFC cards and analytics",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    for router, prefix, tag in (
        (organizations_router, "/api/organizations", "organizations"),
        (profiles_router, "/api/profiles", "profiles"),
        (templates_router, "/api/templates", "templates"),
        (public_router, "/api/public", "public"),
        (analytics_router, "/api/analytics", "analytics"),
        (cards_router, "/api/cards", "cards"),
    ):
        app.include_router(router, prefix=prefix, tags=[tag], responses=ERROR_RESPONSES)

    return app


# Application instance for uvicorn
app = create_app()
