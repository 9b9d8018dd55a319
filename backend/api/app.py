"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.log_config import configure_logging

from .config import get_settings
from .routes import auth_callback, health, navigation, onboarding

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting FirstPrinciple API on %s:%s", settings.host, settings.port)
    yield
    # Shutdown
    logger.info("Shutting down FirstPrinciple API")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="FirstPrinciple API",
        description="Auth and onboarding navigation for the FirstPrinciple marketplace",
        version="0.1.0",
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

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth_callback.router, prefix="/auth", tags=["auth"])
    app.include_router(navigation.router, prefix="/api/navigation", tags=["navigation"])
    app.include_router(onboarding.router, prefix="/api/onboarding", tags=["onboarding"])

    return app


# Application instance for uvicorn
app = create_app()
