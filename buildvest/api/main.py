"""
Buildvest API - FastAPI Application

Real-estate investment marketplace backend. Provides:
- Investor and builder onboarding (two steps each)
- Email/password login mapped to a stored role
- Bearer-token authorization
- Validated CRUD for builders and projects
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from buildvest import __version__
from buildvest.api.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    get_cors_origins,
)
from buildvest.api.routes import auth, health, resources
from buildvest.api.services import Services, create_services
from buildvest.config import Settings, get_settings
from buildvest.kernel.http.errors import register_exception_handlers

# Map log level string to logging constant
_LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _get_log_level(settings: Settings) -> int:
    return _LOG_LEVEL_MAP.get(settings.log_level.lower(), logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structured logging."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer()
            if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_get_log_level(settings)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings())

logger = structlog.get_logger()


def create_app(services: Services | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    When `services` is given it is used as-is and left open on shutdown;
    otherwise the lifespan opens the Firestore and identity clients from
    settings and closes them again.
    """
    settings = settings or (services.settings if services else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting Buildvest API",
            version=__version__,
            environment=settings.environment,
            api_prefix=settings.api_prefix,
        )
        owned = services is None
        if owned:
            app.state.services = create_services(settings)

        yield

        logger.info("Shutting down Buildvest API")
        if owned:
            await app.state.services.close()

    app = FastAPI(
        title="Buildvest API",
        description="Onboarding, login and builder/project catalogue for the Buildvest marketplace",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    if services is not None:
        app.state.services = services

    # Security middleware (order matters - first added = last executed)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app, settings)

    # Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    prefix = settings.api_prefix
    app.include_router(health.router, prefix=prefix, tags=["Health"])
    app.include_router(auth.router, prefix=prefix)
    for router in resources.resource_routers:
        app.include_router(router, prefix=prefix)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "buildvest.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
