"""FastAPI application entrypoint for prompt-fanout.

Patterns applied:
- asynccontextmanager lifespan (not deprecated @app.on_event)
- configure_logging() called ONCE in lifespan startup
- One shared httpx.AsyncClient per process, closed on shutdown
- Docs disabled in production

Run locally:
    uvicorn prompt_fanout.main:app --port 8888
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from prompt_fanout import __version__
from prompt_fanout.api.error_handlers import register_exception_handlers
from prompt_fanout.api.routes.generate import router as generate_router
from prompt_fanout.api.routes.health import router as health_router
from prompt_fanout.api.routes.models import router as models_router
from prompt_fanout.core.config import Settings, get_settings
from prompt_fanout.core.logging import configure_logging, get_logger
from prompt_fanout.models.registry import get_registry
from prompt_fanout.observability.tracing import (
    TracingMiddleware,
    setup_tracing,
    shutdown_tracing,
)
from prompt_fanout.orchestration.fanout import FanoutMode


# =============================================================================
# Application Metadata
# =============================================================================
APP_NAME = "prompt-fanout"
APP_DESCRIPTION = "Fan one prompt out to many hosted language models"
APP_VERSION = __version__


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown events.

    Startup loads the model registry, opens the shared HTTP client and
    builds the fan-out. A bad registry file fails startup.

    Args:
        app: FastAPI application instance.

    Yields:
        None after startup, before shutdown.
    """
    settings: Settings = app.state.settings

    configure_logging(level=settings.log_level)
    logger = get_logger(__name__)

    models = get_registry(settings.models_file)

    logger.info(
        "Application starting",
        service=settings.service_name,
        version=APP_VERSION,
        environment=settings.environment,
        port=settings.port,
        model_count=len(models),
        isolate_failures=settings.isolate_failures,
    )

    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as client:
        app.state.http_client = client
        app.state.fanout = FanoutMode.from_settings(settings, client, models)
        app.state.service_name = settings.service_name
        app.state.initialized = True

        yield

        logger.info("Application shutting down", service=settings.service_name)
        app.state.initialized = False
        app.state.fanout = None
        app.state.http_client = None

    if settings.tracing_enabled:
        shutdown_tracing()


# =============================================================================
# Application Factory
# =============================================================================
def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    application = FastAPI(
        title=APP_NAME,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.fanout = None

    application.include_router(health_router)
    application.include_router(models_router)
    application.include_router(generate_router)

    register_exception_handlers(application)

    if settings.tracing_enabled:
        setup_tracing(settings.service_name, settings.otlp_endpoint)
        application.add_middleware(
            TracingMiddleware,
            exclude_paths=["/health", "/health/ready"],
        )

    return application


app = create_app()
