"""Health check API routes for prompt-fanout.

Provides liveness (/health) and readiness (/health/ready) endpoints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from prompt_fanout import __version__
from prompt_fanout.core.constants import DEFAULT_SERVICE_NAME


if TYPE_CHECKING:
    from prompt_fanout.orchestration.fanout import FanoutMode


# =============================================================================
# Constants
# =============================================================================

STATUS_OK = "ok"
STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
REASON_NOT_INITIALIZED = "Fan-out not initialized"
REASON_NO_MODELS = "Model registry is empty"
REASON_UNCONFIGURED = "Provider credentials missing"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(default=STATUS_OK, examples=["ok"])
    service: str = Field(default=DEFAULT_SERVICE_NAME, examples=["prompt-fanout"])
    version: str = Field(default=__version__, examples=["0.1.0"])


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint."""

    status: str = Field(examples=["ready", "not_ready"])
    models: list[str] = Field(
        default_factory=list,
        description="Registered model IDs",
    )
    providers: list[str] = Field(
        default_factory=list,
        description="Provider tags with a call routine",
    )
    unconfigured_providers: list[str] | None = Field(
        default=None,
        description="Providers missing credentials",
    )
    reason: str | None = Field(default=None, examples=["Provider credentials missing"])


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe endpoint.

    Returns:
        HealthResponse with status 'ok'.
    """
    service = getattr(request.app.state, "service_name", DEFAULT_SERVICE_NAME)
    return HealthResponse(status=STATUS_OK, service=service, version=__version__)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={
        200: {"description": "Service is ready", "model": ReadinessResponse},
        503: {"description": "Service is not ready", "model": ReadinessResponse},
    },
    summary="Readiness check",
    description="Returns 200 when models are registered and their providers are configured.",
)
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Args:
        request: FastAPI request to access app state.

    Returns:
        JSONResponse with readiness status.
    """
    fanout: FanoutMode | None = getattr(request.app.state, "fanout", None)

    if fanout is None:
        response = ReadinessResponse(status=STATUS_NOT_READY, reason=REASON_NOT_INITIALIZED)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(exclude_none=True),
        )

    providers = fanout.providers
    unconfigured = sorted(tag for tag, p in providers.items() if not p.is_configured)

    reason: str | None = None
    if not fanout.models:
        reason = REASON_NO_MODELS
    elif unconfigured:
        reason = REASON_UNCONFIGURED

    response = ReadinessResponse(
        status=STATUS_NOT_READY if reason else STATUS_READY,
        models=fanout.model_ids,
        providers=sorted(providers),
        unconfigured_providers=unconfigured or None,
        reason=reason,
    )
    return JSONResponse(
        status_code=(
            status.HTTP_503_SERVICE_UNAVAILABLE if reason else status.HTTP_200_OK
        ),
        content=response.model_dump(exclude_none=True),
    )
