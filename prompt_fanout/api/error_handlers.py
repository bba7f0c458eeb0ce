"""Error handling for the HTTP surface.

Every error leaves the service as the same flat envelope:

    {"error": "Human-readable message"}

Server errors (5xx) also carry ``Access-Control-Allow-Origin: *`` so a
browser front-end can read them.

This module provides:
- get_status_code_for_error(): exception → HTTP status
- build_error_response(): exception → ErrorResponse
- FastAPI exception handlers and register_exception_handlers()
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prompt_fanout.core.constants import CORS_ALLOW_ORIGIN, ERROR_METHOD_NOT_ALLOWED
from prompt_fanout.core.exceptions import (
    ConfigurationError,
    FanoutServiceError,
    MethodNotAllowedError,
    RequestValidationError,
    UpstreamError,
)
from prompt_fanout.core.logging import get_logger
from prompt_fanout.models.responses import ErrorResponse


logger = get_logger(__name__)


# =============================================================================
# Status Code Mapping
# =============================================================================


def get_status_code_for_error(error: Exception) -> int:
    """Determine HTTP status code based on exception type.

    Args:
        error: The exception to get status code for.

    Returns:
        Appropriate HTTP status code.
    """
    if isinstance(error, RequestValidationError):
        return 400
    if isinstance(error, MethodNotAllowedError):
        return 405
    if isinstance(error, (ConfigurationError, UpstreamError)):
        return 500
    if isinstance(error, FanoutServiceError):
        return 500

    # Unknown errors
    return 500


def headers_for_status(status_code: int) -> dict[str, str]:
    """Extra response headers for an error status."""
    return dict(CORS_ALLOW_ORIGIN) if status_code >= 500 else {}


# =============================================================================
# Error Response Builder
# =============================================================================


def build_error_response(error: Exception) -> ErrorResponse:
    """Build the flat error envelope.

    Uses ``error.message`` for service errors and ``str(error)`` otherwise.
    """
    message = error.message if isinstance(error, FanoutServiceError) else str(error)
    return ErrorResponse(error=message)


# =============================================================================
# Exception Handlers
# =============================================================================


async def fanout_service_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle FanoutServiceError and subclasses.

    Args:
        _request: The FastAPI request (unused).
        exc: The exception that was raised.

    Returns:
        JSONResponse with the flat error envelope.
    """
    status_code = get_status_code_for_error(exc)
    if status_code >= 500:
        logger.error(
            "Service error",
            error_code=getattr(exc, "error_code", None),
            error=str(exc),
        )

    return JSONResponse(
        status_code=status_code,
        content=build_error_response(exc).model_dump(),
        headers=headers_for_status(status_code),
    )


async def http_exception_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Render Starlette/FastAPI HTTPException in the flat envelope."""
    if not isinstance(exc, StarletteHTTPException):
        return await generic_error_handler(_request, exc)

    # Routing rejects methods a route does not list before any handler runs
    detail = ERROR_METHOD_NOT_ALLOWED if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=detail).model_dump(),
        headers={**(exc.headers or {}), **headers_for_status(exc.status_code)},
    )


async def generic_error_handler(
    _request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle generic/unexpected exceptions.

    Args:
        _request: The FastAPI request (unused).
        exc: The exception that was raised.

    Returns:
        JSONResponse with 500 status code.
    """
    logger.error("Unhandled error", error=str(exc), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=build_error_response(exc).model_dump(),
        headers=headers_for_status(500),
    )


# =============================================================================
# Handler Registration
# =============================================================================


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(FanoutServiceError, fanout_service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Catch-all for unexpected exceptions
    app.add_exception_handler(Exception, generic_error_handler)
