"""Fan-out API route.

Serves /generate for every HTTP method: the method check (405), the CORS
preflight (204) and prompt validation (400) are part of the endpoint
contract, so the raw request is handed to handle_generate() unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import Response

from prompt_fanout.api.handler import handle_generate


if TYPE_CHECKING:
    from prompt_fanout.orchestration.fanout import FanoutMode

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(tags=["generate"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
REQUEST_ID_HEADER = "x-request-id"


def get_fanout(request: Request) -> FanoutMode:
    """Get the fan-out from app state or raise 503.

    Raises:
        HTTPException: 503 if the application has not finished startup.
    """
    fanout: FanoutMode | None = getattr(request.app.state, "fanout", None)
    if fanout is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fan-out not initialized",
        )
    return fanout


@router.api_route(
    "/generate",
    methods=ALL_METHODS,
    summary="Fan a prompt out to every registered model",
    description=(
        "POST {\"prompt\": \"...\"} and receive one result per registered model, "
        "in registry order."
    ),
    responses={
        200: {"description": "One result per registered model"},
        204: {"description": "CORS preflight"},
        400: {"description": "Missing prompt"},
        405: {"description": "Method not allowed"},
        500: {"description": "A provider call or request parsing failed"},
    },
)
async def generate(request: Request) -> Response:
    """Fan-out endpoint."""
    fanout = get_fanout(request)
    body = await request.body()

    result = await handle_generate(
        request.method,
        body,
        fanout,
        request_id=request.headers.get(REQUEST_ID_HEADER),
    )
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )
