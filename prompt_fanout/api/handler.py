"""Framework-neutral request handler for the fan-out endpoint.

handle_generate() implements the whole HTTP contract and returns a plain
HandlerResponse, so the same code serves the FastAPI route and the
serverless event adapter.

Contract:
    OPTIONS          → 204, CORS preflight headers, empty body
    not POST         → 405 {"error": "Method not allowed"}
    POST, no prompt  → 400 {"error": "Missing prompt"}
    POST, prompt     → 200 {"results": [{"id", "label", "output"}, ...]}
    anything raised  → 500 {"error": "<message>"}
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from prompt_fanout.api.error_handlers import (
    build_error_response,
    get_status_code_for_error,
    headers_for_status,
)
from prompt_fanout.core.constants import (
    CONTENT_TYPE_JSON,
    CORS_PREFLIGHT_HEADERS,
    ERROR_METHOD_NOT_ALLOWED,
    ERROR_MISSING_PROMPT,
    JSON_CORS_HEADERS,
)
from prompt_fanout.core.exceptions import MethodNotAllowedError, RequestValidationError
from prompt_fanout.core.logging import get_logger, reset_request_id, set_request_id
from prompt_fanout.models.requests import InferenceRequest
from prompt_fanout.models.responses import GenerateResponse


if TYPE_CHECKING:
    from prompt_fanout.orchestration.fanout import FanoutMode


logger = get_logger(__name__)

METHOD_OPTIONS = "OPTIONS"
METHOD_POST = "POST"


@dataclass(frozen=True)
class HandlerResponse:
    """Transport-agnostic HTTP response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    def json(self) -> Any:
        """Decoded JSON body, or None for an empty body."""
        return json.loads(self.body) if self.body else None

    def to_event(self) -> dict[str, Any]:
        """Serverless platform response shape."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }


def _json_response(
    status_code: int,
    model: BaseModel,
    headers: dict[str, str] | None = None,
) -> HandlerResponse:
    return HandlerResponse(
        status_code=status_code,
        headers={"Content-Type": CONTENT_TYPE_JSON, **(headers or {})},
        body=json.dumps(model.model_dump(exclude_none=True), ensure_ascii=False),
    )


def _error_response(error: Exception) -> HandlerResponse:
    status_code = get_status_code_for_error(error)
    return _json_response(
        status_code,
        build_error_response(error),
        headers_for_status(status_code),
    )


def parse_prompt(body: str | bytes | None) -> str:
    """Extract the prompt from a raw request body.

    An absent or empty body counts as ``{}``.

    Args:
        body: Raw request body.

    Returns:
        The prompt text.

    Raises:
        json.JSONDecodeError: If the body is not valid JSON.
        RequestValidationError: If the JSON has no usable ``prompt``.
    """
    data = json.loads(body or "{}")
    try:
        return InferenceRequest.model_validate(data).prompt
    except PydanticValidationError as e:
        raise RequestValidationError(ERROR_MISSING_PROMPT, field="prompt") from e


async def handle_generate(
    method: str,
    body: str | bytes | None,
    fanout: FanoutMode,
    request_id: str | None = None,
) -> HandlerResponse:
    """Handle one request to the fan-out endpoint.

    Args:
        method: HTTP method.
        body: Raw request body (JSON text expected for POST).
        fanout: Configured fan-out over the model registry.
        request_id: Caller-supplied request id; generated if absent.

    Returns:
        HandlerResponse ready to be sent by the transport.
    """
    token = set_request_id(request_id or uuid.uuid4().hex)
    try:
        return await _dispatch(method.upper(), body, fanout)
    finally:
        reset_request_id(token)


async def _dispatch(
    method: str,
    body: str | bytes | None,
    fanout: FanoutMode,
) -> HandlerResponse:
    if method == METHOD_OPTIONS:
        return HandlerResponse(status_code=204, headers=dict(CORS_PREFLIGHT_HEADERS))

    if method != METHOD_POST:
        logger.info("Method not allowed", method=method)
        return _error_response(MethodNotAllowedError(ERROR_METHOD_NOT_ALLOWED, method=method))

    try:
        prompt = parse_prompt(body)
        results = await fanout.execute(prompt)
    except RequestValidationError as e:
        logger.info("Rejected request", reason=e.message)
        return _error_response(e)
    except Exception as e:
        logger.error("Request failed", error=str(e), exc_info=e)
        return _error_response(e)

    return _json_response(200, GenerateResponse(results=results), JSON_CORS_HEADERS)
