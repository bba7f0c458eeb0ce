"""Serverless entrypoint for prompt-fanout.

For function platforms that invoke a handler with an event dictionary
instead of serving ASGI. Expected event:

    {
      "httpMethod": "POST",
      "headers": {"content-type": "application/json"},
      "body": "{\"prompt\": \"Hello\"}",
      "isBase64Encoded": false
    }

Returned value:

    {"statusCode": 200, "headers": {...}, "body": "{\"results\": [...]}"}

Each invocation opens its own HTTP client; settings and the registry are
loaded once per process.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Any

import httpx

from prompt_fanout.api.handler import handle_generate
from prompt_fanout.core.config import Settings, get_settings
from prompt_fanout.core.logging import configure_logging
from prompt_fanout.models.registry import ModelDescriptor, get_registry
from prompt_fanout.orchestration.fanout import FanoutMode


REQUEST_ID_HEADER = "x-request-id"


def _event_body(event: dict[str, Any]) -> str | bytes | None:
    body = event.get("body")
    if body and event.get("isBase64Encoded"):
        return base64.b64decode(body)
    return body


def _event_request_id(event: dict[str, Any]) -> str | None:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    if REQUEST_ID_HEADER in headers:
        return headers[REQUEST_ID_HEADER]
    context = event.get("requestContext") or {}
    return context.get("requestId")


async def handle_event(
    event: dict[str, Any],
    settings: Settings | None = None,
    models: tuple[ModelDescriptor, ...] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Handle one platform event.

    Args:
        event: Platform event with ``httpMethod`` and ``body``.
        settings: Settings override. Defaults to environment settings.
        models: Registry override. Defaults to the configured registry.
        transport: HTTP transport override for the outbound client.

    Returns:
        ``{"statusCode", "headers", "body"}``.
    """
    settings = settings or get_settings()
    configure_logging(level=settings.log_level)
    if models is None:
        models = get_registry(settings.models_file)

    async with httpx.AsyncClient(
        timeout=settings.request_timeout_seconds,
        transport=transport,
    ) as client:
        fanout = FanoutMode.from_settings(settings, client, models)
        response = await handle_generate(
            event.get("httpMethod") or "GET",
            _event_body(event),
            fanout,
            request_id=_event_request_id(event),
        )
    return response.to_event()


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Synchronous platform handler.

    Args:
        event: Platform event.
        context: Platform context object (unused).

    Returns:
        Platform response dictionary.
    """
    return asyncio.run(handle_event(event))
