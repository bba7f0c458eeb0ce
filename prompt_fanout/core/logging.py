"""JSON logging for prompt-fanout.

One JSON object per line on stdout. Every line emitted while a request is
being handled carries that request's ``request_id``, including lines from
the concurrent provider attempts it spawns (asyncio tasks copy the context).

Patterns applied:
- Singleton _configured flag; the first configure_logging() call wins
- Loggers are lazy proxies, so level and stream follow the active config
- Request context kept in structlog.contextvars, merged by a processor
"""

import logging
import sys
from collections.abc import Mapping
from contextvars import Token
from typing import Any, TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy
from structlog.contextvars import (
    bind_contextvars,
    get_contextvars,
    merge_contextvars,
    reset_contextvars,
)


REQUEST_ID_KEY = "request_id"

_configured: bool = False

RequestIdToken = Mapping[str, Token[Any]]


# =============================================================================
# Request Context
# =============================================================================
def set_request_id(request_id: str | None) -> RequestIdToken:
    """Bind ``request_id`` to the current context.

    Returns:
        Tokens for reset_request_id().
    """
    return bind_contextvars(**{REQUEST_ID_KEY: request_id})


def reset_request_id(token: RequestIdToken) -> None:
    """Restore whatever request id was bound before set_request_id()."""
    reset_contextvars(**token)


def get_request_id() -> str | None:
    return get_contextvars().get(REQUEST_ID_KEY)


def _drop_empty_request_id(
    _logger: object, _method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    if event_dict.get(REQUEST_ID_KEY, "") is None:
        del event_dict[REQUEST_ID_KEY]
    return event_dict


# =============================================================================
# Configuration
# =============================================================================
def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Install the JSON processor chain.

    Args:
        level: Minimum level name. Unknown names fall back to INFO.
        stream: Destination. Defaults to sys.stdout.
        force: Reconfigure even if already configured (tests).
    """
    global _configured

    if _configured and not force:
        return

    min_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            merge_contextvars,
            _drop_empty_request_id,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )
    _configured = True


def reset_logging() -> None:
    """Forget that logging was configured. Test isolation only."""
    global _configured
    _configured = False
    structlog.reset_defaults()


def get_logger(name: str) -> Any:
    """Logger tagged with ``name``.

    Safe to call at import time: the proxy resolves the processor chain
    and level filter on every call, so a later configure_logging() applies.
    """
    return BoundLoggerLazyProxy(
        None, initial_values={"logger": name}, logger_factory_args=()
    )
