"""
Observability package: OpenTelemetry tracing for prompt-fanout.
"""

from prompt_fanout.observability.tracing import (
    TracingMiddleware,
    get_current_trace_id,
    get_tracer,
    provider_span,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    "TracingMiddleware",
    "get_current_trace_id",
    "get_tracer",
    "provider_span",
    "setup_tracing",
    "shutdown_tracing",
]
