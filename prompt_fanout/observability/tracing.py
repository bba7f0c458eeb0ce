"""OpenTelemetry tracing for prompt-fanout.

A traced /generate request looks like:

    POST /generate                  SERVER  (TracingMiddleware)
    ├── provider.generate           CLIENT  model.id=mistral-7b
    └── provider.generate           CLIENT  model.id=zephyr-7b

Models whose provider is not implemented make no call and get no span.
Until setup_tracing() runs, the API's no-op tracer is in effect.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Callable, Optional

from opentelemetry import trace
from opentelemetry.propagate import extract
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer


PROVIDER_SPAN_NAME = "provider.generate"
REQUEST_ID_HEADER = "x-request-id"

_tracer_provider: Optional[TracerProvider] = None


# =============================================================================
# Provider Lifecycle
# =============================================================================


def _build_exporter(otlp_endpoint: Optional[str]) -> SpanExporter:
    if not otlp_endpoint:
        return ConsoleSpanExporter()

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
        OTLPSpanExporter,
    )

    return OTLPSpanExporter(endpoint=otlp_endpoint)


def setup_tracing(
    service_name: str = "prompt-fanout",
    otlp_endpoint: Optional[str] = None,
) -> TracerProvider:
    """Install a TracerProvider as the global provider.

    Args:
        service_name: ``service.name`` resource attribute.
        otlp_endpoint: OTLP gRPC collector, e.g. ``http://localhost:4317``.
            Spans are printed to stdout when unset.

    Returns:
        The installed provider.
    """
    global _tracer_provider

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(BatchSpanProcessor(_build_exporter(otlp_endpoint)))
    trace.set_tracer_provider(provider)

    _tracer_provider = provider
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans; no-op if setup_tracing() never ran."""
    global _tracer_provider

    if _tracer_provider is None:
        return
    _tracer_provider.shutdown()
    _tracer_provider = None


def get_tracer(name: str = __name__) -> Tracer:
    return trace.get_tracer(name)


def get_current_trace_id() -> Optional[str]:
    """Hex trace id of the active span, or None outside any span."""
    trace_id = trace.get_current_span().get_span_context().trace_id
    return format(trace_id, "032x") if trace_id else None


# =============================================================================
# Spans
# =============================================================================


@contextmanager
def provider_span(
    model_id: str,
    model_name: str,
    provider_name: str,
) -> Iterator[Span]:
    """CLIENT span around one provider call.

    A raised exception is recorded, marks the span as ERROR and propagates.
    """
    tracer = get_tracer("prompt_fanout.providers")
    attributes = {
        "model.id": model_id,
        "model.name": model_name,
        "provider.name": provider_name,
    }
    with tracer.start_as_current_span(
        PROVIDER_SPAN_NAME,
        kind=SpanKind.CLIENT,
        attributes=attributes,
    ) as span:
        yield span


def _headers_to_dict(headers: Sequence[tuple[bytes, bytes]]) -> dict[str, str]:
    """ASGI header pairs as a lower-cased dict (W3C propagation carrier)."""
    return {key.decode("latin-1").lower(): value.decode("latin-1") for key, value in headers}


class TracingMiddleware:
    """ASGI middleware opening a SERVER span per HTTP request.

    Continues an incoming ``traceparent`` when present. Paths listed in
    ``exclude_paths`` (health probes) are passed through untraced.
    """

    def __init__(
        self,
        app: Callable[..., Any],
        exclude_paths: Optional[Sequence[str]] = None,
        tracer_name: str = "prompt_fanout.http",
    ) -> None:
        self.app = app
        self.exclude_paths = frozenset(exclude_paths or ())
        self.tracer = get_tracer(tracer_name)

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        path = scope.get("path", "/")
        if scope["type"] != "http" or path in self.exclude_paths:
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        headers = _headers_to_dict(scope.get("headers", []))
        response_status: dict[str, int] = {}

        async def send_wrapper(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                response_status["code"] = message.get("status", 500)
            await send(message)

        with self.tracer.start_as_current_span(
            f"{method} {path}",
            context=extract(headers),
            kind=SpanKind.SERVER,
            attributes={"http.method": method, "http.route": path},
        ) as span:
            if REQUEST_ID_HEADER in headers:
                span.set_attribute("http.request_id", headers[REQUEST_ID_HEADER])
            try:
                await self.app(scope, receive, send_wrapper)
            except Exception:
                span.set_attribute("http.status_code", 500)
                raise

            status_code = response_status.get("code", 500)
            span.set_attribute("http.status_code", status_code)
            if status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))
