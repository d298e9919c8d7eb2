import os
from contextlib import contextmanager

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

log = structlog.get_logger(__name__)

tracer = trace.get_tracer("acima.gateway")


def init_tracer(app_name: str = "acima-gateway", endpoint: str | None = None):
    """Initialize OpenTelemetry tracer with OTLP exporter"""
    provider = TracerProvider(resource=Resource.create({"service.name": app_name}))

    # Allow disabling tracing via environment variable (useful in tests)
    if os.getenv("DISABLE_TRACING", "").lower() in {"1", "true", "yes"}:
        otlp_exporter = ConsoleSpanExporter()
    else:
        try:
            otlp_exporter = OTLPSpanExporter(endpoint=endpoint)
        except Exception as exc:  # pragma: no cover – only hit when collector absent
            log.warning("OTLP exporter unavailable, tracing disabled", error=str(exc))
            otlp_exporter = ConsoleSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

    trace.set_tracer_provider(provider)
    return provider


@contextmanager
def remote_call_span(operation: str, method: str, url: str):
    """Wrap one remote Acima call in a client span."""
    with tracer.start_as_current_span(
        f"acima.{operation}",
        kind=trace.SpanKind.CLIENT,
        attributes={
            "acima.operation": operation,
            "http.request.method": method,
            "url.full": url,
        },
    ) as span:
        yield span
