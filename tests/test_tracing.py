"""Tracing setup tests."""

from opentelemetry.sdk.trace import TracerProvider

from core.tracing import init_tracer, remote_call_span


def test_init_tracer_with_tracing_disabled():
    provider = init_tracer("acima-gateway-test")
    try:
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "acima-gateway-test"
    finally:
        provider.shutdown()


def test_remote_call_span_yields_span():
    with remote_call_span("capture", "PUT", "https://sandbox.acima.test/x") as span:
        span.set_attribute("http.response.status_code", 200)
