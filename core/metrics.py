"""
Prometheus metrics for the Acima gateway adapter.

Counts every remote Acima call by operation and outcome, and records how long
each call took. Exposing them is left to the host process (e.g. through
prometheus_client.start_http_server or its own /metrics route).
"""

from prometheus_client import Counter, Histogram

acima_requests_total = Counter(
    "acima_requests_total",
    "Total number of remote Acima API calls",
    ["operation", "outcome"],  # outcome: success | failure | error
)

acima_request_latency = Histogram(
    "acima_request_latency_seconds",
    "Time taken for remote Acima API calls to complete",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def record_outcome(operation: str, outcome: str):
    """Increment the request counter for one finished remote call."""
    acima_requests_total.labels(operation=operation, outcome=outcome).inc()
