"""Prometheus metrics for protocol computation and the HTTP API.

Exposed via /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, make_asgi_app

# Engine counters
protocol_assemblies_total = Counter(
    "protocol_assemblies_total",
    "Total protocol assembly passes",
    ["source"],  # source: stored, preview
)

records_skipped_total = Counter(
    "records_skipped_total",
    "Stored supplement rows skipped during a display pass",
    ["reason"],
)

# API counters
api_requests_total = Counter(
    "api_requests_total",
    "Total API requests",
    ["endpoint", "method", "status_code"],
)

api_response_duration_seconds = Histogram(
    "api_response_duration_seconds",
    "Duration of API responses",
    ["endpoint"],
)


def create_metrics_app():
    """Create ASGI app for /metrics endpoint."""
    return make_asgi_app()
