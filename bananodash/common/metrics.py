"""Prometheus metric definitions for the dashboard process."""

from prometheus_client import Counter, Histogram, start_http_server


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)
upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total BananoMiner lookups by outcome",
    ["service", "outcome"],
)
upstream_latency_seconds = Histogram(
    "upstream_latency_seconds",
    "BananoMiner lookup latency seconds",
    ["service"],
)


def start_metrics_server(port: int) -> bool:
    """Expose all registered metrics on a dedicated port.

    The public app answers every path, so the scrape endpoint cannot share
    its routing table. Returns False when `port` is 0 (disabled).
    """

    if port <= 0:
        return False
    start_http_server(port)
    return True
