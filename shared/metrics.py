"""Prometheus metrics for client observability.

Counters and histograms at the session, request and pagination layers.
The host application decides whether and how to expose the default registry.
"""

from prometheus_client import Counter, Histogram

session_renewals_total = Counter(
    "garmin_session_renewals_total",
    "Total session renewal attempts",
    ["outcome"],  # outcome: success, failure
)

api_requests_total = Counter(
    "garmin_api_requests_total",
    "Total Garmin Connect API requests",
    ["status_class"],  # 2xx, 3xx, 4xx, 5xx
)

pagination_pages_total = Counter(
    "garmin_pagination_pages_total",
    "Total pages fetched by the pagination engine",
)

api_duration_seconds = Histogram(
    "garmin_api_duration_seconds",
    "Duration of Garmin Connect API calls",
    ["kind"],  # kind: json, binary, login
)


def status_class(status: int) -> str:
    return f"{status // 100}xx"
