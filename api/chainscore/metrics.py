from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# Reputation engine metrics
reputation_records = Counter(
    "chainscore_reputation_records_total",
    "Total reputation records assembled",
    ["profile"],
)

insight_narrations = Counter(
    "chainscore_insight_narrations_total",
    "Insight summary narration attempts",
    ["outcome"],  # outcome: success | skipped | timeout | error | empty
)

narration_duration = Histogram(
    "chainscore_narration_duration_seconds",
    "Time spent waiting on the insight narrator",
    buckets=[0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0],
)

# HTTP request metrics (from middleware)
http_requests = Counter(
    "chainscore_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

http_request_duration = Histogram(
    "chainscore_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


async def metrics_endpoint():
    """FastAPI endpoint handler that returns Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
