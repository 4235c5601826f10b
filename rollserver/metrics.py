# rollserver/metrics.py
from prometheus_client import Counter, Histogram

REQUESTS = Counter(
    "rollserver_requests_total", "Total HTTP requests", ["endpoint", "method", "code"]
)
LATENCY = Histogram(
    "rollserver_request_latency_seconds", "Request latency", ["endpoint", "method"]
)
ROLLS = Counter(
    "rollserver_rolls_total", "Rolls produced by outcome", ["number"]
)
ADMIN_DENIED = Counter(
    "rollserver_admin_denied_total", "Rejected admin requests"
)
