"""Prometheus metrics for analysis outcomes, bill cache efficiency, and ledger API performance"""

from prometheus_client import Counter, Histogram

# Analysis metrics
analysis_counter = Counter(
    "ledger_insights_analysis_total",
    "Analysis operations executed",
    ["operation", "outcome"],  # outcome: ok | validation | fetch | calculation | configuration
)

# Bill cache metrics
bill_cache_counter = Counter(
    "ledger_insights_bill_cache_total",
    "Bill cache lookups",
    ["result"],  # hit | miss
)

# Ledger API metrics
ledger_latency_histogram = Histogram(
    "ledger_request_latency_seconds",
    "Ledger API response time",
    ["resource"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

ledger_failure_counter = Counter(
    "ledger_request_failures_total",
    "Failed ledger API calls (including retried attempts)",
    ["resource"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(operation: str, outcome: str) -> None:
    """Record the outcome of a single analysis run"""
    analysis_counter.labels(operation=operation, outcome=outcome).inc()
