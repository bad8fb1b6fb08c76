"""Prometheus metrics for provider health, fallback rates and search outcomes"""

from prometheus_client import Counter, Histogram

# Provider metrics
provider_parse_counter = Counter(
    "loan_finder_provider_parse_total",
    "Provider parse attempts",
    ["provider", "outcome"],  # success | failure
)

provider_latency_histogram = Histogram(
    "loan_finder_provider_latency_seconds",
    "Provider parse latency",
    ["provider"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

provider_fallback_counter = Counter(
    "loan_finder_provider_fallback_total",
    "Fallbacks to the alternate provider",
    ["from_provider", "to_provider"],
)

# Search metrics
search_counter = Counter(
    "loan_finder_search_total",
    "Loan searches by outcome",
    ["outcome"],  # success | PARSE_FAILURE | VALIDATION_ERROR | INTERNAL_ERROR
)

search_results_histogram = Histogram(
    "loan_finder_search_results",
    "Eligible loans returned per successful search",
    buckets=[0, 1, 2, 3, 5, 10, 25],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_parse(provider: str, succeeded: bool, duration_seconds: float) -> None:
    provider_parse_counter.labels(provider=provider, outcome="success" if succeeded else "failure").inc()
    provider_latency_histogram.labels(provider=provider).observe(duration_seconds)


def record_fallback(from_provider: str, to_provider: str) -> None:
    provider_fallback_counter.labels(from_provider=from_provider, to_provider=to_provider).inc()


def record_search(success: bool, total_found: int, error_kind: str = "") -> None:
    """Record search outcome; result counts only for successful searches"""
    search_counter.labels(outcome="success" if success else error_kind or "failure").inc()
    if success:
        search_results_histogram.observe(total_found)
