"""Prometheus metrics for monitoring ingestion outcomes, rate lookups, and statement traffic"""

from prometheus_client import Counter, Histogram

# Ingestion metrics
ingestion_counter = Counter(
    "statement_ingestion_total",
    "Transaction events processed by the ingestion pipeline",
    ["outcome"],  # ingested | malformed | persistence_error
)

# Rate provider metrics
rate_lookup_counter = Counter(
    "rate_lookup_total",
    "Currency rate lookups",
    ["outcome"],  # identity | provider | fallback
)

rate_fallback_counter = Counter(
    "rate_fallback_total",
    "Rate lookups downgraded to the identity rate after a provider failure",
)

rate_latency_histogram = Histogram(
    "rate_provider_latency_seconds",
    "Rate provider response time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Statement metrics
statement_counter = Counter(
    "statement_pages_total",
    "Statement pages served",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ingestion(outcome: str) -> None:
    """Record the outcome of a single ingestion attempt"""
    ingestion_counter.labels(outcome=outcome).inc()


def record_rate_lookup(outcome: str) -> None:
    """Record how a rate was obtained; fallbacks are also tallied separately for alerting"""
    rate_lookup_counter.labels(outcome=outcome).inc()
    if outcome == "fallback":
        rate_fallback_counter.inc()
