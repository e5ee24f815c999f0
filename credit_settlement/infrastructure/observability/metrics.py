"""Prometheus metrics for monitoring settlement quotes, refusals and purchase lookups"""

from prometheus_client import Counter, Histogram

# Quote metrics
settlement_quote_counter = Counter(
    "settlement_quote_total",
    "Settlement quotes issued",
    ["tier_type"],  # discount | neutral | interest
)

settlement_refusal_counter = Counter(
    "settlement_refusal_total",
    "Settlement quotes or payment requests refused",
    ["kind"],
)

payment_intent_counter = Counter(
    "settlement_payment_intent_total",
    "Validated payment intents",
    ["mode"],  # full | partial
)

# Purchase service metrics
purchase_fetch_failures_counter = Counter(
    "purchase_fetch_failures_total",
    "Failed purchase service calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(tier_type: str) -> None:
    settlement_quote_counter.labels(tier_type=tier_type).inc()


def record_refusal(kind: str) -> None:
    settlement_refusal_counter.labels(kind=kind).inc()


def record_payment_intent(mode: str) -> None:
    payment_intent_counter.labels(mode=mode).inc()
