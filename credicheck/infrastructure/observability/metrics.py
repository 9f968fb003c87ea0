"""Prometheus metrics for monitoring purchases, report generation and wallet movements"""

from prometheus_client import Counter, Histogram

# Purchase metrics
purchase_counter = Counter(
    "credicheck_purchase_total",
    "Report purchases attempted",
    ["outcome", "funding_method"],  # authorized | insufficient_funds
)

purchase_amount_counter = Counter(
    "credicheck_purchase_amount_total",
    "Amount charged for report purchases",
    ["requester_class"],
)

# Report generation metrics
report_counter = Counter(
    "credicheck_reports_generated_total",
    "Credit reports generated",
    ["bureau", "risk_tier"],
)

report_failure_counter = Counter(
    "credicheck_report_failures_total",
    "Per-bureau report generation failures",
    ["bureau"],
)

# Wallet metrics
wallet_movement_counter = Counter(
    "credicheck_wallet_movements_total",
    "Wallet balance movements",
    ["purpose", "direction"],  # direction: credit | debit
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_purchase(authorized: bool, funding_method: str, requester_class: str, amount: int) -> None:
    """Record purchase outcome and charged amount"""
    outcome = "authorized" if authorized else "insufficient_funds"
    purchase_counter.labels(outcome=outcome, funding_method=funding_method).inc()
    if authorized:
        purchase_amount_counter.labels(requester_class=requester_class).inc(amount)


def record_report(bureau: str, risk_tier: str) -> None:
    report_counter.labels(bureau=bureau, risk_tier=risk_tier).inc()


def record_report_failure(bureau: str) -> None:
    report_failure_counter.labels(bureau=bureau).inc()


def record_wallet_movement(purpose: str, direction: str) -> None:
    wallet_movement_counter.labels(purpose=purpose, direction=direction.lower()).inc()
