"""Prometheus metrics for settlement volume, failures, and request latency"""

from prometheus_client import Counter, Histogram

from splitledger.domain.models import DuesReport, SettlementResult

# Settlement metrics
settlement_counter = Counter(
    "splitledger_settlement_total",
    "Settlement computations performed",
    ["scope"],  # group | global
)

settlement_failure_counter = Counter(
    "splitledger_settlement_failures_total",
    "Settlement computations that degraded or failed",
    ["scope", "error"],
)

rejected_split_counter = Counter(
    "splitledger_rejected_splits_total",
    "Splits dropped for unrepresentable amounts",
)

transaction_count_histogram = Histogram(
    "splitledger_settlement_transactions",
    "Transactions recommended per group settlement",
    buckets=[0, 1, 2, 5, 10, 25, 50, 100],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_settlement(result: SettlementResult) -> None:
    """Record a standalone group settlement"""
    settlement_counter.labels(scope="group").inc()
    transaction_count_histogram.observe(len(result.transactions))


def record_settlement_failure(scope: str, error: Exception) -> None:
    settlement_failure_counter.labels(scope=scope, error=type(error).__name__).inc()


def record_dues_report(report: DuesReport) -> None:
    """Record per-group, global and rejection counts carried by a dues report"""
    for group in report.groups:
        settlement_counter.labels(scope="group").inc()
        if group.errored:
            settlement_failure_counter.labels(scope="group", error="degraded").inc()

    settlement_counter.labels(scope="global").inc()
    if report.global_error is not None:
        settlement_failure_counter.labels(scope="global", error="degraded").inc()

    if report.rejected_splits:
        rejected_split_counter.inc(len(report.rejected_splits))
