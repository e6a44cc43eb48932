"""Prometheus metrics for calculator usage, alerts and milestones"""

from prometheus_client import Counter, Histogram

calculation_counter = Counter(
    "propcalc_calculation_total",
    "Calculator invocations",
    ["calculation"],  # cgt | depreciation | yield | benchmark | forecast | ...
)

benchmark_status_counter = Counter(
    "propcalc_benchmark_status_total",
    "Benchmark outcomes by category",
    ["category", "status"],  # status: below | average | above
)

anomaly_alert_counter = Counter(
    "propcalc_anomaly_alerts_total",
    "Anomaly alerts raised",
    ["alert_type"],
)

milestone_counter = Counter(
    "propcalc_milestones_total",
    "Equity milestones recorded",
    ["milestone_type"],  # lvr | equity_amount
)

job_failure_counter = Counter(
    "propcalc_job_failures_total",
    "Scheduled job runs that failed",
    ["job"],
)

request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(calculation: str) -> None:
    calculation_counter.labels(calculation=calculation).inc()


def record_benchmark(category: str, status: str) -> None:
    benchmark_status_counter.labels(category=category, status=status).inc()
