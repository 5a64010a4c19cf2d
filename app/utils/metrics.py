"""Prometheus counters for RC operations, scraped from /api/v1/metrics."""

from prometheus_client import Counter

RC_OPERATIONS = Counter(
    "rc_operations_total",
    "RC lifecycle operations handled by the service",
    ["operation"],   # create | update | delete | search
)


def record_operation(operation: str):
    RC_OPERATIONS.labels(operation=operation).inc()
