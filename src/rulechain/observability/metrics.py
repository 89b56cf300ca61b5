"""
Prometheus metrics collection for rulechain

Counts validation runs, the rules that fail and the rule specifications
that cannot be built, and times each run. Metrics live in a private
registry so embedding applications can choose whether to expose them.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# VALIDATION METRICS
# =======================

# Validation runs counter
validations_total = Counter(
    name="rulechain_validations_total",
    documentation="Total number of validation runs",
    labelnames=["outcome"],  # outcome: passed, failed
    registry=REGISTRY,
)

# Rule failures counter
rule_failures_total = Counter(
    name="rulechain_rule_failures_total",
    documentation="Total number of failed rule evaluations",
    labelnames=["rule"],
    registry=REGISTRY,
)

# Validation duration histogram
validation_duration_seconds = Histogram(
    name="rulechain_validation_duration_seconds",
    documentation="Time spent validating one record in seconds",
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

# Rule specification build errors
build_errors_total = Counter(
    name="rulechain_build_errors_total",
    documentation="Total number of rule specifications that failed to build",
    labelnames=["error_type"],  # error_type: UnknownRuleError, RuleParameterError, ...
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def get_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> int:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)

    Returns:
        The port the server listens on
    """
    # Lazy import: the HTTP server is only needed when the endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)
    return metrics_port


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    counter.labels(**labels).inc(value)


def record_validation(passed: bool, duration_seconds: float) -> None:
    """
    Record the outcome and duration of one validation run.

    Args:
        passed: Whether the run ended with an empty error bag
        duration_seconds: Wall-clock duration of the run
    """
    increment_counter(validations_total, outcome="passed" if passed else "failed")
    validation_duration_seconds.observe(duration_seconds)


def record_rule_failure(rule: str) -> None:
    """Record a single failed rule evaluation."""
    increment_counter(rule_failures_total, rule=rule)


def record_build_error(error_type: str) -> None:
    """Record a rule specification that could not be compiled."""
    increment_counter(build_errors_total, error_type=error_type)
