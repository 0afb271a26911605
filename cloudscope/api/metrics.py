"""Prometheus metrics for CloudScope.

Tracks HTTP request counts and latencies for the API server, plus
enumeration run outcomes and per-type normalization results recorded by
the orchestrator.
"""

from __future__ import annotations

import logging
import time

from flask import Flask, Response, g, request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

logger = logging.getLogger(__name__)

# Request metrics
REQUEST_COUNT = Counter(
    "cloudscope_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

REQUEST_LATENCY = Histogram(
    "cloudscope_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Enumeration metrics
ENUMERATION_COUNT = Counter(
    "cloudscope_enumerations_total",
    "Total enumeration runs",
    ["provider", "status"]
)

ENUMERATION_DURATION = Histogram(
    "cloudscope_enumeration_duration_seconds",
    "Enumeration run duration in seconds",
    ["provider"],
    buckets=[0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0]
)

RESOURCES_NORMALIZED = Counter(
    "cloudscope_resources_normalized_total",
    "Total resources normalized",
    ["provider", "resource_type"]
)

NORMALIZATION_FAILURES = Counter(
    "cloudscope_normalization_failures_total",
    "Resource types whose normalization failed",
    ["provider", "resource_type"]
)

APP_INFO = Info(
    "cloudscope",
    "CloudScope application information"
)


def init_metrics(app: Flask, version: str) -> None:
    """Install request timing hooks and the /metrics endpoint.

    Args:
        app: Flask application instance
        version: Application version string
    """
    APP_INFO.info({"version": version, "name": "cloudscope"})

    @app.before_request
    def start_timer() -> None:
        g.start_time = time.time()

    @app.after_request
    def record_request(response: Response) -> Response:
        endpoint = request.url_rule.rule if request.url_rule else "unmatched"
        if hasattr(g, "start_time"):
            REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(time.time() - g.start_time)
        REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=response.status_code).inc()
        return response

    @app.route("/metrics")
    def metrics() -> Response:
        """Expose Prometheus metrics endpoint."""
        return Response(generate_latest(REGISTRY), mimetype=CONTENT_TYPE_LATEST)


def track_enumeration(provider: str, status: str, duration: float) -> None:
    """Record a finished enumeration run.

    Args:
        provider: Provider registry key (aws, aliyun, gcp, azure)
        status: Final phase (completed, failed, cancelled)
        duration: Duration in seconds
    """
    ENUMERATION_COUNT.labels(provider=provider, status=status).inc()
    ENUMERATION_DURATION.labels(provider=provider).observe(duration)


def track_resources_normalized(provider: str, resource_type: str, count: int) -> None:
    if count:
        RESOURCES_NORMALIZED.labels(provider=provider, resource_type=resource_type).inc(count)


def track_normalization_failure(provider: str, resource_type: str) -> None:
    NORMALIZATION_FAILURES.labels(provider=provider, resource_type=resource_type).inc()
