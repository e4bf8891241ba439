"""Prometheus instrumentation for the FastAPI application."""

from __future__ import annotations

import os
from typing import Callable, Final

from fastapi import FastAPI
from fastapi.responses import Response
from prometheus_client import CollectorRegistry, Histogram, multiprocess
from prometheus_client.openmetrics.exposition import generate_latest as generate_openmetrics
from prometheus_fastapi_instrumentator import Instrumentator, metrics

OPENMETRICS_MEDIA_TYPE: Final[str] = "application/openmetrics-text; version=1.0.0; charset=utf-8"

# Upstream calls dominate latency, so the buckets stretch to the client timeout range.
REQUEST_LATENCY_BUCKETS: Final[tuple[float, ...]] = (
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
    30.0,
    float("inf"),
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument ``app`` and expose GET /metrics."""

    instrumentator = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        should_respect_env_var=False,
        excluded_handlers=[r"/metrics"],
    )
    instrumentator.add(metrics.default())

    latency = _latency_with_request_id()
    if latency is not None:
        instrumentator.add(latency)

    instrumentator.instrument(app)
    _register_metrics_endpoint(app, instrumentator.registry)


def _latency_with_request_id() -> Callable[[metrics.Info], None] | None:
    """Per-route latency histogram with the request id attached as exemplar."""

    try:
        histogram = Histogram(
            "posts_gateway_request_latency_seconds",
            "Latency of proxied requests, with request_id exemplars.",
            labelnames=("handler", "method", "status"),
            buckets=REQUEST_LATENCY_BUCKETS,
        )
    except ValueError as error:  # pragma: no cover - only when the app is built twice
        if "Duplicated time" in str(error):
            return None
        raise

    def instrumentation(info: metrics.Info) -> None:
        request_id = getattr(info.request.state, "request_id", None)
        exemplar = {"request_id": request_id} if request_id else None
        observed = histogram.labels(info.modified_handler, info.method, info.modified_status)
        observed.observe(info.modified_duration, exemplar=exemplar)

    return instrumentation


def _register_metrics_endpoint(app: FastAPI, registry: CollectorRegistry) -> None:
    @app.get("/metrics", include_in_schema=False, tags=["observability"])
    async def metrics_endpoint() -> Response:
        active_registry = registry
        if "PROMETHEUS_MULTIPROC_DIR" in os.environ:
            active_registry = CollectorRegistry()
            multiprocess.MultiProcessCollector(active_registry)
        return Response(
            content=generate_openmetrics(active_registry),
            media_type=OPENMETRICS_MEDIA_TYPE,
        )


__all__ = ["setup_metrics"]
