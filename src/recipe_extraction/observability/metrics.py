"""Prometheus metrics instrumentation.

This module provides:
- FastAPI automatic request metrics via prometheus-fastapi-instrumentator
- Extraction outcome counters (per platform and resulting recipe quality)
- AI provider attempt counters (per provider, model and outcome)
- Thumbnail resolution counters (per cascade step that produced the image)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator, metrics

from recipe_extraction.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI

    from recipe_extraction.core.config import Settings

logger = get_logger(__name__)

METRIC_NAMESPACE = "recipe_extraction"

EXTRACTIONS_TOTAL = Counter(
    "extractions_total",
    "Completed extractions by platform and resulting recipe quality",
    labelnames=("platform", "quality"),
    namespace=METRIC_NAMESPACE,
)

PROVIDER_ATTEMPTS_TOTAL = Counter(
    "provider_attempts_total",
    "AI provider attempts by provider, model and outcome",
    labelnames=("provider", "model", "outcome"),
    namespace=METRIC_NAMESPACE,
)

THUMBNAIL_RESOLUTIONS_TOTAL = Counter(
    "thumbnail_resolutions_total",
    "Thumbnail resolutions by the cascade step that produced the image",
    labelnames=("source",),
    namespace=METRIC_NAMESPACE,
)


def setup_metrics(app: FastAPI, settings: Settings) -> Instrumentator | None:
    """Instrument the app and expose ``{prefix}/metrics``.

    Returns:
        The configured Instrumentator, or None when metrics are disabled.
    """
    if not settings.observability.metrics.enabled:
        logger.info("Metrics collection disabled")
        return None

    prefix = settings.api.v1_prefix
    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=[
            f"{prefix}/health",
            f"{prefix}/ready",
            f"{prefix}/metrics",
        ],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.add(
        metrics.default(
            metric_namespace=METRIC_NAMESPACE,
            metric_subsystem="http",
            should_only_respect_2xx_for_highr=False,
        )
    )
    instrumentator.instrument(app)

    metrics_endpoint = f"{prefix}/metrics"
    instrumentator.expose(
        app,
        endpoint=metrics_endpoint,
        include_in_schema=True,
        tags=["Monitoring"],
    )
    logger.info("Prometheus metrics configured", endpoint=metrics_endpoint)
    return instrumentator


__all__ = [
    "EXTRACTIONS_TOTAL",
    "PROVIDER_ATTEMPTS_TOTAL",
    "THUMBNAIL_RESOLUTIONS_TOTAL",
    "setup_metrics",
]
