"""Prometheus metric definitions shared across render pipeline components."""

from __future__ import annotations

import logging

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

__all__ = [
    "ASPECT_MATCH_DURATION",
    "COMPUTE_ERRORS",
    "RENDER_DURATION",
    "WHEEL_ASSEMBLY_DURATION",
    "ensure_metrics_registered",
]

LOG = logging.getLogger(__name__)


RENDER_DURATION = Histogram(
    "coeus_render_duration_seconds",
    "Duration of full render assemblies.",
    registry=None,
)


ASPECT_MATCH_DURATION = Histogram(
    "coeus_aspect_match_duration_seconds",
    "Duration of aspect matching per layer combination.",
    ("source",),
    registry=None,
)


WHEEL_ASSEMBLY_DURATION = Histogram(
    "coeus_wheel_assembly_duration_seconds",
    "Duration of wheel ring geometry assembly.",
    registry=None,
)


COMPUTE_ERRORS = Counter(
    "coeus_compute_errors_total",
    "Count of failures surfaced by the render pipeline.",
    ("component", "error"),
    registry=None,
)


_PIPELINE_METRICS: tuple[Counter | Histogram, ...] = (
    RENDER_DURATION,
    ASPECT_MATCH_DURATION,
    WHEEL_ASSEMBLY_DURATION,
    COMPUTE_ERRORS,
)


def ensure_metrics_registered(
    registry: CollectorRegistry | None = None,
) -> CollectorRegistry:
    """Attach the pipeline collectors to ``registry`` and return it.

    The process-wide default registry is used when none is given. Collectors
    that are already attached stay as they are.
    """

    target = registry or REGISTRY
    for metric in _PIPELINE_METRICS:
        try:
            target.register(metric)
        except ValueError:
            LOG.debug("collector %r already registered", metric)
    return target
