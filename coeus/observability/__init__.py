"""Runtime observability primitives for the render pipeline."""

from __future__ import annotations

from .metrics import (
    ASPECT_MATCH_DURATION,
    COMPUTE_ERRORS,
    RENDER_DURATION,
    WHEEL_ASSEMBLY_DURATION,
    ensure_metrics_registered,
)

__all__ = [
    "ASPECT_MATCH_DURATION",
    "COMPUTE_ERRORS",
    "RENDER_DURATION",
    "WHEEL_ASSEMBLY_DURATION",
    "ensure_metrics_registered",
]
