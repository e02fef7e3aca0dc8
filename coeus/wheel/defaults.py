"""System default wheel template."""

from __future__ import annotations

from .models import RadiusSpec, RingSpec, WheelTemplate

__all__ = ["DEFAULT_WHEEL", "default_wheel"]


DEFAULT_WHEEL = WheelTemplate(
    id="system-default",
    name="Standard Wheel",
    description="Houses inside, planets, signs and a degree scale outermost.",
    radius=RadiusSpec(inner=0.0, outer=100.0),
    rings=(
        RingSpec(key="aspects", kind="aspects", width=40.0),
        RingSpec(key="houses", kind="houses", width=12.0),
        RingSpec(key="planets", kind="planets"),
        RingSpec(key="signs", kind="signs", width=14.0),
        RingSpec(key="degrees", kind="degrees", width=6.0),
    ),
)


def default_wheel(inner: float | None = None, outer: float | None = None) -> WheelTemplate:
    """Return the system default template, optionally with a different radius."""

    if inner is None and outer is None:
        return DEFAULT_WHEEL
    radius = RadiusSpec(
        inner=DEFAULT_WHEEL.radius.inner if inner is None else inner,
        outer=DEFAULT_WHEEL.radius.outer if outer is None else outer,
    )
    return DEFAULT_WHEEL.model_copy(update={"radius": radius})
