"""Concentric ring geometry assembly."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import Any

from ..errors import WheelOverlapError
from ..observability import WHEEL_ASSEMBLY_DURATION
from .defaults import DEFAULT_WHEEL
from .merging import RingOverrides, merge_rings
from .models import DEFAULT_SEGMENT_COUNTS, RingDefinition, RingSpec, WheelDefinition, WheelTemplate

__all__ = ["assemble_wheel", "layout_rings", "validate_wheel"]

LOG = logging.getLogger(__name__)

_EPS = 1e-9


def _coerce_template(template: WheelTemplate | Mapping[str, Any] | None) -> WheelTemplate:
    if template is None:
        return DEFAULT_WHEEL
    if isinstance(template, WheelTemplate):
        return template
    return WheelTemplate.model_validate(template)


def layout_rings(
    rings: Sequence[RingSpec],
    inner: float,
    outer: float,
) -> list[RingDefinition]:
    """Stack ``rings`` from ``inner`` outward in declaration order.

    Rings with an explicit ``width`` keep it; the others split whatever span
    is left equally.
    """

    explicit = sum(ring.width for ring in rings if ring.width is not None)
    flexible = [ring for ring in rings if ring.width is None]
    share = (outer - inner - explicit) / len(flexible) if flexible else 0.0

    out: list[RingDefinition] = []
    cursor = inner
    for idx, ring in enumerate(rings):
        width = ring.width if ring.width is not None else share
        end = cursor + width
        if idx == len(rings) - 1 and abs(end - outer) <= _EPS:
            end = outer
        kind = ring.kind or ring.key or "ring"
        segments = ring.segment_count
        if segments is None:
            segments = DEFAULT_SEGMENT_COUNTS.get(kind, 0)
        out.append(
            RingDefinition(
                key=ring.key or kind,
                kind=kind,
                radius_start=cursor,
                radius_end=end,
                segment_count=segments,
                label=ring.label,
            )
        )
        cursor = end
    return out


def validate_wheel(wheel: WheelDefinition) -> WheelDefinition:
    """Check ordering and containment of ``wheel``'s rings.

    Raises
    ------
    WheelOverlapError
        When a ring is empty or inverted, rings overlap or are out of order,
        or a ring leaves ``[inner, outer]``.
    """

    inner, outer = wheel.radius_inner, wheel.radius_outer
    if not inner < outer:
        raise WheelOverlapError(f"wheel {wheel.id!r}: inner radius {inner} must be below outer {outer}")
    previous: RingDefinition | None = None
    for ring in wheel.rings:
        if not ring.radius_start < ring.radius_end:
            raise WheelOverlapError(
                f"ring {ring.key!r}: start {ring.radius_start} is not below end {ring.radius_end}"
            )
        if ring.radius_start < inner - _EPS or ring.radius_end > outer + _EPS:
            raise WheelOverlapError(
                f"ring {ring.key!r} [{ring.radius_start}, {ring.radius_end}] "
                f"exceeds wheel radius [{inner}, {outer}]"
            )
        if previous is not None:
            if not previous.radius_start < ring.radius_start:
                raise WheelOverlapError(f"ring {ring.key!r} is out of order after {previous.key!r}")
            if previous.radius_end > ring.radius_start + _EPS:
                raise WheelOverlapError(f"ring {ring.key!r} overlaps {previous.key!r}")
        previous = ring
    return wheel


def assemble_wheel(
    template: WheelTemplate | Mapping[str, Any] | None = None,
    overrides: RingOverrides | None = None,
    include_system_defaults: bool = True,
) -> WheelDefinition:
    """Produce validated ring geometry from ``template`` and per-chart ``overrides``.

    With ``include_system_defaults`` the template rings form the base and each
    override replaces the fields it sets on the ring with the same key; rings
    only present in the overrides are appended. Without it the overrides alone
    define the rings.
    """

    start = perf_counter()
    base = _coerce_template(template)
    specs = merge_rings(base.rings, overrides, include_base=include_system_defaults)
    rings = layout_rings(specs, base.radius.inner, base.radius.outer)
    wheel = validate_wheel(
        WheelDefinition(
            id=base.id,
            name=base.name,
            radius_inner=base.radius.inner,
            radius_outer=base.radius.outer,
            rings=tuple(rings),
        )
    )
    WHEEL_ASSEMBLY_DURATION.observe(perf_counter() - start)
    LOG.debug("assembled wheel %r with %d rings", wheel.id, len(wheel.rings))
    return wheel
