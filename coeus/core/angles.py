"""Angular utilities shared across the render pipeline.

Longitudes are compared against aspect targets constantly. Doing so with raw
modulo arithmetic invites subtle bugs around the 0°/360° boundary, so the
helpers in this module centralise degree normalisation, circular separation
and the applying vs. separating decision.
"""

from __future__ import annotations

import math
from typing import Final

__all__ = [
    "EPSILON_DEG",
    "angular_separation",
    "is_applying",
    "normalize_degrees",
    "separation_rate",
    "signed_delta",
]


EPSILON_DEG: Final[float] = 1e-9


def normalize_degrees(angle: float) -> float:
    """Return ``angle`` normalised to the ``[0, 360)`` interval.

    Values within ``1e-9`` of ``360`` are coerced to ``0`` so callers can rely
    on a consistent wrap-around contract when comparing angles.
    """

    wrapped = math.fmod(float(angle), 360.0)
    if wrapped < 0.0:
        wrapped += 360.0
    if wrapped >= 360.0 - EPSILON_DEG:
        wrapped = 0.0
    return wrapped


def signed_delta(angle: float) -> float:
    """Return ``angle`` wrapped to the ``(-180, 180]`` interval."""

    wrapped = normalize_degrees(angle)
    if wrapped > 180.0:
        return wrapped - 360.0
    return wrapped


def angular_separation(lon_a: float, lon_b: float) -> float:
    """Return the absolute circular separation in degrees within ``[0, 180]``."""

    d = abs(normalize_degrees(lon_a) - normalize_degrees(lon_b))
    if d > 180.0:
        d = 360.0 - d
    return d


def separation_rate(
    lon_a: float,
    speed_a: float,
    lon_b: float,
    speed_b: float,
) -> float:
    """Return d(separation)/dt in degrees per day for two moving points.

    The separation grows when the relative velocity points away from the
    shorter arc joining the two longitudes.
    """

    delta = signed_delta(lon_b - lon_a)
    relative_speed = speed_b - speed_a
    if delta == 0.0:
        return abs(relative_speed)
    if delta == 180.0:
        return -abs(relative_speed)
    return math.copysign(1.0, delta) * relative_speed


def is_applying(
    separation_deg: float,
    exact_angle_deg: float,
    rate_deg_per_day: float,
    *,
    tolerance: float = EPSILON_DEG,
) -> bool:
    """Return ``True`` when the separation is closing in on ``exact_angle_deg``.

    A pair sitting exactly on the aspect, or one without relative motion, is
    not applying.
    """

    offset = separation_deg - exact_angle_deg
    if abs(offset) <= tolerance or abs(rate_deg_per_day) <= tolerance:
        return False
    return offset * rate_deg_per_day < 0.0
