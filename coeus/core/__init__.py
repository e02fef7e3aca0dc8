"""Coordinate handling, position records and the position index."""

from __future__ import annotations

from .angles import angular_separation, normalize_degrees, signed_delta
from .coordinates import (
    DEFAULT_COORDINATE_SYSTEM,
    CoordinateSystem,
    ZeroPoint,
    denormalize,
    normalize,
    normalize_position,
    normalize_speed,
)
from .index import PositionIndex, build_indexes
from .positions import CelestialPosition, RawPosition, RenderLayer

__all__ = [
    "DEFAULT_COORDINATE_SYSTEM",
    "CelestialPosition",
    "CoordinateSystem",
    "PositionIndex",
    "RawPosition",
    "RenderLayer",
    "ZeroPoint",
    "angular_separation",
    "build_indexes",
    "denormalize",
    "normalize",
    "normalize_degrees",
    "normalize_position",
    "normalize_speed",
    "signed_delta",
]
