"""coeus: render-assembly pipeline for chart wheels.

Turns stored chart configuration plus raw ephemeris samples into normalized
layers, aspect sets and validated wheel geometry. Everything here is a pure,
synchronous, in-memory transformation.
"""

from __future__ import annotations

import logging

from .aspects import ASPECT_CATALOG, AspectDefinition, AspectPair, AspectSet, compute_aspects
from .core import (
    CelestialPosition,
    CoordinateSystem,
    PositionIndex,
    RawPosition,
    RenderLayer,
    ZeroPoint,
    build_indexes,
    denormalize,
    normalize,
)
from .errors import (
    CoeusError,
    DuplicateObjectId,
    InvalidEphemerisData,
    LayerKeyConflict,
    UnknownAspectDefinition,
    UnknownLayerError,
    WheelOverlapError,
)
from .render import (
    ChartInstanceRecord,
    ChartInstanceSummary,
    ChartSettings,
    LayerCombination,
    LayerConfig,
    RenderResponse,
    assemble_render,
    resolve_effective_settings,
)
from .wheel import RingDefinition, RingSpec, WheelDefinition, WheelTemplate, assemble_wheel

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ASPECT_CATALOG",
    "AspectDefinition",
    "AspectPair",
    "AspectSet",
    "CelestialPosition",
    "ChartInstanceRecord",
    "ChartInstanceSummary",
    "ChartSettings",
    "CoeusError",
    "CoordinateSystem",
    "DuplicateObjectId",
    "InvalidEphemerisData",
    "LayerCombination",
    "LayerKeyConflict",
    "LayerConfig",
    "PositionIndex",
    "RawPosition",
    "RenderLayer",
    "RenderResponse",
    "RingDefinition",
    "RingSpec",
    "UnknownAspectDefinition",
    "UnknownLayerError",
    "WheelDefinition",
    "WheelOverlapError",
    "WheelTemplate",
    "ZeroPoint",
    "__version__",
    "assemble_render",
    "assemble_wheel",
    "build_indexes",
    "compute_aspects",
    "denormalize",
    "normalize",
    "resolve_effective_settings",
]
