"""Wheel templates, override merging and ring geometry assembly."""

from .assembler import assemble_wheel, layout_rings, validate_wheel
from .defaults import DEFAULT_WHEEL, default_wheel
from .merging import merge_rings
from .models import RadiusSpec, RingDefinition, RingSpec, WheelDefinition, WheelTemplate

__all__ = [
    "DEFAULT_WHEEL",
    "RadiusSpec",
    "RingDefinition",
    "RingSpec",
    "WheelDefinition",
    "WheelTemplate",
    "assemble_wheel",
    "default_wheel",
    "layout_rings",
    "merge_rings",
    "validate_wheel",
]
