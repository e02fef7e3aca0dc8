"""Exception taxonomy raised by the render-assembly pipeline.

Every error here is a validation or logic failure on caller-supplied data.
None of them is transient, so callers should not retry.
"""

from __future__ import annotations

__all__ = [
    "CoeusError",
    "DuplicateObjectId",
    "InvalidEphemerisData",
    "LayerKeyConflict",
    "UnknownAspectDefinition",
    "UnknownLayerError",
    "WheelOverlapError",
]


class CoeusError(Exception):
    """Base class for all pipeline failures."""


class InvalidEphemerisData(CoeusError, ValueError):
    """Raised when a raw longitude or speed is missing or not a finite number."""


class UnknownAspectDefinition(CoeusError, KeyError):
    """Raised when orb settings reference an aspect absent from the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown aspect definition: {self.name!r}"


class DuplicateObjectId(CoeusError, ValueError):
    """Raised when one layer carries two positions for the same object."""

    def __init__(self, layer: str, object_id: str) -> None:
        super().__init__(f"layer {layer!r} contains duplicate object id {object_id!r}")
        self.layer = layer
        self.object_id = object_id


class WheelOverlapError(CoeusError, ValueError):
    """Raised when assembled ring geometry breaks ordering or containment."""


class UnknownLayerError(CoeusError, KeyError):
    """Raised when a layer combination or lookup names a layer that is not present."""

    def __init__(self, layer: str) -> None:
        super().__init__(layer)
        self.layer = layer

    def __str__(self) -> str:
        return f"unknown layer: {self.layer!r}"


class LayerKeyConflict(CoeusError, ValueError):
    """Raised when two aspect sets of one render would share a key."""

    def __init__(self, key: str, detail: str) -> None:
        super().__init__(f"aspect set key {key!r} {detail}")
        self.key = key
