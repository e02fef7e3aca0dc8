"""Static catalog of named aspect angles."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

__all__ = [
    "ASPECT_CATALOG",
    "AspectDefinition",
    "MAJOR_ASPECTS",
    "catalog_from",
]


@dataclass(frozen=True, slots=True)
class AspectDefinition:
    """A named aspect and its exact angle in degrees."""

    name: str
    exact_angle_deg: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.strip().lower())
        if not self.name:
            raise ValueError("aspect name must not be empty")
        angle = float(self.exact_angle_deg)
        if not math.isfinite(angle) or not 0.0 <= angle <= 180.0:
            raise ValueError(f"{self.name}: exact angle {angle!r} outside [0, 180]")
        object.__setattr__(self, "exact_angle_deg", angle)


_BASE_ANGLES = {
    "conjunction": 0.0,
    "semisextile": 30.0,
    "undecile": 32.7273,
    "semiquintile": 36.0,
    "novile": 40.0,
    "semisquare": 45.0,
    "septile": 51.4286,
    "sextile": 60.0,
    "quintile": 72.0,
    "binovile": 80.0,
    "square": 90.0,
    "biseptile": 102.8571,
    "tredecile": 108.0,
    "trine": 120.0,
    "sesquisquare": 135.0,
    "biquintile": 144.0,
    "quincunx": 150.0,
    "triseptile": 154.2857,
    "opposition": 180.0,
}

ASPECT_CATALOG: Mapping[str, AspectDefinition] = MappingProxyType(
    {name: AspectDefinition(name, angle) for name, angle in _BASE_ANGLES.items()}
)

MAJOR_ASPECTS = frozenset({"conjunction", "sextile", "square", "trine", "opposition"})


def catalog_from(
    definitions: Iterable[AspectDefinition] | Mapping[str, AspectDefinition] | None,
) -> Mapping[str, AspectDefinition]:
    """Return a name-keyed catalog for ``definitions`` (the built-in one when ``None``)."""

    if definitions is None:
        return ASPECT_CATALOG
    if isinstance(definitions, Mapping):
        definitions = definitions.values()
    out: dict[str, AspectDefinition] = {}
    for definition in definitions:
        if definition.name in out:
            raise ValueError(f"duplicate aspect definition {definition.name!r}")
        out[definition.name] = definition
    return MappingProxyType(out)
