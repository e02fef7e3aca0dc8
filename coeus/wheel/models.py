"""Wheel templates (storage records) and assembled ring geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = [
    "DEFAULT_SEGMENT_COUNTS",
    "RadiusSpec",
    "RingDefinition",
    "RingSpec",
    "WheelDefinition",
    "WheelTemplate",
]


DEFAULT_SEGMENT_COUNTS: dict[str, int] = {
    "signs": 12,
    "houses": 12,
    "decans": 36,
    "degrees": 360,
}


class RingSpec(BaseModel):
    """One ring as declared by a template or an override.

    Unset fields on an override inherit from the matching template ring, so
    ``model_dump(exclude_unset=True)`` is the override payload.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str | None = None
    kind: str | None = None
    width: float | None = Field(None, allow_inf_nan=False)
    segment_count: int | None = Field(None, alias="segmentCount", ge=0)
    enabled: bool = True
    label: str | None = None


class RadiusSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    inner: float = Field(0.0, allow_inf_nan=False)
    outer: float = Field(100.0, allow_inf_nan=False)


class WheelTemplate(BaseModel):
    """Wheel record as served by the storage collaborator."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = "default"
    name: str = "Default Wheel"
    description: str | None = None
    radius: RadiusSpec = Field(default_factory=RadiusSpec)
    rings: tuple[RingSpec, ...] = ()

    @model_validator(mode="after")
    def _unique_ring_keys(self) -> "WheelTemplate":
        seen: set[str] = set()
        for ring in self.rings:
            key = ring.key or ring.kind
            if not key:
                raise ValueError("template rings need a key or a kind")
            if key in seen:
                raise ValueError(f"duplicate ring key {key!r}")
            seen.add(key)
        return self


@dataclass(frozen=True, slots=True)
class RingDefinition:
    """Concrete ring span on an assembled wheel."""

    key: str
    kind: str
    radius_start: float
    radius_end: float
    segment_count: int = 0
    label: str | None = None

    @property
    def width(self) -> float:
        return self.radius_end - self.radius_start

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "key": self.key,
            "kind": self.kind,
            "radiusStart": self.radius_start,
            "radiusEnd": self.radius_end,
            "segmentCount": self.segment_count,
        }
        if self.label is not None:
            payload["label"] = self.label
        return payload


@dataclass(frozen=True, slots=True)
class WheelDefinition:
    """Validated concentric-ring geometry ready for the rendering front end."""

    id: str
    name: str
    radius_inner: float
    radius_outer: float
    rings: tuple[RingDefinition, ...] = ()

    def ring(self, key: str) -> RingDefinition | None:
        return next((ring for ring in self.rings if ring.key == key), None)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "radius": {"inner": self.radius_inner, "outer": self.radius_outer},
            "rings": [ring.as_dict() for ring in self.rings],
        }
