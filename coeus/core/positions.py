"""Position records flowing through the render pipeline."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import DuplicateObjectId, InvalidEphemerisData

__all__ = ["CelestialPosition", "RawPosition", "RenderLayer"]


_ID_KEYS = ("objectId", "object_id", "id", "name")
_LON_KEYS = ("longitude", "longitudeDeg", "longitude_deg", "lon")
_SPEED_KEYS = ("speed", "speedDeg", "speed_deg_per_day", "speed_lon")


def _first(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


@dataclass(frozen=True, slots=True)
class RawPosition:
    """Untrusted ephemeris sample for one object, in ecliptic degrees."""

    object_id: str
    longitude: Any
    speed: Any = None

    @classmethod
    def coerce(cls, value: RawPosition | Mapping[str, Any]) -> RawPosition:
        if isinstance(value, RawPosition):
            return value
        if not isinstance(value, Mapping):
            raise InvalidEphemerisData(
                f"ephemeris sample must be a mapping, got {type(value).__name__}"
            )
        object_id = _first(value, _ID_KEYS)
        if object_id is None or not str(object_id).strip():
            raise InvalidEphemerisData("ephemeris sample is missing an object id")
        return cls(
            object_id=str(object_id).strip(),
            longitude=_first(value, _LON_KEYS),
            speed=_first(value, _SPEED_KEYS),
        )


@dataclass(frozen=True, slots=True)
class CelestialPosition:
    """Normalized longitude of a single object within one layer."""

    object_id: str
    longitude_deg: float
    speed_deg_per_day: float | None = None
    retrograde: bool = False

    def __post_init__(self) -> None:
        lon = self.longitude_deg
        if not math.isfinite(lon) or not 0.0 <= lon < 360.0:
            raise InvalidEphemerisData(
                f"{self.object_id}: longitude {lon!r} is outside [0, 360)"
            )

    def as_dict(self) -> dict[str, Any]:
        return {
            "objectId": self.object_id,
            "longitude": self.longitude_deg,
            "speed": self.speed_deg_per_day,
            "retrograde": self.retrograde,
        }


@dataclass(frozen=True, slots=True)
class RenderLayer:
    """Named snapshot of object positions (natal, transit, progressed, ...)."""

    key: str
    kind: str
    positions: tuple[CelestialPosition, ...] = ()

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for position in self.positions:
            if position.object_id in seen:
                raise DuplicateObjectId(self.key, position.object_id)
            seen.add(position.object_id)
        ordered = tuple(sorted(self.positions, key=lambda p: p.object_id))
        object.__setattr__(self, "positions", ordered)

    @classmethod
    def from_positions(
        cls, key: str, positions: Iterable[CelestialPosition], kind: str | None = None
    ) -> RenderLayer:
        return cls(key=key, kind=kind or key, positions=tuple(positions))

    @property
    def object_ids(self) -> tuple[str, ...]:
        return tuple(p.object_id for p in self.positions)

    def as_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "objects": {p.object_id: p.as_dict() for p in self.positions},
        }
