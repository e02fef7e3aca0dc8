"""Map raw ephemeris longitudes into a chart's angular convention."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import InvalidEphemerisData
from .angles import EPSILON_DEG, normalize_degrees
from .positions import CelestialPosition, RawPosition

__all__ = [
    "SIGN_ORDER",
    "CoordinateSystem",
    "ZeroPoint",
    "DEFAULT_COORDINATE_SYSTEM",
    "denormalize",
    "normalize",
    "normalize_position",
    "normalize_speed",
]


SIGN_ORDER: tuple[str, ...] = (
    "aries",
    "taurus",
    "gemini",
    "cancer",
    "leo",
    "virgo",
    "libra",
    "scorpio",
    "sagittarius",
    "capricorn",
    "aquarius",
    "pisces",
)

_DIRECTION_ALIASES = {
    "cw": "clockwise",
    "clockwise": "clockwise",
    "ccw": "counterclockwise",
    "counterclockwise": "counterclockwise",
    "anticlockwise": "counterclockwise",
}


class ZeroPoint(BaseModel):
    """Angular reference from which longitudes are measured."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: Literal["zodiac"] = "zodiac"
    sign_start: str = Field("aries", alias="signStart")
    offset_degrees: float = Field(0.0, alias="offsetDegrees", allow_inf_nan=False)

    @field_validator("sign_start", mode="before")
    @classmethod
    def _known_sign(cls, value: Any) -> str:
        key = str(value or "").strip().lower()
        if key not in SIGN_ORDER:
            raise ValueError(f"unknown zodiac sign {value!r}")
        return key

    @property
    def effective_offset(self) -> float:
        """Sign start plus offset, folded into ``[0, 360)``."""

        return normalize_degrees(SIGN_ORDER.index(self.sign_start) * 30.0 + self.offset_degrees)


class CoordinateSystem(BaseModel):
    """Angular convention used to express longitudes on a rendered wheel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    angle_unit: Literal["degrees"] = Field("degrees", alias="angleUnit")
    angle_range: tuple[float, float] = Field((0.0, 360.0), alias="angleRange")
    direction: Literal["clockwise", "counterclockwise"] = "clockwise"
    zero_point: ZeroPoint = Field(default_factory=ZeroPoint, alias="zeroPoint")

    @field_validator("direction", mode="before")
    @classmethod
    def _coerce_direction(cls, value: Any) -> str:
        key = str(value or "").strip().lower()
        try:
            return _DIRECTION_ALIASES[key]
        except KeyError:
            raise ValueError(f"unsupported direction {value!r}") from None

    @model_validator(mode="after")
    def _check_range(self) -> "CoordinateSystem":
        lo, hi = self.angle_range
        if not (0.0 <= lo < hi <= 360.0):
            raise ValueError("angleRange must satisfy 0 <= start < end <= 360")
        return self

    @property
    def counterclockwise(self) -> bool:
        return self.direction == "counterclockwise"

    def as_dict(self) -> dict[str, Any]:
        return {
            "angleUnit": self.angle_unit,
            "angleRange": [self.angle_range[0], self.angle_range[1]],
            "direction": "ccw" if self.counterclockwise else "cw",
            "zeroPoint": {
                "type": self.zero_point.type,
                "signStart": self.zero_point.sign_start,
                "offsetDegrees": self.zero_point.offset_degrees,
            },
        }


DEFAULT_COORDINATE_SYSTEM = CoordinateSystem()


def _finite(value: Any, what: str) -> float:
    if value is None:
        raise InvalidEphemerisData(f"{what} is missing")
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidEphemerisData(f"{what} must be a number, got {type(value).__name__}")
    numeric = float(value)
    if not math.isfinite(numeric):
        raise InvalidEphemerisData(f"{what} must be finite, got {numeric!r}")
    return numeric


def _clamp(angle: float, coordinate_system: CoordinateSystem) -> float:
    lo, hi = coordinate_system.angle_range
    clamped = min(max(angle, lo), hi)
    return 0.0 if clamped >= 360.0 - EPSILON_DEG else clamped


def normalize(
    raw_longitude_deg: Any,
    coordinate_system: CoordinateSystem | None = None,
) -> float:
    """Return ``raw_longitude_deg`` expressed in ``coordinate_system``.

    Parameters
    ----------
    raw_longitude_deg:
        Ecliptic longitude in **degrees** as delivered by the ephemeris
        collaborator. Any finite real is accepted and wrapped.
    coordinate_system:
        Target convention; the clockwise Aries-zero system when omitted.

    Raises
    ------
    InvalidEphemerisData
        When the input is missing, non-numeric or not finite.
    """

    cs = coordinate_system or DEFAULT_COORDINATE_SYSTEM
    raw = _finite(raw_longitude_deg, "longitude")
    angle = normalize_degrees(raw - cs.zero_point.effective_offset)
    if cs.counterclockwise:
        angle = normalize_degrees(360.0 - angle)
    return _clamp(angle, cs)


def denormalize(angle_deg: Any, coordinate_system: CoordinateSystem | None = None) -> float:
    """Inverse of :func:`normalize`; returns an ecliptic longitude in ``[0, 360)``."""

    cs = coordinate_system or DEFAULT_COORDINATE_SYSTEM
    angle = normalize_degrees(_finite(angle_deg, "angle"))
    if cs.counterclockwise:
        angle = normalize_degrees(360.0 - angle)
    return normalize_degrees(angle + cs.zero_point.effective_offset)


def normalize_speed(
    raw_speed: Any,
    coordinate_system: CoordinateSystem | None = None,
) -> float | None:
    """Express a signed ecliptic speed in the frame of ``coordinate_system``."""

    if raw_speed is None:
        return None
    cs = coordinate_system or DEFAULT_COORDINATE_SYSTEM
    speed = _finite(raw_speed, "speed")
    return -speed if cs.counterclockwise else speed


def normalize_position(
    raw: RawPosition,
    coordinate_system: CoordinateSystem | None = None,
) -> CelestialPosition:
    """Build a :class:`CelestialPosition` from an untrusted ephemeris sample."""

    cs = coordinate_system or DEFAULT_COORDINATE_SYSTEM
    try:
        longitude = normalize(raw.longitude, cs)
        speed = normalize_speed(raw.speed, cs)
    except InvalidEphemerisData as exc:
        raise InvalidEphemerisData(f"{raw.object_id}: {exc}") from exc
    retrograde = raw.speed is not None and float(raw.speed) < 0.0
    return CelestialPosition(
        object_id=raw.object_id,
        longitude_deg=longitude,
        speed_deg_per_day=speed,
        retrograde=retrograde,
    )
