"""Pydantic models for records supplied by the chart storage collaborator."""

from __future__ import annotations

import math
from collections.abc import Collection
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..aspects.orbs import DEFAULT_ORBS
from ..core.coordinates import CoordinateSystem
from ..errors import LayerKeyConflict, UnknownLayerError
from ..wheel.models import RadiusSpec

__all__ = [
    "ChartInstanceRecord",
    "ChartInstanceSummary",
    "ChartSettings",
    "LayerCombination",
    "LayerConfig",
]


class LayerConfig(BaseModel):
    """Layer declared on a chart instance (natal, transit, progressed, ...)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str
    kind: str | None = None
    date_time_source: str | None = Field(None, alias="dateTimeSource")

    @property
    def resolved_kind(self) -> str:
        return self.kind or self.key


class LayerCombination(BaseModel):
    """Ordered pair of layers whose objects are aspected against each other."""

    model_config = ConfigDict(frozen=True)

    first: str
    second: str

    @property
    def set_key(self) -> str:
        return self.first if self.first == self.second else f"{self.first}-{self.second}"

    @classmethod
    def from_key(cls, text: str) -> "LayerCombination":
        """Parse ``"<first>-<second>"`` by splitting on the first hyphen.

        Layer keys may contain hyphens themselves; :meth:`resolve` re-splits the
        key against the layers a render actually carries.
        """

        first, _, second = text.strip().partition("-")
        first, second = first.strip(), second.strip()
        return cls(first=first, second=second or first)

    def resolve(self, layer_keys: Collection[str]) -> "LayerCombination":
        """Return the combination whose layers are both in ``layer_keys``.

        Raises
        ------
        UnknownLayerError
            When no split of :attr:`set_key` names two present layers.
        LayerKeyConflict
            When more than one split does.
        """

        if self.first in layer_keys and self.second in layer_keys:
            return self
        key = self.set_key
        candidates = [
            (key[:idx], key[idx + 1 :])
            for idx, char in enumerate(key)
            if char == "-" and key[:idx] in layer_keys and key[idx + 1 :] in layer_keys
        ]
        if len(candidates) > 1:
            raise LayerKeyConflict(key, "matches more than one pair of layers")
        if candidates:
            first, second = candidates[0]
            return LayerCombination(first=first, second=second)
        raise UnknownLayerError(self.first if self.first not in layer_keys else self.second)


def _coerce_combination(value: Any) -> Any:
    if isinstance(value, str):
        return LayerCombination.from_key(value)
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return {"first": value[0], "second": value[1]}
    return value


class ChartSettings(BaseModel):
    """Effective chart settings used for one render."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    zodiac_type: str = Field("tropical", alias="zodiacType")
    house_system: str = Field("placidus", alias="houseSystem")
    orb_settings: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_ORBS), alias="orbSettings"
    )
    include_objects: tuple[str, ...] = Field((), alias="includeObjects")
    coordinate_system: CoordinateSystem = Field(
        default_factory=CoordinateSystem, alias="coordinateSystem"
    )
    cross_layer_aspects: tuple[LayerCombination, ...] = Field((), alias="crossLayerAspects")
    include_system_defaults: bool = Field(True, alias="includeSystemDefaults")
    wheel_radius: RadiusSpec | None = Field(None, alias="wheelRadius")

    @field_validator("orb_settings", mode="before")
    @classmethod
    def _check_orbs(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, float] = {}
        for key, value in data.items():
            numeric = float(value)
            if not math.isfinite(numeric) or numeric < 0.0:
                raise ValueError(f"orb for {key!r} must be a finite non-negative number")
            cleaned[str(key).strip().lower()] = numeric
        return cleaned

    @field_validator("cross_layer_aspects", mode="before")
    @classmethod
    def _coerce_combinations(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return tuple(_coerce_combination(item) for item in data)
        return data

    def as_dict(self) -> dict[str, Any]:
        return {
            "zodiacType": self.zodiac_type,
            "houseSystem": self.house_system,
            "orbSettings": {key: self.orb_settings[key] for key in sorted(self.orb_settings)},
            "includeObjects": list(self.include_objects),
        }


class ChartInstanceSummary(BaseModel):
    """Chart instance fields echoed back in a render response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    chart_definition_id: str | None = Field(None, alias="chartDefinitionId")
    title: str = ""
    owner_user_id: str | None = Field(None, alias="ownerUserId")
    subjects: tuple[dict[str, Any], ...] = ()
    effective_date_times: dict[str, str] = Field(default_factory=dict, alias="effectiveDateTimes")

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "chartDefinitionId": self.chart_definition_id,
            "title": self.title,
            "ownerUserId": self.owner_user_id,
            "subjects": [dict(subject) for subject in self.subjects],
            "effectiveDateTimes": {
                key: self.effective_date_times[key] for key in sorted(self.effective_date_times)
            },
        }


class ChartInstanceRecord(ChartInstanceSummary):
    """Chart instance as stored: summary plus layer configuration and overrides."""

    layers: tuple[LayerConfig, ...] = ()
    settings_overrides: dict[str, Any] = Field(default_factory=dict, alias="settingsOverrides")

    def summary(self) -> ChartInstanceSummary:
        return ChartInstanceSummary.model_validate(
            self.model_dump(include=set(ChartInstanceSummary.model_fields))
        )

    def layer_config(self, key: str) -> LayerConfig | None:
        return next((layer for layer in self.layers if layer.key == key), None)
