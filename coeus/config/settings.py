"""Configuration models and helpers for engine-wide render defaults."""

from __future__ import annotations

import logging
import math
import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from ..aspects.orbs import DEFAULT_ORBS
from ..core.coordinates import CoordinateSystem

__all__ = [
    "AspectsCfg",
    "CONFIG_FILENAME",
    "CURRENT_SETTINGS_SCHEMA_VERSION",
    "RenderCfg",
    "Settings",
    "WheelCfg",
    "config_path",
    "default_settings",
    "get_config_home",
    "load_settings",
    "save_settings",
]

LOG = logging.getLogger(__name__)

CURRENT_SETTINGS_SCHEMA_VERSION = 2

# -------------------- Settings Schema --------------------


class AspectsCfg(BaseModel):
    """Default orbs applied when a chart does not override them."""

    orbs_by_aspect: Dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_ORBS))

    @field_validator("orbs_by_aspect", mode="before")
    @classmethod
    def _cap_orbs(cls, data: Dict[str, float] | object) -> Dict[str, float] | object:
        if not isinstance(data, dict):
            return data
        capped: Dict[str, float] = {}
        for key, value in data.items():
            numeric = float(value)
            if math.isnan(numeric):
                raise ValueError(f"orb for {key!r} must be a number")
            capped[str(key).strip().lower()] = max(0.0, min(15.0, numeric))
        return capped


class WheelCfg(BaseModel):
    """Wheel geometry defaults."""

    include_system_defaults: bool = True
    radius_inner: float = 0.0
    radius_outer: float = 100.0

    @model_validator(mode="after")
    def _check_radius(self) -> "WheelCfg":
        if not self.radius_inner < self.radius_outer:
            raise ValueError("radius_inner must be below radius_outer")
        return self


class RenderCfg(BaseModel):
    """Layer combinations aspected against each other by default."""

    cross_layer_aspects: List[List[str]] = Field(default_factory=list)

    @field_validator("cross_layer_aspects", mode="before")
    @classmethod
    def _split_pairs(cls, data: object) -> object:
        if not isinstance(data, list):
            return data
        out: list[object] = []
        for item in data:
            if isinstance(item, str) and "-" in item:
                out.append([part.strip() for part in item.split("-", 1)])
            else:
                out.append(item)
        return out

    @field_validator("cross_layer_aspects")
    @classmethod
    def _pairs_only(cls, value: List[List[str]]) -> List[List[str]]:
        for pair in value:
            if len(pair) != 2:
                raise ValueError("cross layer aspects must name exactly two layers")
        return value


class Settings(BaseModel):
    """Top-level engine settings persisted as YAML."""

    schema_version: int = CURRENT_SETTINGS_SCHEMA_VERSION
    aspects: AspectsCfg = Field(default_factory=AspectsCfg)
    coordinates: CoordinateSystem = Field(default_factory=CoordinateSystem)
    wheel: WheelCfg = Field(default_factory=WheelCfg)
    render: RenderCfg = Field(default_factory=RenderCfg)


CONFIG_FILENAME = "config.yaml"


def get_config_home() -> Path:
    """Return the directory where settings are stored."""

    return Path(os.environ.get("COEUS_HOME", str(Path.home() / ".coeus")))


def config_path() -> Path:
    """Return the full path to the configuration file."""

    return get_config_home() / CONFIG_FILENAME


def default_settings() -> Settings:
    """Instantiate a Settings object populated with defaults."""

    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump(mode="json", by_alias=True)
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _coerce_schema_version(raw: object) -> int:
    """Return a normalised schema version value with sane bounds."""

    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def _upgrade_settings_payload(
    data: dict[str, object], *, schema_version: int
) -> tuple[dict[str, object], bool]:
    """Apply upgrades required for older settings payloads."""

    upgraded = deepcopy(data)
    changed = False

    if schema_version < 2:
        # v1 stored orbs as a flat ``orbs`` mapping at the top level.
        legacy = upgraded.pop("orbs", None)
        if isinstance(legacy, dict):
            aspects = upgraded.setdefault("aspects", {})
            if isinstance(aspects, dict):
                aspects.setdefault("orbs_by_aspect", legacy)
        changed = True

    if upgraded.get("schema_version") != CURRENT_SETTINGS_SCHEMA_VERSION:
        upgraded["schema_version"] = CURRENT_SETTINGS_SCHEMA_VERSION
        changed = True

    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, falling back to defaults when the file is missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        LOG.debug("no settings file at %s; using defaults", source_path)
        return default_settings()
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    schema_version = _coerce_schema_version(raw.get("schema_version"))
    data, upgraded = _upgrade_settings_payload(raw, schema_version=schema_version)
    if upgraded:
        LOG.info("upgraded settings payload from schema v%d", schema_version)
    return Settings(**data)
