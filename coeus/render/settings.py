"""Resolve the effective settings for one chart instance."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config.settings import Settings, default_settings
from ..utils.merging import deep_merge
from .records import ChartSettings

__all__ = ["resolve_effective_settings", "settings_payload"]


def settings_payload(settings: Settings) -> dict[str, Any]:
    """Return the engine defaults expressed as a chart settings payload."""

    return {
        "orbSettings": dict(settings.aspects.orbs_by_aspect),
        "coordinateSystem": settings.coordinates.model_dump(by_alias=True),
        "crossLayerAspects": [list(pair) for pair in settings.render.cross_layer_aspects],
        "includeSystemDefaults": settings.wheel.include_system_defaults,
        "wheelRadius": {"inner": settings.wheel.radius_inner, "outer": settings.wheel.radius_outer},
    }


def _as_payload(value: ChartSettings | Mapping[str, Any] | None) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, ChartSettings):
        return value.model_dump(by_alias=True, exclude_unset=True)
    return ChartSettings.model_validate(value).model_dump(by_alias=True, exclude_unset=True)


def resolve_effective_settings(
    definition_defaults: ChartSettings | Mapping[str, Any] | None = None,
    instance_overrides: ChartSettings | Mapping[str, Any] | None = None,
    engine_settings: Settings | None = None,
) -> ChartSettings:
    """Layer engine defaults, chart definition defaults and instance overrides.

    Later layers win key by key; nested mappings such as ``orbSettings`` and
    ``coordinateSystem`` merge recursively so an instance may tighten a single
    orb without restating the others.
    """

    merged = deep_merge(
        settings_payload(engine_settings or default_settings()),
        _as_payload(definition_defaults),
        _as_payload(instance_overrides),
    )
    return ChartSettings.model_validate(merged)
