"""Orchestrate normalization, aspect matching and wheel assembly into a render model."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from itertools import product
from time import perf_counter
from typing import Any

from ..aspects.catalog import ASPECT_CATALOG
from ..aspects.matcher import AspectSet, compute_aspects
from ..aspects.orbs import prepare_orbs
from ..core.coordinates import CoordinateSystem, normalize_position
from ..core.index import PositionIndex, build_indexes
from ..core.positions import CelestialPosition, RawPosition, RenderLayer
from ..errors import CoeusError, InvalidEphemerisData, LayerKeyConflict
from ..observability import COMPUTE_ERRORS, RENDER_DURATION
from ..wheel.assembler import assemble_wheel
from ..wheel.defaults import default_wheel
from ..wheel.merging import RingOverrides
from ..wheel.models import WheelDefinition, WheelTemplate
from .records import ChartInstanceRecord, ChartInstanceSummary, ChartSettings, LayerCombination

__all__ = ["RenderResponse", "assemble_render", "build_layers"]

LOG = logging.getLogger(__name__)

RawLayerPositions = Mapping[str, Iterable[RawPosition | Mapping[str, Any]] | Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class RenderResponse:
    """Fully resolved chart model handed to the rendering front end."""

    chart_instance: ChartInstanceSummary
    settings: ChartSettings
    coordinate_system: CoordinateSystem
    layers: Mapping[str, RenderLayer] = field(default_factory=dict)
    aspects: Mapping[str, AspectSet] = field(default_factory=dict)
    wheel: WheelDefinition | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return the JSON-ready wire payload with camelCase keys and sorted maps."""

        return {
            "chartInstance": self.chart_instance.as_dict(),
            "settings": self.settings.as_dict(),
            "coordinateSystem": self.coordinate_system.as_dict(),
            "layers": {key: self.layers[key].as_dict() for key in sorted(self.layers)},
            "aspects": {
                "sets": {key: self.aspects[key].as_dict() for key in sorted(self.aspects)},
            },
            "wheel": self.wheel.as_dict() if self.wheel is not None else None,
        }


def _iter_samples(source: Iterable[Any] | Mapping[str, Any]) -> Iterable[RawPosition]:
    if isinstance(source, Mapping):
        for object_id, sample in source.items():
            if isinstance(sample, Mapping):
                yield RawPosition.coerce({"objectId": object_id, **sample})
            else:
                yield RawPosition(object_id=str(object_id), longitude=sample)
        return
    for sample in source:
        yield RawPosition.coerce(sample)


def _included(object_id: str, include: frozenset[str]) -> bool:
    return not include or object_id.lower() in include


def build_layers(
    raw_layer_positions: RawLayerPositions,
    coordinate_system: CoordinateSystem,
    *,
    kinds: Mapping[str, str] | None = None,
    include_objects: Iterable[str] = (),
) -> dict[str, RenderLayer]:
    """Normalize every raw sample and group the results into render layers."""

    include = frozenset(str(name).strip().lower() for name in include_objects)
    kinds = kinds or {}
    layers: dict[str, RenderLayer] = {}
    for layer_key in sorted(raw_layer_positions):
        positions = [
            normalize_position(sample, coordinate_system)
            for sample in _iter_samples(raw_layer_positions[layer_key])
            if _included(sample.object_id, include)
        ]
        layers[layer_key] = RenderLayer(
            key=layer_key,
            kind=kinds.get(layer_key, layer_key),
            positions=tuple(positions),
        )
    return layers


def _qualified(layer_key: str, positions: Mapping[str, CelestialPosition]) -> dict[str, CelestialPosition]:
    out: dict[str, CelestialPosition] = {}
    for object_id, position in positions.items():
        qualified = f"{layer_key}:{object_id}"
        out[qualified] = replace(position, object_id=qualified)
    return out


def _cross_layer_set(
    index: PositionIndex,
    combination: LayerCombination,
    orb_settings: Mapping[str, float],
) -> AspectSet:
    first = _qualified(combination.first, index.layer(combination.first))
    second = _qualified(combination.second, index.layer(combination.second))
    return compute_aspects(
        {**first, **second},
        orb_settings,
        pairs=product(sorted(first), sorted(second)),
        source_key=combination.set_key,
    )


def _resolve_combinations(
    combinations: Sequence[LayerCombination | Sequence[str] | str] | None,
    settings: ChartSettings,
) -> list[LayerCombination]:
    if combinations is None:
        return list(settings.cross_layer_aspects)
    resolved: list[LayerCombination] = []
    for item in combinations:
        if isinstance(item, LayerCombination):
            resolved.append(item)
        elif isinstance(item, str):
            resolved.append(LayerCombination.from_key(item))
        else:
            first, second = item
            resolved.append(LayerCombination(first=first, second=second))
    return resolved


def _compute_sets(
    index: PositionIndex,
    settings: ChartSettings,
    combinations: Sequence[LayerCombination],
) -> dict[str, AspectSet]:
    sets: dict[str, AspectSet] = {}
    for layer_key in index.layer_keys:
        sets[layer_key] = compute_aspects(
            index.layer(layer_key),
            settings.orb_settings,
            source_key=layer_key,
        )
    cross: dict[str, LayerCombination] = {}
    for combination in combinations:
        combination = combination.resolve(index.layer_keys)
        if combination.first == combination.second:
            continue
        key = combination.set_key
        if key in cross:
            if cross[key] != combination:
                raise LayerKeyConflict(key, "is claimed by two different layer combinations")
            continue
        if key in sets:
            raise LayerKeyConflict(key, "names both a layer and a layer combination")
        cross[key] = combination
        sets[key] = _cross_layer_set(index, combination, settings.orb_settings)
    return {key: sets[key] for key in sorted(sets)}


def _coerce_instance(
    chart_instance: ChartInstanceSummary | Mapping[str, Any],
) -> ChartInstanceSummary:
    if isinstance(chart_instance, ChartInstanceSummary):
        return chart_instance
    return ChartInstanceRecord.model_validate(chart_instance)


def _check_configured_layers(instance: ChartInstanceSummary, raw_layer_positions: RawLayerPositions) -> None:
    if not isinstance(instance, ChartInstanceRecord):
        return
    for layer in instance.layers:
        if layer.key not in raw_layer_positions:
            raise InvalidEphemerisData(f"no ephemeris data supplied for layer {layer.key!r}")


def assemble_render(
    chart_instance: ChartInstanceSummary | Mapping[str, Any],
    effective_settings: ChartSettings | Mapping[str, Any],
    raw_layer_positions: RawLayerPositions,
    wheel_template: WheelTemplate | Mapping[str, Any] | None = None,
    wheel_overrides: RingOverrides | None = None,
    *,
    include_system_defaults: bool | None = None,
    combinations: Sequence[LayerCombination | Sequence[str] | str] | None = None,
) -> RenderResponse:
    """Turn chart configuration and raw ephemeris samples into a render model.

    Each layer is aspected on its own under its key. Cross-layer combinations
    come from ``combinations`` or, when omitted, from the settings; their sets
    are keyed ``"<first>-<second>"`` and their pair ids are qualified as
    ``"<layer>:<objectId>"``. The call is all-or-nothing: the first component
    error propagates unchanged.

    Without a ``wheel_template`` the system default wheel is used, sized to
    the settings' ``wheelRadius`` when one is set.
    """

    start = perf_counter()
    try:
        instance = _coerce_instance(chart_instance)
        settings = (
            effective_settings
            if isinstance(effective_settings, ChartSettings)
            else ChartSettings.model_validate(effective_settings)
        )
        prepare_orbs(settings.orb_settings, ASPECT_CATALOG)
        cs = settings.coordinate_system
        _check_configured_layers(instance, raw_layer_positions)
        kinds = (
            {layer.key: layer.resolved_kind for layer in instance.layers}
            if isinstance(instance, ChartInstanceRecord)
            else {}
        )
        layers = build_layers(
            raw_layer_positions,
            cs,
            kinds=kinds,
            include_objects=settings.include_objects,
        )
        index = build_indexes(layers)
        aspects = _compute_sets(index, settings, _resolve_combinations(combinations, settings))
        if wheel_template is None and settings.wheel_radius is not None:
            wheel_template = default_wheel(settings.wheel_radius.inner, settings.wheel_radius.outer)
        wheel = assemble_wheel(
            wheel_template,
            wheel_overrides,
            settings.include_system_defaults
            if include_system_defaults is None
            else include_system_defaults,
        )
        summary = instance.summary() if isinstance(instance, ChartInstanceRecord) else instance
        response = RenderResponse(
            chart_instance=summary,
            settings=settings,
            coordinate_system=cs,
            layers=layers,
            aspects=aspects,
            wheel=wheel,
        )
    except CoeusError as exc:
        COMPUTE_ERRORS.labels(component="render", error=exc.__class__.__name__).inc()
        LOG.warning("render assembly failed: %s", exc)
        raise
    finally:
        RENDER_DURATION.observe(perf_counter() - start)

    LOG.debug(
        "rendered instance %r: %d layers, %d aspect sets, %d rings",
        summary.id,
        len(layers),
        len(aspects),
        len(wheel.rings),
    )
    return response
