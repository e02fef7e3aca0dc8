from __future__ import annotations

from typing import Any

import pytest
from prometheus_client import CollectorRegistry

from coeus.errors import (
    DuplicateObjectId,
    InvalidEphemerisData,
    LayerKeyConflict,
    UnknownAspectDefinition,
    UnknownLayerError,
)
from coeus.observability import ensure_metrics_registered
from coeus.config import Settings
from coeus.render import ChartSettings, LayerCombination, assemble_render, resolve_effective_settings


def _natal_only() -> dict[str, Any]:
    return {
        "natal": [
            {"objectId": "sun", "longitude": 10.0, "speed": 0.98},
            {"objectId": "moon", "longitude": 100.0, "speed": 13.2},
        ]
    }


def test_end_to_end_square_and_two_rings(
    instance_payload: dict[str, Any], two_ring_template: dict[str, Any]
) -> None:
    response = assemble_render(
        instance_payload,
        {"orbSettings": {"square": 6}},
        _natal_only(),
        two_ring_template,
    )
    assert list(response.aspects) == ["natal"]
    natal = response.aspects["natal"]
    assert len(natal) == 1
    pair = natal.pairs[0]
    assert (pair.object_a, pair.object_b, pair.aspect_type, pair.orb_delta_deg) == (
        "moon",
        "sun",
        "square",
        0.0,
    )
    assert [(r.radius_start, r.radius_end) for r in response.wheel.rings] == [
        (0.0, 50.0),
        (50.0, 100.0),
    ]
    assert response.layers["natal"].kind == "natal"
    assert response.chart_instance.id == "instance-1"


def test_cross_layer_combination(instance_payload: dict[str, Any]) -> None:
    instance_payload["layers"].append({"key": "transit", "kind": "transit"})
    raw = {
        "natal": [{"objectId": "sun", "longitude": 0.0}],
        "transit": [
            {"objectId": "sun", "longitude": 180.0},
            {"objectId": "mars", "longitude": 90.0},
        ],
    }
    response = assemble_render(
        instance_payload,
        {"orbSettings": {"opposition": 8, "square": 6}},
        raw,
        combinations=[("transit", "natal")],
    )
    assert list(response.aspects) == ["natal", "transit", "transit-natal"]
    assert len(response.aspects["natal"]) == 0
    assert [p.aspect_type for p in response.aspects["transit"]] == ["square"]
    cross = response.aspects["transit-natal"]
    assert [(p.object_a, p.object_b, p.aspect_type) for p in cross] == [
        ("natal:sun", "transit:mars", "square"),
        ("natal:sun", "transit:sun", "opposition"),
    ]


def test_cross_layer_from_settings(instance_payload: dict[str, Any]) -> None:
    settings = ChartSettings(orbSettings={"conjunction": 5}, crossLayerAspects=["transit-natal"])
    assert settings.cross_layer_aspects == (LayerCombination(first="transit", second="natal"),)
    raw = {
        "natal": [{"objectId": "venus", "longitude": 42.0}],
        "transit": [{"objectId": "venus", "longitude": 44.0}],
    }
    response = assemble_render(instance_payload, settings, raw)
    assert response.aspects["transit-natal"].pairs[0].aspect_type == "conjunction"


def test_unknown_layer_in_combination(instance_payload: dict[str, Any]) -> None:
    with pytest.raises(UnknownLayerError):
        assemble_render(instance_payload, {}, _natal_only(), combinations=["transit-natal"])


def test_configured_layer_without_data(instance_payload: dict[str, Any]) -> None:
    instance_payload["layers"].append({"key": "progressed"})
    with pytest.raises(InvalidEphemerisData, match="progressed"):
        assemble_render(instance_payload, {}, _natal_only())


def test_include_objects_filters_samples(instance_payload: dict[str, Any]) -> None:
    response = assemble_render(
        instance_payload,
        {"orbSettings": {"square": 6}, "includeObjects": ["Sun"]},
        _natal_only(),
    )
    assert response.layers["natal"].object_ids == ("sun",)
    assert len(response.aspects["natal"]) == 0


def test_mapping_shaped_raw_layers(instance_payload: dict[str, Any]) -> None:
    raw = {"natal": {"sun": 10.0, "moon": {"longitude": 100.0, "speed": 13.2}}}
    response = assemble_render(instance_payload, {"orbSettings": {"square": 6}}, raw)
    moon = response.layers["natal"].positions[0]
    assert (moon.object_id, moon.speed_deg_per_day) == ("moon", 13.2)
    assert response.aspects["natal"].pairs[0].applying is None


def test_component_errors_propagate(instance_payload: dict[str, Any]) -> None:
    duplicated = {"natal": [{"objectId": "sun", "longitude": 1.0}, {"objectId": "sun", "longitude": 2.0}]}
    with pytest.raises(DuplicateObjectId):
        assemble_render(instance_payload, {}, duplicated)

    broken = {"natal": [{"objectId": "sun", "longitude": float("nan")}]}
    with pytest.raises(InvalidEphemerisData):
        assemble_render(instance_payload, {}, broken)

    with pytest.raises(UnknownAspectDefinition):
        assemble_render(instance_payload, {"orbSettings": {"bogus": 1.0}}, _natal_only())


def test_errors_are_counted(instance_payload: dict[str, Any]) -> None:
    registry = CollectorRegistry()
    ensure_metrics_registered(registry)
    labels = {"component": "render", "error": "UnknownLayerError"}
    before = registry.get_sample_value("coeus_compute_errors_total", labels) or 0.0
    with pytest.raises(UnknownLayerError):
        assemble_render(instance_payload, {}, _natal_only(), combinations=[("natal", "solar")])
    after = registry.get_sample_value("coeus_compute_errors_total", labels)
    assert after == before + 1.0


def test_counterclockwise_render(instance_payload: dict[str, Any]) -> None:
    settings = {"orbSettings": {"square": 6}, "coordinateSystem": {"direction": "ccw"}}
    response = assemble_render(instance_payload, settings, _natal_only())
    sun = next(p for p in response.layers["natal"].positions if p.object_id == "sun")
    assert sun.longitude_deg == 350.0
    assert response.aspects["natal"].pairs[0].aspect_type == "square"
    assert response.as_dict()["coordinateSystem"]["direction"] == "ccw"


def test_render_is_deterministic(
    instance_payload: dict[str, Any], two_ring_template: dict[str, Any]
) -> None:
    raw = {
        "natal": [
            {"objectId": "mars", "longitude": 200.0, "speed": -0.3},
            {"objectId": "sun", "longitude": 10.0, "speed": 0.98},
            {"objectId": "venus", "longitude": 70.0, "speed": 1.2},
        ],
        "transit": [{"objectId": "sun", "longitude": 130.0}],
    }
    reordered = {
        "transit": list(raw["transit"]),
        "natal": list(reversed(raw["natal"])),
    }
    settings = {"orbSettings": {"trine": 7, "sextile": 4, "opposition": 8}}
    first = assemble_render(instance_payload, settings, raw, two_ring_template, combinations=["transit-natal"])
    second = assemble_render(
        instance_payload, settings, reordered, two_ring_template, combinations=["transit-natal"]
    )
    assert first == second
    assert first.as_dict() == second.as_dict()


def test_wire_payload_shape(instance_payload: dict[str, Any]) -> None:
    payload = assemble_render(instance_payload, {"orbSettings": {"square": 6}}, _natal_only()).as_dict()
    assert set(payload) == {"chartInstance", "settings", "coordinateSystem", "layers", "aspects", "wheel"}
    assert payload["chartInstance"]["chartDefinitionId"] == "chart-1"
    assert payload["settings"]["orbSettings"] == {"square": 6.0}
    assert list(payload["aspects"]) == ["sets"]
    assert list(payload["aspects"]["sets"]) == ["natal"]
    assert payload["layers"]["natal"]["objects"]["moon"]["longitude"] == 100.0
    assert payload["wheel"]["id"] == "system-default"


def test_hyphenated_layer_keys_in_combinations() -> None:
    instance = {"id": "returns", "layers": [{"key": "natal"}, {"key": "solar-return"}]}
    raw = {
        "natal": [{"objectId": "sun", "longitude": 0.0}],
        "solar-return": [{"objectId": "moon", "longitude": 90.0}],
    }
    settings = ChartSettings(orbSettings={"square": 6}, crossLayerAspects=["solar-return-natal"])
    response = assemble_render(instance, settings, raw)
    cross = response.aspects["solar-return-natal"]
    assert [(p.object_a, p.object_b, p.aspect_type) for p in cross] == [
        ("natal:sun", "solar-return:moon", "square"),
    ]


def test_set_key_shared_by_layer_and_combination_raises() -> None:
    raw = {
        "transit": [{"objectId": "sun", "longitude": 0.0}],
        "natal": [{"objectId": "sun", "longitude": 90.0}],
        "transit-natal": [{"objectId": "mars", "longitude": 10.0}],
    }
    with pytest.raises(LayerKeyConflict) as excinfo:
        assemble_render({"id": "x"}, {"orbSettings": {"square": 6}}, raw, combinations=[("transit", "natal")])
    assert excinfo.value.key == "transit-natal"


def test_same_combination_listed_twice_is_computed_once(instance_payload: dict[str, Any]) -> None:
    instance_payload["layers"].append({"key": "transit"})
    raw = {**_natal_only(), "transit": [{"objectId": "mars", "longitude": 190.0}]}
    response = assemble_render(
        instance_payload,
        {"orbSettings": {"opposition": 8}},
        raw,
        combinations=["transit-natal", ("transit", "natal"), "natal-natal"],
    )
    assert list(response.aspects) == ["natal", "transit", "transit-natal"]
    assert len(response.aspects["transit-natal"]) == 1


def test_unknown_orb_name_raises_without_layers() -> None:
    with pytest.raises(UnknownAspectDefinition):
        assemble_render({"id": "x"}, {"orbSettings": {"bogus": 1.0}}, {})


def test_unknown_orb_name_raises_when_filter_empties_layers(instance_payload: dict[str, Any]) -> None:
    settings = {"orbSettings": {"bogus": 1.0}, "includeObjects": ["pluto"]}
    with pytest.raises(UnknownAspectDefinition):
        assemble_render(instance_payload, settings, _natal_only())


def test_engine_wheel_radius_sizes_default_wheel(instance_payload: dict[str, Any]) -> None:
    engine = Settings(wheel={"radius_inner": 10, "radius_outer": 200})
    settings = resolve_effective_settings(None, None, engine)
    wheel = assemble_render(instance_payload, settings, _natal_only()).wheel
    assert (wheel.radius_inner, wheel.radius_outer) == (10.0, 200.0)
    assert wheel.rings[0].radius_start == 10.0
    assert wheel.rings[-1].radius_end == 200.0


def test_explicit_template_wins_over_engine_radius(
    instance_payload: dict[str, Any], two_ring_template: dict[str, Any]
) -> None:
    engine = Settings(wheel={"radius_inner": 10, "radius_outer": 200})
    settings = resolve_effective_settings(None, None, engine)
    wheel = assemble_render(instance_payload, settings, _natal_only(), two_ring_template).wheel
    assert (wheel.radius_inner, wheel.radius_outer) == (0.0, 100.0)
