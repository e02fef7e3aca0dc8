from __future__ import annotations

import pytest

from coeus.core.index import build_indexes
from coeus.core.positions import CelestialPosition, RawPosition, RenderLayer
from coeus.errors import DuplicateObjectId, InvalidEphemerisData, UnknownLayerError


def _pos(object_id: str, lon: float) -> CelestialPosition:
    return CelestialPosition(object_id=object_id, longitude_deg=lon)


def _layers() -> dict[str, RenderLayer]:
    return {
        "transit": RenderLayer.from_positions("transit", [_pos("sun", 200.0), _pos("mars", 15.0)]),
        "natal": RenderLayer.from_positions("natal", [_pos("sun", 10.0), _pos("moon", 100.0)]),
    }


def test_lookup_by_layer_and_object() -> None:
    index = build_indexes(_layers())
    assert index.get("natal", "sun").longitude_deg == 10.0
    assert index[("transit", "sun")].longitude_deg == 200.0
    assert index.get("natal", "mars") is None
    assert ("transit", "mars") in index
    assert len(index) == 4


def test_iteration_order_is_sorted() -> None:
    index = build_indexes(_layers())
    assert index.layer_keys == ("natal", "transit")
    assert list(index.layer("transit")) == ["mars", "sun"]
    assert list(index) == [("natal", "moon"), ("natal", "sun"), ("transit", "mars"), ("transit", "sun")]
    assert index.layers_for("sun") == ("natal", "transit")
    assert index.layers_for("pluto") == ()


def test_accepts_plain_iterables() -> None:
    index = build_indexes({"natal": [_pos("sun", 1.0), _pos("moon", 2.0)]})
    assert index.get("natal", "moon").longitude_deg == 2.0


def test_duplicate_object_in_iterable_raises() -> None:
    with pytest.raises(DuplicateObjectId) as excinfo:
        build_indexes({"natal": [_pos("sun", 1.0), _pos("sun", 2.0)]})
    assert excinfo.value.layer == "natal"
    assert excinfo.value.object_id == "sun"


def test_render_layer_rejects_duplicates() -> None:
    with pytest.raises(DuplicateObjectId):
        RenderLayer(key="natal", kind="natal", positions=(_pos("sun", 1.0), _pos("sun", 3.0)))


def test_render_layer_sorts_positions() -> None:
    layer = RenderLayer.from_positions("natal", [_pos("venus", 1.0), _pos("mars", 2.0)])
    assert layer.object_ids == ("mars", "venus")
    assert layer.kind == "natal"


def test_unknown_layer_lookup() -> None:
    index = build_indexes(_layers())
    with pytest.raises(UnknownLayerError):
        index.layer("progressed")


@pytest.mark.parametrize("lon", [360.0, -0.1, float("nan")])
def test_position_longitude_must_be_normalized(lon: float) -> None:
    with pytest.raises(InvalidEphemerisData):
        CelestialPosition(object_id="sun", longitude_deg=lon)


def test_raw_position_coerce_accepts_aliases() -> None:
    raw = RawPosition.coerce({"object_id": " sun ", "longitudeDeg": 12.0, "speed_lon": 0.98})
    assert raw == RawPosition(object_id="sun", longitude=12.0, speed=0.98)
    with pytest.raises(InvalidEphemerisData):
        RawPosition.coerce({"longitude": 1.0})
    with pytest.raises(InvalidEphemerisData):
        RawPosition.coerce(12.0)  # type: ignore[arg-type]
