from __future__ import annotations

import pytest

from coeus.aspects import ASPECT_CATALOG, compute_aspects
from coeus.core.positions import CelestialPosition
from coeus.errors import WheelOverlapError
from coeus.wheel import assemble_wheel

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
settings = hypothesis.settings
st = hypothesis.strategies

OBJECTS = ("sun", "moon", "mercury", "venus", "mars", "jupiter", "saturn")
LONGITUDES = st.floats(min_value=0.0, max_value=360.0, exclude_max=True, allow_nan=False)
SPEEDS = st.one_of(st.none(), st.floats(min_value=-2.0, max_value=15.0, allow_nan=False))
POSITIONS = st.dictionaries(
    st.sampled_from(OBJECTS),
    st.tuples(LONGITUDES, SPEEDS),
    max_size=len(OBJECTS),
)
ORBS = st.dictionaries(
    st.sampled_from(sorted(ASPECT_CATALOG)),
    st.floats(min_value=0.0, max_value=12.0, allow_nan=False),
    min_size=1,
)


def _positions(raw: dict[str, tuple[float, float | None]]) -> list[CelestialPosition]:
    return [
        CelestialPosition(object_id=name, longitude_deg=lon, speed_deg_per_day=speed)
        for name, (lon, speed) in raw.items()
    ]


@settings(deadline=None)
@given(raw=POSITIONS, orbs=ORBS)
def test_one_pair_per_object_pair(raw: dict[str, tuple[float, float | None]], orbs: dict[str, float]) -> None:
    result = compute_aspects(_positions(raw), orbs)
    keys = [(pair.object_a, pair.object_b) for pair in result]
    assert len(keys) == len(set(keys))
    assert keys == sorted(keys)
    for pair in result:
        assert pair.object_a < pair.object_b
        assert pair.orb_delta_deg <= orbs[pair.aspect_type] + 1e-9
        assert 0.0 <= pair.separation_deg <= 180.0


@settings(deadline=None)
@given(raw=POSITIONS, orbs=ORBS)
def test_input_order_does_not_matter(raw: dict[str, tuple[float, float | None]], orbs: dict[str, float]) -> None:
    forward = compute_aspects(_positions(raw), orbs)
    backward = compute_aspects(list(reversed(_positions(raw))), orbs)
    assert forward == backward


WIDTHS = st.lists(
    st.one_of(st.none(), st.floats(min_value=-5.0, max_value=60.0, allow_nan=False)),
    max_size=6,
)


@settings(deadline=None)
@given(widths=WIDTHS, inner=st.floats(min_value=0.0, max_value=50.0, allow_nan=False))
def test_assembled_wheels_are_valid(widths: list[float | None], inner: float) -> None:
    template = {
        "radius": {"inner": inner, "outer": inner + 100.0},
        "rings": [{"key": f"ring{idx}", "width": width} for idx, width in enumerate(widths)],
    }
    try:
        wheel = assemble_wheel(template)
    except WheelOverlapError:
        return
    previous = None
    for ring in wheel.rings:
        assert ring.radius_start < ring.radius_end
        assert wheel.radius_inner - 1e-9 <= ring.radius_start
        assert ring.radius_end <= wheel.radius_outer + 1e-9
        if previous is not None:
            assert previous.radius_start < ring.radius_start
            assert previous.radius_end <= ring.radius_start + 1e-9
        previous = ring
