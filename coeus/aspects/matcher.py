"""Pairwise aspect matching under configurable orbs."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from itertools import combinations
from time import perf_counter
from typing import Any

from ..core.angles import EPSILON_DEG, angular_separation, is_applying, separation_rate
from ..core.positions import CelestialPosition
from ..errors import DuplicateObjectId
from ..observability import ASPECT_MATCH_DURATION
from .catalog import AspectDefinition, catalog_from
from .orbs import OrbSettings, prepare_orbs

__all__ = ["AspectPair", "AspectSet", "compute_aspects", "match_pair"]

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AspectPair:
    """The single closest aspect formed by two objects."""

    object_a: str
    object_b: str
    aspect_type: str
    separation_deg: float
    orb_delta_deg: float
    exact_angle_deg: float
    orb_limit_deg: float
    applying: bool | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "objectA": self.object_a,
            "objectB": self.object_b,
            "aspectType": self.aspect_type,
            "separation": self.separation_deg,
            "orb": self.orb_delta_deg,
            "exactAngle": self.exact_angle_deg,
            "orbLimit": self.orb_limit_deg,
            "applying": self.applying,
        }


@dataclass(frozen=True, slots=True)
class AspectSet:
    """Aspect pairs produced for one layer combination."""

    source_key: str
    pairs: tuple[AspectPair, ...] = ()

    def __len__(self) -> int:
        return len(self.pairs)

    def __iter__(self) -> Iterator[AspectPair]:
        return iter(self.pairs)

    def find(self, object_a: str, object_b: str) -> AspectPair | None:
        a, b = sorted((object_a, object_b))
        for pair in self.pairs:
            if pair.object_a == a and pair.object_b == b:
                return pair
        return None

    def as_dict(self) -> dict[str, Any]:
        return {
            "sourceKey": self.source_key,
            "pairs": [pair.as_dict() for pair in self.pairs],
        }


def _applying(
    pos_a: CelestialPosition,
    pos_b: CelestialPosition,
    separation: float,
    exact: float,
) -> bool | None:
    if pos_a.speed_deg_per_day is None or pos_b.speed_deg_per_day is None:
        return None
    rate = separation_rate(
        pos_a.longitude_deg,
        pos_a.speed_deg_per_day,
        pos_b.longitude_deg,
        pos_b.speed_deg_per_day,
    )
    return is_applying(separation, exact, rate)


def match_pair(
    pos_a: CelestialPosition,
    pos_b: CelestialPosition,
    orbs: Mapping[str, float],
    catalog: Mapping[str, AspectDefinition],
) -> AspectPair | None:
    """Return the closest eligible aspect between two positions, if any.

    ``orbs`` must already be keyed by canonical catalog names. When two
    aspects sit at the same distance from the separation, the one whose name
    sorts first wins.
    """

    if pos_b.object_id < pos_a.object_id:
        pos_a, pos_b = pos_b, pos_a
    separation = angular_separation(pos_a.longitude_deg, pos_b.longitude_deg)
    best: tuple[float, str] | None = None
    for name in sorted(orbs):
        definition = catalog[name]
        delta = abs(separation - definition.exact_angle_deg)
        if delta > orbs[name] + EPSILON_DEG:
            continue
        candidate = (delta, name)
        if best is None or candidate < best:
            best = candidate
    if best is None:
        return None
    delta, name = best
    exact = catalog[name].exact_angle_deg
    return AspectPair(
        object_a=pos_a.object_id,
        object_b=pos_b.object_id,
        aspect_type=name,
        separation_deg=separation,
        orb_delta_deg=delta,
        exact_angle_deg=exact,
        orb_limit_deg=orbs[name],
        applying=_applying(pos_a, pos_b, separation, exact),
    )


def _as_lookup(
    positions: Iterable[CelestialPosition] | Mapping[str, CelestialPosition],
    source_key: str,
) -> dict[str, CelestialPosition]:
    if isinstance(positions, Mapping):
        return {str(key): value for key, value in positions.items()}
    lookup: dict[str, CelestialPosition] = {}
    for position in positions:
        if position.object_id in lookup:
            raise DuplicateObjectId(source_key, position.object_id)
        lookup[position.object_id] = position
    return lookup


def compute_aspects(
    positions: Iterable[CelestialPosition] | Mapping[str, CelestialPosition],
    orb_settings: OrbSettings | None,
    aspect_defs: Iterable[AspectDefinition] | Mapping[str, AspectDefinition] | None = None,
    *,
    pairs: Iterable[tuple[str, str]] | None = None,
    source_key: str = "",
) -> AspectSet:
    """Compute every significant aspect among ``positions``.

    Args:
        positions: celestial positions, or a mapping ``object_id -> position``.
        orb_settings: aspect name → maximum orb. Only aspects named here are
            considered.
        aspect_defs: catalog to resolve aspect names; the built-in catalog by
            default.
        pairs: optional restriction to the given ``(a, b)`` id pairs; all
            unordered pairs of distinct ids otherwise.
        source_key: label stored on the resulting :class:`AspectSet`.

    Raises:
        UnknownAspectDefinition: an orb setting names an aspect missing from
            the catalog.
        DuplicateObjectId: an iterable of positions repeats an object id.
    """

    start = perf_counter()
    catalog = catalog_from(aspect_defs)
    orbs = prepare_orbs(orb_settings, catalog)
    lookup = _as_lookup(positions, source_key)

    if pairs is None:
        candidates: Iterable[tuple[str, str]] = combinations(sorted(lookup), 2)
    else:
        candidates = pairs

    found: dict[tuple[str, str], AspectPair] = {}
    for a_id, b_id in candidates:
        if a_id == b_id or a_id not in lookup or b_id not in lookup:
            continue
        key = (a_id, b_id) if a_id < b_id else (b_id, a_id)
        if key in found:
            continue
        match = match_pair(lookup[a_id], lookup[b_id], orbs, catalog)
        if match is not None:
            found[key] = match

    result = AspectSet(
        source_key=source_key,
        pairs=tuple(found[key] for key in sorted(found)),
    )
    ASPECT_MATCH_DURATION.labels(source=source_key or "adhoc").observe(perf_counter() - start)
    LOG.debug(
        "matched %d aspect pairs across %d objects for %r",
        len(result),
        len(lookup),
        source_key,
    )
    return result
