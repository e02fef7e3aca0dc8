"""Constant-time lookup of positions by ``(layer, object)``.

Aspect matching and render assembly iterate layers × objects × aspect
definitions. Resolving each position by scanning the source layers would make
that combinatorial work quadratic again, so the assembler builds this index
once per render and reads from it afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..errors import DuplicateObjectId, UnknownLayerError
from .positions import CelestialPosition, RenderLayer

__all__ = ["PositionIndex", "build_indexes"]


@dataclass(frozen=True, slots=True)
class PositionIndex:
    """Read-only ``(layer, object_id) -> CelestialPosition`` lookup."""

    _entries: Mapping[tuple[str, str], CelestialPosition]
    _by_layer: Mapping[str, Mapping[str, CelestialPosition]]
    _by_object: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def get(self, layer: str, object_id: str) -> CelestialPosition | None:
        return self._entries.get((layer, object_id))

    def __getitem__(self, key: tuple[str, str]) -> CelestialPosition:
        return self._entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(sorted(self._entries))

    @property
    def layer_keys(self) -> tuple[str, ...]:
        return tuple(sorted(self._by_layer))

    def layer(self, key: str) -> Mapping[str, CelestialPosition]:
        """Return ``object_id -> position`` for ``key`` in sorted id order."""

        try:
            return self._by_layer[key]
        except KeyError:
            raise UnknownLayerError(key) from None

    def layers_for(self, object_id: str) -> tuple[str, ...]:
        """Return the sorted layer keys in which ``object_id`` appears."""

        return self._by_object.get(object_id, ())


def _iter_positions(
    source: RenderLayer | Iterable[CelestialPosition],
) -> Iterable[CelestialPosition]:
    if isinstance(source, RenderLayer):
        return source.positions
    return source


def build_indexes(
    layers: Mapping[str, RenderLayer | Iterable[CelestialPosition]],
) -> PositionIndex:
    """Index every position of ``layers`` by ``(layer_key, object_id)``.

    Raises
    ------
    DuplicateObjectId
        When a single layer lists the same object twice.
    """

    entries: dict[tuple[str, str], CelestialPosition] = {}
    by_layer: dict[str, Mapping[str, CelestialPosition]] = {}
    by_object: dict[str, list[str]] = {}
    for layer_key in sorted(layers):
        bucket: dict[str, CelestialPosition] = {}
        for position in _iter_positions(layers[layer_key]):
            if position.object_id in bucket:
                raise DuplicateObjectId(layer_key, position.object_id)
            bucket[position.object_id] = position
        ordered = {oid: bucket[oid] for oid in sorted(bucket)}
        for oid, position in ordered.items():
            entries[(layer_key, oid)] = position
            by_object.setdefault(oid, []).append(layer_key)
        by_layer[layer_key] = MappingProxyType(ordered)
    return PositionIndex(
        _entries=MappingProxyType(entries),
        _by_layer=MappingProxyType(by_layer),
        _by_object=MappingProxyType({oid: tuple(keys) for oid, keys in by_object.items()}),
    )
