"""Structural merge of ring overrides onto a base template."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..utils.merging import deep_merge
from .models import RingSpec

__all__ = ["RingOverrides", "merge_rings", "override_map"]


RingOverrides = Mapping[str, RingSpec | Mapping[str, Any]] | Iterable[RingSpec | Mapping[str, Any]]


def _partial(value: RingSpec | Mapping[str, Any]) -> dict[str, Any]:
    spec = value if isinstance(value, RingSpec) else RingSpec.model_validate(value)
    return spec.model_dump(exclude_unset=True)


def override_map(overrides: RingOverrides | None) -> dict[str, dict[str, Any]]:
    """Return overrides as ``ring key -> partial fields`` preserving order."""

    if not overrides:
        return {}
    out: dict[str, dict[str, Any]] = {}
    if isinstance(overrides, Mapping):
        for key, value in overrides.items():
            fields = _partial(value)
            fields["key"] = str(key)
            out[str(key)] = fields
        return out
    for value in overrides:
        fields = _partial(value)
        key = fields.get("key") or fields.get("kind")
        if not key:
            raise ValueError("ring overrides need a key or a kind")
        fields["key"] = key
        if key in out:
            raise ValueError(f"duplicate ring override {key!r}")
        out[key] = fields
    return out


def merge_rings(
    base: Iterable[RingSpec],
    overrides: RingOverrides | None,
    *,
    include_base: bool = True,
) -> list[RingSpec]:
    """Merge ``overrides`` into ``base`` by ring key.

    Matching rings take the override's explicitly set fields and inherit the
    rest. Overrides without a base ring are appended in their own order. With
    ``include_base=False`` the overrides alone define the rings.
    """

    pending = override_map(overrides)
    merged: list[RingSpec] = []
    if include_base:
        for ring in base:
            fields = ring.model_dump(exclude_unset=True)
            key = ring.key or ring.kind
            fields["key"] = key
            if key in pending:
                fields = deep_merge(fields, pending.pop(key))
            merged.append(RingSpec.model_validate(fields))
    for fields in pending.values():
        fields = dict(fields)
        fields.setdefault("kind", fields["key"])
        merged.append(RingSpec.model_validate(fields))
    return [ring for ring in merged if ring.enabled]
