"""Mapping merge helpers used by settings resolution and ring overrides."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = ["deep_merge"]


def deep_merge(base: Mapping[str, Any], *overrides: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold each of ``overrides`` into ``base``, left to right.

    Later mappings win key by key. Where both sides hold a mapping under the
    same key the two are merged recursively instead of replaced. ``None``
    entries are skipped and no input is mutated.
    """

    merged: dict[str, Any] = dict(base)
    for layer in overrides:
        for key, value in (layer or {}).items():
            current = merged.get(key)
            merged[key] = (
                deep_merge(current, value)
                if isinstance(value, Mapping) and isinstance(current, Mapping)
                else value
            )
    return merged
