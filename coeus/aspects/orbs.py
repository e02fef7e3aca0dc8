"""Orb settings: aspect name → maximum allowed orb in degrees."""

from __future__ import annotations

import math
from collections.abc import Mapping

from ..errors import UnknownAspectDefinition
from .catalog import AspectDefinition

__all__ = ["DEFAULT_ORBS", "OrbSettings", "prepare_orbs"]


OrbSettings = Mapping[str, float]

DEFAULT_ORBS: dict[str, float] = {
    "conjunction": 8.0,
    "opposition": 8.0,
    "trine": 7.0,
    "square": 6.0,
    "sextile": 4.0,
}


def prepare_orbs(
    orb_settings: OrbSettings | None,
    catalog: Mapping[str, AspectDefinition],
) -> dict[str, float]:
    """Return orb limits keyed by canonical aspect name.

    Keys are matched case-insensitively. Every key must name an aspect in
    ``catalog``.

    Raises
    ------
    UnknownAspectDefinition
        For the first (sorted) key that is not in ``catalog``.
    ValueError
        When an orb is negative or not a finite number.
    """

    prepared: dict[str, float] = {}
    for raw_name in sorted(orb_settings or {}):
        name = str(raw_name).strip().lower()
        if name not in catalog:
            raise UnknownAspectDefinition(str(raw_name))
        orb = float(orb_settings[raw_name])  # type: ignore[index]
        if not math.isfinite(orb) or orb < 0.0:
            raise ValueError(f"{name}: orb must be a finite non-negative number, got {orb!r}")
        prepared[name] = orb
    return prepared
