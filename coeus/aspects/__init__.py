"""Aspect catalog, orb settings and the pairwise matcher."""

from .catalog import ASPECT_CATALOG, MAJOR_ASPECTS, AspectDefinition, catalog_from
from .matcher import AspectPair, AspectSet, compute_aspects, match_pair
from .orbs import DEFAULT_ORBS, OrbSettings, prepare_orbs

__all__ = [
    "ASPECT_CATALOG",
    "DEFAULT_ORBS",
    "MAJOR_ASPECTS",
    "AspectDefinition",
    "AspectPair",
    "AspectSet",
    "OrbSettings",
    "catalog_from",
    "compute_aspects",
    "match_pair",
    "prepare_orbs",
]
