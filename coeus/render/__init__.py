"""Render assembly: chart records in, resolved render model out."""

from .assembler import RenderResponse, assemble_render, build_layers
from .records import (
    ChartInstanceRecord,
    ChartInstanceSummary,
    ChartSettings,
    LayerCombination,
    LayerConfig,
)
from .settings import resolve_effective_settings

__all__ = [
    "ChartInstanceRecord",
    "ChartInstanceSummary",
    "ChartSettings",
    "LayerCombination",
    "LayerConfig",
    "RenderResponse",
    "assemble_render",
    "build_layers",
    "resolve_effective_settings",
]
