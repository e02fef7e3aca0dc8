"""Small shared helpers."""

from .merging import deep_merge

__all__ = ["deep_merge"]
