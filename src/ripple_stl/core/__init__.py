"""Inputs, height field and grid sampling."""

from ripple_stl.core.grid import GridSampler, SampledGrid, grid_lines, snap, unsnap
from ripple_stl.core.params import (
    DEFAULT_SOURCES,
    MIN_SPACING_UNITS,
    PRECISION,
    Parameters,
    WaveSource,
    validate_sources,
)
from ripple_stl.core.wavefield import WaveField

__all__ = [
    "Parameters",
    "WaveSource",
    "DEFAULT_SOURCES",
    "PRECISION",
    "MIN_SPACING_UNITS",
    "validate_sources",
    "WaveField",
    "GridSampler",
    "SampledGrid",
    "grid_lines",
    "snap",
    "unsnap",
]
