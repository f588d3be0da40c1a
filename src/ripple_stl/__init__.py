"""
Ripple STL - rippling water surfaces as printable solids.

Main exports:
- Parameters, WaveSource: Immutable generation inputs
- WaveField: Ripple height field
- GridSampler, SampledGrid: Circle-clipped vertex maps
- Triangulator: Top-surface triangulation
- SolidBuilder, RippleMesh: Closed solid assembly
- generate_stl: Parameters in, binary STL buffer out
"""

from ripple_stl.core.grid import GridSampler, SampledGrid
from ripple_stl.core.params import (
    DEFAULT_FILENAME,
    DEFAULT_SOURCES,
    MIME_TYPE,
    PRECISION,
    Parameters,
    WaveSource,
    validate_sources,
)
from ripple_stl.core.wavefield import WaveField
from ripple_stl.generate import generate_mesh, generate_stl, generate_stl_async
from ripple_stl.geometry import (
    CellCase,
    RippleMesh,
    SolidBuilder,
    Triangulation,
    Triangulator,
)
from ripple_stl.manufacturing import (
    DEFAULT_HEADER,
    Violation,
    check_closed,
    check_mesh,
    serialize_stl,
)

# Submodules for more specific imports
from . import core, geometry, manufacturing

__version__ = "0.1.0"

__all__ = [
    # Inputs
    "Parameters",
    "WaveSource",
    "DEFAULT_SOURCES",
    "validate_sources",
    "PRECISION",
    "DEFAULT_FILENAME",
    "MIME_TYPE",
    # Pipeline stages
    "WaveField",
    "GridSampler",
    "SampledGrid",
    "Triangulator",
    "Triangulation",
    "CellCase",
    "SolidBuilder",
    "RippleMesh",
    # Output
    "DEFAULT_HEADER",
    "serialize_stl",
    "generate_mesh",
    "generate_stl",
    "generate_stl_async",
    # Checks
    "Violation",
    "check_closed",
    "check_mesh",
    # Submodules
    "core",
    "geometry",
    "manufacturing",
]
