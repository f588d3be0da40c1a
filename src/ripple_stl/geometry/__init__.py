"""Top-surface triangulation and solid assembly."""

from ripple_stl.geometry.solid import RippleMesh, SolidBuilder, mirror_bottom
from ripple_stl.geometry.triangulate import (
    CellCase,
    CellFrame,
    CellLookupError,
    Triangulation,
    Triangulator,
)

__all__ = [
    # Triangulation
    "CellCase",
    "CellFrame",
    "CellLookupError",
    "Triangulation",
    "Triangulator",
    # Solid
    "RippleMesh",
    "SolidBuilder",
    "mirror_bottom",
]
