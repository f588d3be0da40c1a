"""Manufacturing tools for mesh checks and STL export."""

# Mesh checks
from ripple_stl.manufacturing.constraints import (
    Violation,
    check_closed,
    check_footprint,
    check_mesh,
    check_top_orientation,
)

# STL export
from ripple_stl.manufacturing.export import (
    DEFAULT_HEADER,
    facet_normals,
    load_stl,
    serialize_stl,
    write_stl,
)

__all__ = [
    # Checks
    "Violation",
    "check_closed",
    "check_footprint",
    "check_top_orientation",
    "check_mesh",
    # Export
    "DEFAULT_HEADER",
    "facet_normals",
    "serialize_stl",
    "write_stl",
    "load_stl",
]
