"""
Binary STL serialization for ripple meshes.

Layout (all little-endian):

- 80-byte ASCII header, zero padded or truncated
- uint32 triangle count
- per triangle: normal (3 x float32), vertices (9 x float32), uint16
  attribute byte count (always 0)

Writing uses a packed numpy record dtype. Reading back goes through
numpy-stl, which is only needed for inspection and therefore imported
lazily.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

if TYPE_CHECKING:
    from stl import mesh as stl_mesh

logger = logging.getLogger(__name__)

HEADER_SIZE = 80
DEFAULT_HEADER = "Rippling Water Surface"

STL_DTYPE = np.dtype(
    [
        ("normals", "<f4", (3,)),
        ("vectors", "<f4", (3, 3)),
        ("attr", "<u2"),
    ]
)


def facet_normals(triangles: ArrayLike) -> NDArray[np.float64]:
    """
    Unit normals of counter-clockwise triangles.

    Degenerate triangles (zero-area cross product) get a zero normal.

    Args:
        triangles: (n, 3, 3) vertex array

    Returns:
        (n, 3) array of normals
    """
    tri = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    cross = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    length = np.linalg.norm(cross, axis=1)
    normals = np.zeros_like(cross)
    nonzero = length > 0
    normals[nonzero] = cross[nonzero] / length[nonzero, None]
    return normals


def encode_header(header: str = DEFAULT_HEADER) -> bytes:
    """ASCII-encode a header, truncated or zero padded to 80 bytes."""
    raw = header.encode("ascii")[:HEADER_SIZE]
    return raw.ljust(HEADER_SIZE, b"\0")


def serialize_stl(triangles: ArrayLike, header: str = DEFAULT_HEADER) -> bytes:
    """
    Encode triangles as a binary STL buffer.

    Vertices are written in input order; the normal of each facet is derived
    from that order.

    Args:
        triangles: (n, 3, 3) vertex array in mm
        header: ASCII header text

    Returns:
        Buffer of exactly 84 + 50 * n bytes

    Raises:
        UnicodeEncodeError: If the header is not ASCII
    """
    tri = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    records = np.zeros(len(tri), dtype=STL_DTYPE)
    records["normals"] = facet_normals(tri)
    records["vectors"] = tri

    count = np.array([len(tri)], dtype="<u4")
    buffer = encode_header(header) + count.tobytes() + records.tobytes()
    logger.debug("Serialized %d triangles into %d bytes", len(tri), len(buffer))
    return buffer


def write_stl(buffer: bytes, path: Path | str) -> Path:
    """
    Write an STL buffer to disk, creating parent directories.

    Returns:
        The path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(buffer)
    return path


def load_stl(source: bytes | Path | str) -> stl_mesh.Mesh:
    """
    Parse a binary STL buffer or file with numpy-stl.

    Stored normals are kept as written so they can be compared against the
    geometry.

    Args:
        source: Raw STL bytes or a path to an STL file

    Returns:
        numpy-stl Mesh
    """
    try:
        from stl import mesh as stl_mesh
    except ImportError as err:
        raise ImportError(
            "numpy-stl is required for STL import. "
            "Install with: pip install numpy-stl"
        ) from err

    if isinstance(source, (bytes, bytearray)):
        return stl_mesh.Mesh.from_file(
            "ripple.stl", fh=io.BytesIO(bytes(source)), calculate_normals=False
        )
    return stl_mesh.Mesh.from_file(str(source), calculate_normals=False)
