"""
Ripple STL generation pipeline.

Chains the stages WaveField -> GridSampler -> Triangulator -> SolidBuilder ->
serializer. Every call recomputes everything from the given snapshot; no
state is shared between calls, so concurrent calls on different threads are
independent.

Example:
    >>> from ripple_stl import DEFAULT_SOURCES, Parameters, generate_stl
    >>> buffer = generate_stl(Parameters(resolution=50), DEFAULT_SOURCES)
    >>> len(buffer) == 84 + 50 * int.from_bytes(buffer[80:84], "little")
    True
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from ripple_stl.core.grid import GridSampler
from ripple_stl.core.params import Parameters, WaveSource
from ripple_stl.core.wavefield import WaveField
from ripple_stl.geometry.solid import RippleMesh, SolidBuilder
from ripple_stl.geometry.triangulate import Triangulator
from ripple_stl.manufacturing.export import DEFAULT_HEADER, serialize_stl

logger = logging.getLogger(__name__)


def generate_mesh(params: Parameters, sources: Sequence[WaveSource]) -> RippleMesh:
    """
    Build the closed ripple solid.

    Args:
        params: Generation parameters
        sources: Ordered wave sources (at least one)

    Returns:
        RippleMesh with top, bottom and wall triangles

    Raises:
        ValueError: If the source list is empty or malformed
    """
    wavefield = WaveField(params, sources)
    grid = GridSampler(params, wavefield).sample()
    surface = Triangulator(grid).triangulate()
    mesh = SolidBuilder(grid, params.thickness).build(
        surface.triangles, skipped_cells=surface.skipped_cells
    )
    logger.debug(
        "Generated %d triangles (size=%s, resolution=%d, %d sources)",
        mesh.num_triangles,
        params.size,
        params.resolution,
        len(wavefield.sources),
    )
    return mesh


def generate_stl(
    params: Parameters,
    sources: Sequence[WaveSource],
    header: str = DEFAULT_HEADER,
) -> bytes:
    """Generate the binary STL buffer for a parameter snapshot."""
    return serialize_stl(generate_mesh(params, sources).triangles, header=header)


async def generate_stl_async(
    params: Parameters,
    sources: Sequence[WaveSource],
    header: str = DEFAULT_HEADER,
) -> bytes:
    """
    Run :func:`generate_stl` on a worker thread.

    The event loop stays responsive while the mesh is built. Cancelling the
    awaiting task discards the result; the worker finishes on its own.
    """
    return await asyncio.to_thread(generate_stl, params, tuple(sources), header)
