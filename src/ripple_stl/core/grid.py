"""
Grid sampling of the ripple surface inside a circular footprint.

The surface is sampled on a square grid of ``resolution + 1`` lines per axis
spanning the footprint diameter. Two kinds of vertices are produced:

- Interior vertices: grid intersections strictly inside the circle.
- Boundary vertices: points where the circle crosses a grid line. Vertical
  grid lines are scanned where the circle is flatter than 45 degrees
  (|x| <= |y|) and horizontal lines where it is steeper (|x| >= |y|), so each
  crossing is taken from the scan that locates it most accurately.

All vertices are keyed by integer coordinates (mm * PRECISION, rounded half to
even), so the same physical point reached from different scans always lands
on the same key and the triangulator can use dictionary lookups as adjacency
tests.

Classes:
    SampledGrid: Interior and boundary vertex maps for one generation
    GridSampler: Builds a SampledGrid from parameters and a wave field

Functions:
    snap: Convert mm coordinates to integer keys
    grid_lines: Grid line coordinates along one axis
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ripple_stl.core.params import PRECISION, Parameters
from ripple_stl.core.wavefield import WaveField

logger = logging.getLogger(__name__)

Key = tuple[int, int]


def snap(value: ArrayLike) -> int | NDArray[np.int64]:
    """Snap mm coordinates to integer keys (1 / PRECISION mm units).

    Uses round-half-to-even for scalars and arrays alike.
    """
    scaled = np.rint(np.asarray(value, dtype=np.float64) * PRECISION)
    if scaled.ndim == 0:
        return int(scaled)
    return scaled.astype(np.int64)


def unsnap(key: int) -> float:
    """Convert an integer key back to mm."""
    return key / PRECISION


def grid_lines(params: Parameters) -> NDArray[np.float64]:
    """Grid line coordinates along one axis.

    Equivalent to ``(i / resolution - 0.5) * size`` for i in [0, resolution],
    evaluated as ``(2i - resolution) * size / (2 * resolution)`` so that lines
    mirrored about the origin are exact negatives of each other.
    """
    n = params.resolution
    steps = 2 * np.arange(n + 1, dtype=np.int64) - n
    return steps * float(params.size) / (2 * n)


@dataclass
class SampledGrid:
    """Height-tagged vertex maps for one generation.

    Attributes:
        params: Parameters the grid was sampled with
        line_keys: Integer keys of the grid lines (same for both axes)
        interior: x key -> (y key -> z) for grid points inside the circle
        boundary_x: x key -> (y key -> z) for circle/grid-line crossings
        boundary_y: y key -> list of x keys for the same crossings
    """

    params: Parameters
    line_keys: NDArray[np.int64]
    interior: dict[int, dict[int, float]] = field(default_factory=dict)
    boundary_x: dict[int, dict[int, float]] = field(default_factory=dict)
    boundary_y: dict[int, list[int]] = field(default_factory=dict)

    @property
    def num_interior(self) -> int:
        """Number of interior vertices."""
        return sum(len(column) for column in self.interior.values())

    @property
    def num_boundary(self) -> int:
        """Number of distinct boundary vertices."""
        return sum(len(column) for column in self.boundary_x.values())

    def is_interior(self, kx: int, ky: int) -> bool:
        """Whether the grid point with the given keys is an interior vertex."""
        column = self.interior.get(kx)
        return column is not None and ky in column

    def is_boundary(self, kx: int, ky: int) -> bool:
        """Whether the keys name a boundary vertex."""
        column = self.boundary_x.get(kx)
        return column is not None and ky in column

    def add_interior(self, kx: int, ky: int, z: float) -> None:
        self.interior.setdefault(kx, {})[ky] = z

    def add_boundary(self, kx: int, ky: int, z: float) -> None:
        """Record a boundary vertex in both the x- and y-indexed maps.

        A key already present keeps its first height so every key maps to
        exactly one z.
        """
        column = self.boundary_x.setdefault(kx, {})
        if ky in column:
            return
        column[ky] = z
        self.boundary_y.setdefault(ky, []).append(kx)

    def height(self, kx: int, ky: int) -> float:
        """Height of an interior or boundary vertex.

        Raises:
            KeyError: If the keys name neither
        """
        column = self.interior.get(kx)
        if column is not None and ky in column:
            return column[ky]
        return self.boundary_x[kx][ky]

    def point(self, key: Key) -> tuple[float, float, float]:
        """Materialize a vertex key as an (x, y, z) point in mm."""
        kx, ky = key
        return (unsnap(kx), unsnap(ky), self.height(kx, ky))

    def column_crossings(self, kx: int) -> dict[int, float]:
        """Boundary vertices on the vertical grid line with key ``kx``."""
        return self.boundary_x.get(kx, {})

    def row_crossings(self, ky: int) -> list[int]:
        """x keys of boundary vertices on the horizontal grid line ``ky``."""
        return self.boundary_y.get(ky, [])

    def boundary_keys(self) -> list[Key]:
        """All boundary vertex keys."""
        return [(kx, ky) for kx, column in self.boundary_x.items() for ky in column]

    def boundary_ring(self) -> tuple[list[Key], list[Key]]:
        """Split the boundary into upper and lower half-loops ordered by x.

        Vertices on the x-axis (y key 0) belong to both half-loops. Ties in x
        are ordered so that each half-loop follows the circle: on the upper
        half y rises left of center and falls right of it, mirrored on the
        lower half.

        Returns:
            (upper, lower) lists of keys
        """
        keys = self.boundary_keys()
        upper = sorted(
            (k for k in keys if k[1] >= 0),
            key=lambda k: (k[0], -k[1] if k[0] >= 0 else k[1]),
        )
        lower = sorted(
            (k for k in keys if k[1] <= 0),
            key=lambda k: (k[0], k[1] if k[0] >= 0 else -k[1]),
        )
        return upper, lower


class GridSampler:
    """Sample interior and boundary vertices of the ripple surface.

    Args:
        params: Generation parameters
        wavefield: Height field evaluated at every kept vertex

    Example:
        >>> sampler = GridSampler(params, WaveField(params, sources))
        >>> grid = sampler.sample()
        >>> grid.num_interior, grid.num_boundary
    """

    def __init__(self, params: Parameters, wavefield: WaveField):
        self.params = params
        self.wavefield = wavefield
        self.radius = params.radius
        self.lines = grid_lines(params)

    def sample(self) -> SampledGrid:
        """Build fresh vertex maps."""
        grid = SampledGrid(params=self.params, line_keys=snap(self.lines))
        self._sample_interior(grid)
        self._scan_vertical(grid)
        self._scan_horizontal(grid)
        self._drop_coincident(grid)
        logger.debug(
            "Sampled %d interior and %d boundary vertices at resolution %d",
            grid.num_interior,
            grid.num_boundary,
            self.params.resolution,
        )
        return grid

    def _sample_interior(self, grid: SampledGrid) -> None:
        x, y = np.meshgrid(self.lines, self.lines, indexing="ij")
        inside = x * x + y * y < self.radius * self.radius
        kx = snap(x[inside])
        ky = snap(y[inside])
        z = self.wavefield.height(kx / PRECISION, ky / PRECISION)
        for i, j, h in zip(kx.tolist(), ky.tolist(), np.atleast_1d(z).tolist()):
            grid.add_interior(i, j, h)

    def _crossings(self, coordinate: float) -> list[float]:
        """Signed circle crossings of a grid line at ``coordinate``."""
        remaining = self.radius * self.radius - coordinate * coordinate
        if remaining < 0:
            return []
        other = math.sqrt(remaining)
        return [other, -other]

    def _scan_vertical(self, grid: SampledGrid) -> None:
        for x in self.lines.tolist():
            for y in self._crossings(x):
                if abs(x) <= abs(y):
                    self._store(grid, x, y)

    def _scan_horizontal(self, grid: SampledGrid) -> None:
        for y in self.lines.tolist():
            for x in self._crossings(y):
                if abs(x) >= abs(y):
                    self._store(grid, x, y)

    def _store(self, grid: SampledGrid, x: float, y: float) -> None:
        kx, ky = self._onto_grid_point(grid, snap(x), snap(y))
        grid.add_boundary(kx, ky, self.wavefield.height(unsnap(kx), unsnap(ky)))

    @staticmethod
    def _onto_grid_point(grid: SampledGrid, kx: int, ky: int) -> Key:
        """Move a crossing onto an interior grid point one unit away.

        A grid point on the circle can pass the interior test while its
        crossing rounds to the neighbouring key. The crossing then takes the
        grid point's key so the interior vertex is dropped as coincident.
        """
        for dx, dy in ((0, 0), (0, -1), (0, 1), (-1, 0), (1, 0)):
            if grid.is_interior(kx + dx, ky + dy):
                return kx + dx, ky + dy
        return kx, ky

    def _drop_coincident(self, grid: SampledGrid) -> None:
        """Remove interior vertices that snap onto a boundary vertex.

        Such grid points lie on the circle within snapping tolerance; keeping
        both would give one key two heights.
        """
        dropped = 0
        for kx, column in grid.boundary_x.items():
            interior = grid.interior.get(kx)
            if interior is None:
                continue
            for ky in column:
                if interior.pop(ky, None) is not None:
                    dropped += 1
            if not interior:
                del grid.interior[kx]
        if dropped:
            logger.debug("Dropped %d interior vertices lying on the circle", dropped)
