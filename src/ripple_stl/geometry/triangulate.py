"""
Top-surface triangulation of a circle-clipped grid.

Every grid cell is reflected into a canonical quadrant frame in which the
corner nearest the footprint center is SW and the farthest is NE. Because
the disc is convex and centered, corner availability is then monotone
(NE present implies all present, SE or NW present implies SW present), so a
single routine classifies all four quadrants into one of a handful of cases:

    FULL                  4 corners inside
    MISSING_ONE_INLINE    NE outside, a boundary vertex on NE's column or row
    MISSING_ONE_PENTAGON  NE outside, the circle cuts it transversally
    MISSING_TWO_ROW       SW and SE inside
    MISSING_TWO_COL       SW and NW inside
    MISSING_THREE         only SW inside
    EMPTY                 no corner inside

Triangles are built counter-clockwise in the reflected frame and flipped
back when the reflection reverses orientation, so the whole top surface has
upward normals. The boundary edges of the emitted triangles are exactly the
chords between consecutive boundary vertices, which is what the side wall
is stitched to.

Classes:
    CellCase: Cell classification
    CellFrame: Reflected view of one grid cell
    CellPlan: A classified cell and the boundary vertices it uses
    Triangulation: Result of triangulating a sampled grid
    Triangulator: Cell iteration, classification and emission
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.typing import NDArray

from ripple_stl.core.grid import Key, SampledGrid

logger = logging.getLogger(__name__)


class CellCase(Enum):
    """Corner-availability classification of a grid cell."""

    FULL = "full"
    MISSING_ONE_INLINE = "missing_one_inline"
    MISSING_ONE_PENTAGON = "missing_one_pentagon"
    MISSING_TWO_ROW = "missing_two_row"
    MISSING_TWO_COL = "missing_two_col"
    MISSING_THREE = "missing_three"
    EMPTY = "empty"


class CellLookupError(LookupError):
    """A boundary vertex the cell pattern requires is not in the maps."""


@dataclass(frozen=True)
class CellFrame:
    """Grid cell reflected so SW is nearest the center.

    Keys stay in real grid coordinates; ``sx``/``sy`` give the reflection
    that maps them into the canonical frame, where ``u = sx * kx`` and
    ``v = sy * ky`` grow away from the center.

    Attributes:
        kx_in: x key of the column nearer the center (SW/NW side)
        kx_out: x key of the outer column (SE/NE side)
        ky_in: y key of the row nearer the center (SW/SE side)
        ky_out: y key of the outer row (NW/NE side)
        sx: Reflection sign along x
        sy: Reflection sign along y
    """

    kx_in: int
    kx_out: int
    ky_in: int
    ky_out: int
    sx: int
    sy: int

    @classmethod
    def from_cell(cls, kx0: int, kx1: int, ky0: int, ky1: int) -> CellFrame:
        """Build the frame of the cell spanning [kx0, kx1] x [ky0, ky1].

        Cells straddling an axis (odd resolution) reflect with a positive
        sign; their two corners on either side of the axis are mirror images.
        """
        sx = 1 if kx0 + kx1 >= 0 else -1
        sy = 1 if ky0 + ky1 >= 0 else -1
        kx_in, kx_out = (kx0, kx1) if sx > 0 else (kx1, kx0)
        ky_in, ky_out = (ky0, ky1) if sy > 0 else (ky1, ky0)
        return cls(kx_in, kx_out, ky_in, ky_out, sx, sy)

    @property
    def sw(self) -> Key:
        return (self.kx_in, self.ky_in)

    @property
    def se(self) -> Key:
        return (self.kx_out, self.ky_in)

    @property
    def nw(self) -> Key:
        return (self.kx_in, self.ky_out)

    @property
    def ne(self) -> Key:
        return (self.kx_out, self.ky_out)

    @property
    def du(self) -> int:
        """Cell width in keys."""
        return abs(self.kx_out - self.kx_in)

    @property
    def dv(self) -> int:
        """Cell height in keys."""
        return abs(self.ky_out - self.ky_in)

    @property
    def u0(self) -> int:
        return self.sx * self.kx_in

    @property
    def u1(self) -> int:
        return self.sx * self.kx_out

    @property
    def v0(self) -> int:
        return self.sy * self.ky_in

    @property
    def v1(self) -> int:
        return self.sy * self.ky_out

    @property
    def flips(self) -> bool:
        """Whether the reflection reverses winding."""
        return self.sx * self.sy < 0


@dataclass(frozen=True)
class CellPlan:
    """A classified cell together with the boundary vertices it emits with."""

    case: CellCase
    frame: CellFrame
    boundary: tuple[Key, ...] = ()


@dataclass
class Triangulation:
    """Top-surface triangles of a sampled grid.

    Attributes:
        triangles: (n, 3, 3) array of counter-clockwise (seen from above)
            triangles in mm
        skipped_cells: Cells dropped because of a lookup miss
        case_counts: Number of cells per CellCase
    """

    triangles: NDArray[np.float64]
    skipped_cells: int = 0
    case_counts: Counter = field(default_factory=Counter)

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)


def _dist2(a: Key, b: Key) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


class Triangulator:
    """Classify grid cells and emit top-surface triangles.

    Args:
        grid: Sampled interior and boundary vertex maps

    Example:
        >>> result = Triangulator(grid).triangulate()
        >>> result.num_triangles, result.skipped_cells
    """

    def __init__(self, grid: SampledGrid):
        self.grid = grid
        self._emitters = {
            CellCase.FULL: self._emit_full,
            CellCase.MISSING_ONE_INLINE: self._emit_inline,
            CellCase.MISSING_ONE_PENTAGON: self._emit_pentagon,
            CellCase.MISSING_TWO_ROW: self._emit_two_row,
            CellCase.MISSING_TWO_COL: self._emit_two_col,
            CellCase.MISSING_THREE: self._emit_three,
            CellCase.EMPTY: self._emit_empty,
        }

    def triangulate(self) -> Triangulation:
        """Triangulate every cell of the grid."""
        keys = self.grid.line_keys.tolist()
        counts: Counter = Counter()
        skipped = 0
        triangles: list[tuple[Key, Key, Key]] = []

        for i in range(len(keys) - 1):
            for j in range(len(keys) - 1):
                frame = CellFrame.from_cell(keys[i], keys[i + 1], keys[j], keys[j + 1])
                try:
                    plan = self.classify(frame)
                except CellLookupError as err:
                    skipped += 1
                    logger.debug("Skipping cell (%d, %d): %s", i, j, err)
                    continue
                counts[plan.case] += 1
                triangles.extend(self.emit(plan))

        if skipped:
            logger.warning(
                "Skipped %d grid cells with inconsistent boundary lookups; "
                "the surface may have small gaps",
                skipped,
            )

        points = [tuple(self.grid.point(k) for k in tri) for tri in triangles]
        array = np.array(points, dtype=np.float64).reshape(-1, 3, 3)
        return Triangulation(triangles=array, skipped_cells=skipped, case_counts=counts)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, frame: CellFrame) -> CellPlan:
        """Classify a cell and resolve the boundary vertices it needs.

        Raises:
            CellLookupError: If the corner pattern is inconsistent with a
                centered disc or an expected boundary vertex is missing
        """
        grid = self.grid
        sw = grid.is_interior(*frame.sw)
        se = grid.is_interior(*frame.se)
        nw = grid.is_interior(*frame.nw)
        ne = grid.is_interior(*frame.ne)
        present = sw + se + nw + ne

        if present == 4:
            return CellPlan(CellCase.FULL, frame)
        if present == 0:
            return CellPlan(CellCase.EMPTY, frame)
        if not sw:
            raise CellLookupError("inner corner missing while an outer one is present")

        if present == 3:
            if ne:
                raise CellLookupError("outer corner present with an inner one missing")
            return self._classify_missing_one(frame)

        if present == 2:
            if se:
                b_in = self._on_column(frame, frame.kx_in, frame.v0, frame.v1, frame.nw)
                b_out = self._on_column(frame, frame.kx_out, frame.v0, frame.v1, frame.ne)
                if b_in is None or b_out is None:
                    raise CellLookupError("row cut without crossings on both columns")
                return CellPlan(CellCase.MISSING_TWO_ROW, frame, (b_in, b_out))
            if nw:
                b_in = self._on_row(frame, frame.ky_in, frame.u0, frame.u1, frame.se)
                b_out = self._on_row(frame, frame.ky_out, frame.u0, frame.u1, frame.ne)
                if b_in is None or b_out is None:
                    raise CellLookupError("column cut without crossings on both rows")
                return CellPlan(CellCase.MISSING_TWO_COL, frame, (b_in, b_out))
            raise CellLookupError("diagonal corner pair")

        return self._classify_missing_three(frame)

    def _classify_missing_one(self, frame: CellFrame) -> CellPlan:
        substitute = self._on_column(
            frame, frame.kx_out, frame.v0, frame.v1, frame.ne
        ) or self._on_row(frame, frame.ky_out, frame.u0, frame.u1, frame.ne)
        if substitute is not None:
            return CellPlan(CellCase.MISSING_ONE_INLINE, frame, (substitute,))

        # The circle passes beyond NE between the SW column and SW row.
        vertical = self._on_column(
            frame, frame.kx_in, frame.v1, frame.v1 + frame.dv, frame.ne
        )
        horizontal = self._on_row(
            frame, frame.ky_in, frame.u1, frame.u1 + frame.du, frame.ne
        )
        if vertical is None or horizontal is None:
            raise CellLookupError("pentagon cell without crossings beyond NE")
        return CellPlan(CellCase.MISSING_ONE_PENTAGON, frame, (horizontal, vertical))

    def _classify_missing_three(self, frame: CellFrame) -> CellPlan:
        up = self._on_column(frame, frame.kx_in, frame.v0, frame.v1, frame.nw)
        right = self._on_row(frame, frame.ky_in, frame.u0, frame.u1, frame.se)

        if up is not None and right is not None:
            boundary: tuple[Key, ...] = (right, up)
        elif up is not None:
            # Boundary steps down one row between this column and the next.
            back = self._on_column(
                frame, frame.kx_out, frame.v0 - frame.dv, frame.v0, frame.se
            )
            boundary = (back, up) if back is not None else ()
        elif right is not None:
            back = self._on_row(
                frame, frame.ky_out, frame.u0 - frame.du, frame.u0, frame.nw
            )
            boundary = (right, back) if back is not None else ()
        else:
            boundary = ()

        return CellPlan(CellCase.MISSING_THREE, frame, boundary)

    def _on_column(
        self, frame: CellFrame, kx: int, v_lo: int, v_hi: int, target: Key
    ) -> Key | None:
        """Boundary vertex on column ``kx`` with v in (v_lo, v_hi], nearest target."""
        best: Key | None = None
        for ky in self.grid.column_crossings(kx):
            if v_lo < frame.sy * ky <= v_hi:
                key = (kx, ky)
                if best is None or _dist2(key, target) < _dist2(best, target):
                    best = key
        return best

    def _on_row(
        self, frame: CellFrame, ky: int, u_lo: int, u_hi: int, target: Key
    ) -> Key | None:
        """Boundary vertex on row ``ky`` with u in (u_lo, u_hi], nearest target."""
        best: Key | None = None
        for kx in self.grid.row_crossings(ky):
            if u_lo < frame.sx * kx <= u_hi:
                key = (kx, ky)
                if best is None or _dist2(key, target) < _dist2(best, target):
                    best = key
        return best

    # ------------------------------------------------------------------
    # Emission (counter-clockwise in the reflected frame)
    # ------------------------------------------------------------------

    def emit(self, plan: CellPlan) -> list[tuple[Key, Key, Key]]:
        """Triangles of a classified cell, wound counter-clockwise from above."""
        triangles = self._emitters[plan.case](plan.frame, plan.boundary)
        if plan.frame.flips:
            return [(a, c, b) for a, b, c in triangles]
        return triangles

    @staticmethod
    def _emit_full(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        return [(f.sw, f.se, f.nw), (f.se, f.ne, f.nw)]

    @staticmethod
    def _emit_inline(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        (substitute,) = boundary
        return [(f.sw, f.se, f.nw), (f.se, substitute, f.nw)]

    @staticmethod
    def _emit_pentagon(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        horizontal, vertical = boundary
        return [
            (f.sw, f.se, f.nw),
            (f.se, vertical, f.nw),  # inner
            (f.se, horizontal, vertical),  # outer
        ]

    @staticmethod
    def _emit_two_row(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        b_in, b_out = boundary
        return [(f.sw, f.se, b_in), (f.se, b_out, b_in)]

    @staticmethod
    def _emit_two_col(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        b_in, b_out = boundary
        return [(f.sw, b_in, f.nw), (b_in, b_out, f.nw)]

    @staticmethod
    def _emit_three(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        if not boundary:
            return []
        first, second = boundary
        return [(f.sw, first, second)]

    @staticmethod
    def _emit_empty(f: CellFrame, boundary: tuple[Key, ...]) -> list[tuple[Key, Key, Key]]:
        return []
