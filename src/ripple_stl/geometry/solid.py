"""
Closed solid assembly from a triangulated top surface.

The top surface is mirrored onto a flat base at ``z = -thickness`` and the
two are joined by a side wall running along the circular boundary. The wall
is stitched half-loop by half-loop: the upper half (y >= 0) and the lower
half (y <= 0) are each walked in increasing x, which is clockwise on the
upper half and counter-clockwise on the lower one, so the two halves use
opposite winding to keep every wall normal pointing outward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ripple_stl.core.grid import Key, SampledGrid, unsnap

logger = logging.getLogger(__name__)


@dataclass
class RippleMesh:
    """Triangles of the closed ripple solid.

    Attributes:
        top: (n, 3, 3) rippled top surface, normals up
        bottom: (n, 3, 3) flat base, normals down
        wall: (m, 3, 3) side wall, normals outward
        skipped_cells: Grid cells the triangulator had to drop
    """

    top: NDArray[np.float64]
    bottom: NDArray[np.float64]
    wall: NDArray[np.float64]
    skipped_cells: int = 0

    @property
    def triangles(self) -> NDArray[np.float64]:
        """All triangles: top, then bottom, then wall."""
        return np.concatenate([self.top, self.bottom, self.wall]).reshape(-1, 3, 3)

    @property
    def num_triangles(self) -> int:
        return len(self.top) + len(self.bottom) + len(self.wall)


def mirror_bottom(top: NDArray[np.float64], thickness: float) -> NDArray[np.float64]:
    """Project top triangles onto the base plane with reversed winding.

    Each (A, B, C) becomes (A', C', B') with the same x, y at
    ``z = -thickness``.
    """
    bottom = np.asarray(top, dtype=np.float64).reshape(-1, 3, 3)[:, [0, 2, 1], :].copy()
    bottom[:, :, 2] = -thickness
    return bottom


class SolidBuilder:
    """Close a top surface into a watertight solid.

    Args:
        grid: Sampled grid providing the boundary ring and its heights
        thickness: Depth of the flat base below z=0 in mm
    """

    def __init__(self, grid: SampledGrid, thickness: float):
        self.grid = grid
        self.thickness = thickness

    def build(self, top: NDArray[np.float64], skipped_cells: int = 0) -> RippleMesh:
        """Assemble top, mirrored bottom and side wall."""
        top = np.asarray(top, dtype=np.float64).reshape(-1, 3, 3)
        bottom = mirror_bottom(top, self.thickness)
        wall = self.wall()
        logger.debug(
            "Built solid: %d top, %d bottom, %d wall triangles",
            len(top),
            len(bottom),
            len(wall),
        )
        return RippleMesh(top=top, bottom=bottom, wall=wall, skipped_cells=skipped_cells)

    def half_loops(self) -> tuple[list[Key], list[Key]]:
        """Upper and lower boundary half-loops, closed into one ring.

        Without a boundary vertex on the x-axis (odd resolution) the half
        loops do not meet; the lower loop is then extended with the end
        points of the upper loop.
        """
        upper, lower = self.grid.boundary_ring()
        if upper and lower:
            if upper[0] != lower[0]:
                lower = [upper[0]] + lower
            if upper[-1] != lower[-1]:
                lower = lower + [upper[-1]]
        return upper, lower

    def wall(self) -> NDArray[np.float64]:
        """Side wall triangles between the top boundary and the base."""
        upper, lower = self.half_loops()
        triangles = []
        for p, q in zip(upper[:-1], upper[1:]):
            # Increasing x runs clockwise on the upper half.
            triangles.extend(self._quad(q, p))
        for p, q in zip(lower[:-1], lower[1:]):
            triangles.extend(self._quad(p, q))
        return np.array(triangles, dtype=np.float64).reshape(-1, 3, 3)

    def _quad(self, p: Key, q: Key) -> list[tuple]:
        """Two outward-facing triangles for the boundary chord p -> q.

        ``p -> q`` must run counter-clockwise seen from above, the direction
        the top surface traverses its boundary.
        """
        p_top = self.grid.point(p)
        q_top = self.grid.point(q)
        p_bot = (unsnap(p[0]), unsnap(p[1]), -self.thickness)
        q_bot = (unsnap(q[0]), unsnap(q[1]), -self.thickness)
        return [(q_top, p_top, p_bot), (q_top, p_bot, q_bot)]
