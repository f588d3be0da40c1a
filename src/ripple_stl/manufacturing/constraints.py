"""
Printability checks for generated ripple meshes.

Provides functions to verify that a triangle soup forms a closed solid that
stays within its circular footprint, so the STL can be sliced for 3D
printing without repair.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from ripple_stl.core.params import PRECISION
from ripple_stl.manufacturing.export import facet_normals

if TYPE_CHECKING:
    from ripple_stl.core.params import Parameters
    from ripple_stl.geometry.solid import RippleMesh


# Default tolerances
DEFAULT_FOOTPRINT_TOLERANCE = 1.0 / PRECISION  # mm, one snapping unit
EDGE_DECIMALS = 6  # vertex rounding when matching edges


@dataclass
class Violation:
    """
    Represents a mesh constraint violation.

    Attributes:
        constraint: Name of the violated constraint (e.g., "open_edge")
        location: (x, y) position in mm where violation occurs
        measured: The measured value that violates the constraint
        required: The required value for the constraint
    """

    constraint: str
    location: tuple[float, float]
    measured: float
    required: float

    def __str__(self) -> str:
        return (
            f"Violation({self.constraint}): at "
            f"({self.location[0]:.2f}, {self.location[1]:.2f}) mm - "
            f"measured {self.measured:.3f}, required {self.required:.3f}"
        )


def _vertex_keys(triangles: ArrayLike) -> list[tuple[tuple[float, ...], ...]]:
    tri = np.round(np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3), EDGE_DECIMALS)
    return [tuple(map(tuple, t)) for t in tri.tolist()]


def check_closed(triangles: ArrayLike) -> list[Violation]:
    """
    Verify every edge is shared by exactly two consistently wound triangles.

    Each directed edge A->B must be matched by exactly one reversed edge
    B->A. An unmatched edge is an open boundary (a hole); an edge used more
    than once in the same direction is non-manifold or flipped.

    Args:
        triangles: (n, 3, 3) vertex array

    Returns:
        List of violations, one per offending undirected edge (empty if the
        mesh is closed)
    """
    edges: Counter = Counter()
    for a, b, c in _vertex_keys(triangles):
        edges[(a, b)] += 1
        edges[(b, c)] += 1
        edges[(c, a)] += 1

    violations = []
    seen = set()
    for (a, b), count in edges.items():
        undirected = frozenset((a, b))
        if undirected in seen:
            continue
        reverse = edges.get((b, a), 0)
        if count == 1 and reverse == 1:
            continue
        seen.add(undirected)

        midpoint = ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
        if count == 1 and reverse == 0:
            violations.append(
                Violation(
                    constraint="open_edge",
                    location=midpoint,
                    measured=0.0,
                    required=1.0,
                )
            )
        else:
            violations.append(
                Violation(
                    constraint="non_manifold_edge",
                    location=midpoint,
                    measured=float(max(count, reverse)),
                    required=1.0,
                )
            )

    return violations


def check_footprint(
    triangles: ArrayLike,
    radius: float,
    tolerance: float = DEFAULT_FOOTPRINT_TOLERANCE,
) -> list[Violation]:
    """
    Find vertices outside the circular footprint.

    Args:
        triangles: (n, 3, 3) vertex array
        radius: Footprint radius in mm
        tolerance: Allowed overshoot in mm (snapping moves boundary vertices
            by up to half a unit)

    Returns:
        List of violations, one per distinct offending vertex
    """
    points = np.asarray(triangles, dtype=np.float64).reshape(-1, 3)
    if len(points) == 0:
        return []

    xy = np.unique(np.round(points[:, :2], EDGE_DECIMALS), axis=0)
    distance = np.hypot(xy[:, 0], xy[:, 1])
    outside = distance > radius + tolerance

    return [
        Violation(
            constraint="footprint",
            location=(float(x), float(y)),
            measured=float(d),
            required=float(radius),
        )
        for (x, y), d in zip(xy[outside], distance[outside])
    ]


def check_top_orientation(top: ArrayLike) -> list[Violation]:
    """
    Find top-surface triangles whose normal points downward.

    Degenerate triangles have no orientation and are ignored.

    Args:
        top: (n, 3, 3) top-surface vertex array

    Returns:
        List of violations (empty if every facet faces up)
    """
    tri = np.asarray(top, dtype=np.float64).reshape(-1, 3, 3)
    if len(tri) == 0:
        return []

    normals = facet_normals(tri)
    flipped = normals[:, 2] < 0
    centroids = tri.mean(axis=1)

    return [
        Violation(
            constraint="top_orientation",
            location=(float(c[0]), float(c[1])),
            measured=float(n[2]),
            required=0.0,
        )
        for c, n in zip(centroids[flipped], normals[flipped])
    ]


def check_mesh(mesh: RippleMesh, params: Parameters) -> list[Violation]:
    """Run every mesh check on an assembled ripple solid."""
    violations = check_closed(mesh.triangles)
    violations.extend(check_footprint(mesh.triangles, params.radius))
    violations.extend(check_top_orientation(mesh.top))
    return violations
