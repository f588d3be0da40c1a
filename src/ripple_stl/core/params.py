"""
Input parameters for ripple surface generation.

The host owns the editable state (sliders, source list) and hands the core an
immutable snapshot per generation call. Both records validate themselves on
construction so the pipeline can assume sane input.

Classes:
    Parameters: Surface, grid and wave settings
    WaveSource: A single ripple source and its relative power

Functions:
    validate_sources: Check a source list before generation
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from numbers import Integral
from typing import Any

# Snapping granularity for vertex keys (units per mm). Not user-configurable.
PRECISION = 100

# Smallest grid spacing, in snapping units, that keeps neighbouring grid lines
# and circle crossings on distinct keys
MIN_SPACING_UNITS = 20

DEFAULT_FILENAME = "rippling_water.stl"
MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class WaveSource:
    """Point source of concentric ripples.

    Attributes:
        x: Source x position in mm (surface centered on the origin)
        y: Source y position in mm
        amplitude: Relative power, scales the global amplitude
    """

    x: float
    y: float
    amplitude: float = 1.0

    def __post_init__(self) -> None:
        for name in ("x", "y", "amplitude"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"source {name} must be finite, got {getattr(self, name)}")


# Initial sources of the interactive editor
DEFAULT_SOURCES: tuple[WaveSource, ...] = (
    WaveSource(-90.0, -100.0, 1.0),
    WaveSource(-100.0, 90.0, 0.8),
    WaveSource(90.0, 100.0, 0.9),
    WaveSource(100.0, -90.0, 1.0),
)


@dataclass(frozen=True)
class Parameters:
    """Generation parameters for a rippled disc.

    Attributes:
        size: Diameter of the circular footprint in mm
        thickness: Depth of the flat base below z=0 in mm
        resolution: Grid subdivisions per axis
        amplitude: Global wave amplitude in mm
        frequency: Spatial frequency of the ripples in 1/mm
        ring_count: Number of phase-shifted wave rings per source

    Example:
        >>> params = Parameters(size=120, resolution=60)
        >>> params.radius
        60.0
    """

    size: float = 200.0
    thickness: float = 2.0
    resolution: int = 100
    amplitude: float = 1.0
    frequency: float = 0.3
    ring_count: int = 3

    def __post_init__(self) -> None:
        """Validate parameters."""
        if isinstance(self.resolution, bool) or not isinstance(self.resolution, Integral):
            raise ValueError(f"resolution must be an integer, got {self.resolution!r}")
        if self.resolution <= 0:
            raise ValueError(f"resolution must be positive, got {self.resolution}")
        if not self.size > 0:
            raise ValueError(f"size must be positive, got {self.size}")
        if self.size / self.resolution < MIN_SPACING_UNITS / PRECISION:
            raise ValueError(
                f"grid spacing must be at least {MIN_SPACING_UNITS / PRECISION} mm, "
                f"got {self.size / self.resolution:.4g} mm (size {self.size}, "
                f"resolution {self.resolution})"
            )
        if not self.thickness > 0:
            raise ValueError(f"thickness must be positive, got {self.thickness}")
        if isinstance(self.ring_count, bool) or not isinstance(self.ring_count, Integral):
            raise ValueError(f"ring_count must be an integer, got {self.ring_count!r}")
        if self.ring_count < 1:
            raise ValueError(f"ring_count must be >= 1, got {self.ring_count}")

    @property
    def radius(self) -> float:
        """Footprint radius in mm."""
        return self.size / 2

    @property
    def spacing(self) -> float:
        """Grid line spacing in mm."""
        return self.size / self.resolution

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Parameters:
        """Build parameters from a mapping, ignoring unknown keys.

        Integer fields accept integral floats (JSON presets often carry
        ``100.0``).
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        for name in ("resolution", "ring_count"):
            value = kwargs.get(name)
            if isinstance(value, float) and value.is_integer():
                kwargs[name] = int(value)
        return cls(**kwargs)


def validate_sources(sources: Sequence[WaveSource]) -> tuple[WaveSource, ...]:
    """Check a source list and freeze it into a tuple.

    Args:
        sources: Ordered wave sources

    Returns:
        The sources as a tuple

    Raises:
        ValueError: If the list is empty or holds something other than
            WaveSource instances
    """
    sources = tuple(sources)
    if not sources:
        raise ValueError("at least one wave source is required")
    for index, source in enumerate(sources):
        if not isinstance(source, WaveSource):
            raise ValueError(
                f"source {index} must be a WaveSource, got {type(source).__name__}"
            )
    return sources
