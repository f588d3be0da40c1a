"""Ripple height field.

The surface height at a point is the mean of phase-shifted sine rings
emitted by every source:

    z = 1 / (R * S) * sum_s sum_w A * a_s * sin(d_s * f + w * pi / R)

where R is the ring count, S the number of sources, A the global amplitude,
a_s the source power, d_s the distance to the source and f the frequency.

Example:
    >>> from ripple_stl import Parameters, WaveField, WaveSource
    >>> field = WaveField(Parameters(amplitude=2.0), [WaveSource(0.0, 0.0)])
    >>> z = field.height(10.0, 0.0)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ripple_stl.core.params import Parameters, WaveSource, validate_sources


@dataclass(frozen=True)
class WaveField:
    """Scalar ripple height evaluated from a list of sources.

    Args:
        params: Generation parameters (amplitude, frequency, ring_count)
        sources: Ordered wave sources (at least one)
    """

    params: Parameters
    sources: Sequence[WaveSource]

    # Internal state (not part of public interface)
    _positions: NDArray[np.float64] | None = field(
        default=None, init=False, repr=False, compare=False
    )
    _powers: NDArray[np.float64] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        sources = validate_sources(self.sources)
        object.__setattr__(self, "sources", sources)
        object.__setattr__(
            self, "_positions", np.array([(s.x, s.y) for s in sources], dtype=np.float64)
        )
        object.__setattr__(
            self, "_powers", np.array([s.amplitude for s in sources], dtype=np.float64)
        )

    def height(self, x: ArrayLike, y: ArrayLike) -> float | NDArray[np.float64]:
        """Evaluate the ripple height.

        Accepts scalars or broadcastable arrays of coordinates in mm.

        Returns:
            Height in mm, a float for scalar input, otherwise an array of the
            broadcast shape
        """
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        scalar = x.ndim == 0 and y.ndim == 0

        rings = self.params.ring_count
        phases = np.arange(rings) * np.pi / rings

        z = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
        for (sx, sy), power in zip(self._positions, self._powers):
            dist = np.hypot(x - sx, y - sy)
            for phase in phases:
                z = z + self.params.amplitude * power * np.sin(
                    dist * self.params.frequency + phase
                )

        z = z / (rings * len(self.sources))
        if scalar:
            return float(z)
        return z

    __call__ = height
