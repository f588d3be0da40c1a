"""Pytest configuration for the ripple-stl test suite.

Shared fixtures build the small reference scene used across modules: a
200 mm disc at resolution 4 with one centered source and zero amplitude,
so every top vertex sits at z = 0 and the triangle counts are known
exactly (28 top, 28 bottom, 24 wall).
"""

import pytest

from ripple_stl.core.grid import GridSampler
from ripple_stl.core.params import DEFAULT_SOURCES, Parameters, WaveSource
from ripple_stl.core.wavefield import WaveField
from ripple_stl.generate import generate_mesh


@pytest.fixture
def flat_params():
    """Reference parameters: flat surface on a 4 x 4 grid."""
    return Parameters(size=200.0, thickness=2.0, resolution=4, amplitude=0.0)


@pytest.fixture
def center_source():
    """Single unit-power source at the origin."""
    return [WaveSource(0.0, 0.0, 1.0)]


@pytest.fixture
def flat_grid(flat_params, center_source):
    """Sampled grid of the reference scene."""
    return GridSampler(flat_params, WaveField(flat_params, center_source)).sample()


@pytest.fixture
def flat_mesh(flat_params, center_source):
    """Assembled solid of the reference scene."""
    return generate_mesh(flat_params, center_source)


@pytest.fixture
def rippled_params():
    """Moderate resolution with real ripples."""
    return Parameters(size=200.0, thickness=2.0, resolution=30, amplitude=2.0)


@pytest.fixture
def default_sources():
    """The four sources of the default scene."""
    return list(DEFAULT_SOURCES)
