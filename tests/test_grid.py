"""Tests for grid sampling and boundary vertex maps."""

import numpy as np
import pytest

from ripple_stl.core.grid import GridSampler, SampledGrid, grid_lines, snap, unsnap
from ripple_stl.core.params import DEFAULT_SOURCES, PRECISION, Parameters
from ripple_stl.core.wavefield import WaveField


def sample(params, sources=DEFAULT_SOURCES):
    return GridSampler(params, WaveField(params, sources)).sample()


def all_keys(grid):
    interior = [(kx, ky) for kx, column in grid.interior.items() for ky in column]
    return interior, grid.boundary_keys()


class TestSnapping:
    """Tests for integer key snapping."""

    def test_scalar(self):
        assert snap(12.34) == 1234
        assert isinstance(snap(12.34), int)

    def test_round_half_even(self):
        """Exact halves round to the even neighbour."""
        assert snap(0.125) == 12
        assert snap(0.375) == 38
        assert snap(-0.125) == -12

    def test_array(self):
        keys = snap(np.array([1.0, -2.5, 0.0]))
        np.testing.assert_array_equal(keys, [100, -250, 0])
        assert keys.dtype == np.int64

    def test_negative_zero(self):
        assert snap(-0.0) == 0

    def test_unsnap(self):
        assert unsnap(8660) == pytest.approx(86.60)


class TestGridLines:
    """Tests for grid line placement."""

    def test_even_resolution(self):
        params = Parameters(size=200.0, resolution=4)
        np.testing.assert_array_equal(grid_lines(params), [-100.0, -50.0, 0.0, 50.0, 100.0])

    @pytest.mark.parametrize("resolution", [3, 7, 13, 100])
    def test_sign_symmetric(self, resolution):
        """Mirrored grid lines are exact negatives."""
        lines = grid_lines(Parameters(size=123.4, resolution=resolution))
        assert len(lines) == resolution + 1
        np.testing.assert_array_equal(lines, -lines[::-1])
        assert lines[0] == pytest.approx(-61.7)
        assert lines[-1] == pytest.approx(61.7)


class TestReferenceGrid:
    """Tests on the 200 mm, resolution 4 reference scene."""

    def test_interior_vertices(self, flat_grid):
        """The 3 x 3 inner grid points lie strictly inside the circle."""
        assert flat_grid.num_interior == 9
        for kx in (-5000, 0, 5000):
            for ky in (-5000, 0, 5000):
                assert flat_grid.is_interior(kx, ky)
        assert not flat_grid.is_interior(10000, 0)

    def test_boundary_vertices(self, flat_grid):
        """Four axis points plus two crossings per off-axis line pair."""
        assert flat_grid.num_boundary == 12
        expected = {
            (0, 10000), (0, -10000), (10000, 0), (-10000, 0),
            (5000, 8660), (5000, -8660), (-5000, 8660), (-5000, -8660),
            (8660, 5000), (8660, -5000), (-8660, 5000), (-8660, -5000),
        }
        assert set(flat_grid.boundary_keys()) == expected

    def test_scan_direction_split(self, flat_grid):
        """Vertical scans own the steep crossings, horizontal scans the flat ones."""
        assert set(flat_grid.column_crossings(5000)) == {8660, -8660}
        assert sorted(flat_grid.row_crossings(5000)) == [-8660, 8660]
        assert flat_grid.column_crossings(10000) == {0: 0.0}
        assert flat_grid.row_crossings(12345) == []

    def test_flat_heights(self, flat_grid):
        for key in flat_grid.boundary_keys():
            assert flat_grid.point(key)[2] == 0.0

    def test_boundary_ring(self, flat_grid):
        """Half-loops are ordered by x and share the x-axis end points."""
        upper, lower = flat_grid.boundary_ring()
        assert upper == [
            (-10000, 0), (-8660, 5000), (-5000, 8660), (0, 10000),
            (5000, 8660), (8660, 5000), (10000, 0),
        ]
        assert lower == [
            (-10000, 0), (-8660, -5000), (-5000, -8660), (0, -10000),
            (5000, -8660), (8660, -5000), (10000, 0),
        ]


class TestSamplingInvariants:
    """Tests that hold for every resolution."""

    @pytest.mark.parametrize("resolution", [4, 5, 10, 17, 50])
    def test_circle_constraint(self, resolution):
        """Interior vertices are inside; boundary vertices are on the circle."""
        params = Parameters(size=200.0, resolution=resolution)
        grid = sample(params)
        interior, boundary = all_keys(grid)

        r = params.radius
        for kx, ky in interior:
            assert np.hypot(unsnap(kx), unsnap(ky)) < r + 1.0 / PRECISION
        for kx, ky in boundary:
            distance = np.hypot(unsnap(kx), unsnap(ky))
            assert abs(distance - r) <= 1.0 / PRECISION

    @pytest.mark.parametrize("resolution", [4, 5, 10, 17, 50])
    def test_keys_unique(self, resolution):
        """No key is both an interior and a boundary vertex."""
        grid = sample(Parameters(size=200.0, resolution=resolution))
        interior, boundary = all_keys(grid)
        assert not set(interior) & set(boundary)

    @pytest.mark.parametrize("size,resolution", [(99.99, 98), (99.99, 106), (62.11, 82)])
    def test_no_interior_next_to_crossing(self, size, resolution):
        """Grid points on the circle become boundary vertices, not near-duplicates."""
        grid = sample(Parameters(size=size, resolution=resolution))
        interior, boundary = all_keys(grid)
        interior = set(interior)
        for kx, ky in boundary:
            for dx, dy in ((0, 0), (0, -1), (0, 1), (-1, 0), (1, 0)):
                assert (kx + dx, ky + dy) not in interior

    @pytest.mark.parametrize("resolution", [5, 10, 17])
    def test_boundary_mirror_symmetric(self, resolution):
        """The boundary is symmetric about both axes."""
        grid = sample(Parameters(size=200.0, resolution=resolution))
        keys = set(grid.boundary_keys())
        for kx, ky in keys:
            assert (-kx, ky) in keys
            assert (kx, -ky) in keys

    def test_maps_agree(self):
        """Both boundary maps describe the same vertex set."""
        grid = sample(Parameters(size=200.0, resolution=17))
        from_y = {(kx, ky) for ky, xs in grid.boundary_y.items() for kx in xs}
        assert from_y == set(grid.boundary_keys())

    def test_heights_from_wave_field(self):
        """Stored heights are the field evaluated at the snapped coordinates."""
        params = Parameters(size=200.0, resolution=10)
        field = WaveField(params, DEFAULT_SOURCES)
        grid = GridSampler(params, field).sample()

        interior, boundary = all_keys(grid)
        for kx, ky in interior + boundary:
            assert grid.height(kx, ky) == pytest.approx(field.height(unsnap(kx), unsnap(ky)))

    def test_odd_resolution_has_no_axis_vertices(self):
        """Without a grid line on an axis no boundary vertex lies on it."""
        grid = sample(Parameters(size=200.0, resolution=5))
        assert all(ky != 0 and kx != 0 for kx, ky in grid.boundary_keys())

    def test_fresh_maps_per_call(self):
        params = Parameters(size=200.0, resolution=6)
        sampler = GridSampler(params, WaveField(params, DEFAULT_SOURCES))
        first = sampler.sample()
        second = sampler.sample()
        assert first.interior is not second.interior
        assert first.interior == second.interior


class TestSampledGrid:
    """Tests for the vertex map container."""

    def make_grid(self):
        params = Parameters(size=200.0, resolution=4)
        return SampledGrid(params=params, line_keys=snap(grid_lines(params)))

    def test_first_boundary_height_wins(self):
        grid = self.make_grid()
        grid.add_boundary(100, 200, 1.5)
        grid.add_boundary(100, 200, 9.0)

        assert grid.height(100, 200) == 1.5
        assert grid.row_crossings(200) == [100]

    def test_height_prefers_interior(self):
        grid = self.make_grid()
        grid.add_interior(0, 0, 0.25)
        assert grid.height(0, 0) == 0.25
        assert grid.point((0, 0)) == (0.0, 0.0, 0.25)

    def test_missing_key_raises(self):
        grid = self.make_grid()
        with pytest.raises(KeyError):
            grid.height(1, 2)
