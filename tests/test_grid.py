"""Tests for grid construction and initial conditions."""

import numpy as np
import pytest

from transport import Grid1D, InitialCondition, InvalidConfig, create_grid, init_field
from transport.fields import as_initial_condition


class TestCreateGrid:
    """Tests for create_grid."""

    def test_spacing_and_centres(self):
        """Cell centres sit at (i + 0.5) dx."""
        grid = create_grid(4, 2.0)
        assert grid.dx == pytest.approx(0.5)
        assert np.allclose(grid.x_cell, [0.25, 0.75, 1.25, 1.75])
        assert np.allclose(grid.x_face, [0.0, 0.5, 1.0, 1.5, 2.0])
        assert grid.n_faces == 5

    def test_single_cell(self):
        """N=1 is a valid grid."""
        grid = create_grid(1, 1.0)
        assert grid.x_cell.shape == (1,)
        assert grid.x_cell[0] == pytest.approx(0.5)

    def test_coordinates_read_only(self, grid100):
        """Grid coordinates cannot be modified in place."""
        with pytest.raises(ValueError):
            grid100.x_cell[0] = 1.0

    @pytest.mark.parametrize("nx", [0, -3, 2.5, True, "10"])
    def test_invalid_cell_count(self, nx):
        with pytest.raises(InvalidConfig):
            create_grid(nx, 1.0)

    @pytest.mark.parametrize("L", [0.0, -1.0, float("nan"), float("inf"), "abc"])
    def test_invalid_length(self, L):
        with pytest.raises(InvalidConfig):
            create_grid(10, L)

    @pytest.mark.parametrize("nx,L", [(0, 1.0), (-2, 1.0), (10, 0.0), (10, "abc")])
    def test_direct_construction_validated(self, nx, L):
        """Building Grid1D without create_grid runs the same checks."""
        with pytest.raises(InvalidConfig):
            Grid1D(nx=nx, L=L)

    def test_invalid_config_is_value_error(self):
        """InvalidConfig can be caught as ValueError."""
        with pytest.raises(ValueError):
            create_grid(0, 1.0)


class TestInitialConditions:
    """Tests for the analytic initial profiles."""

    def test_step_covers_expected_cells(self, grid100):
        """Default step is 1 on [0.2, 0.4]: exactly cells 20..39."""
        phi = init_field(grid100.x_cell, grid100.L, "step")
        assert np.all(phi[20:40] == 1.0)
        assert phi.sum() == 20
        assert set(np.unique(phi)) == {0.0, 1.0}

    def test_gaussian_peak(self, grid100):
        """Gaussian peaks near the configured centre."""
        phi = init_field(grid100.x_cell, grid100.L, {"type": "gaussian", "gauss_center": 0.3})
        assert grid100.x_cell[np.argmax(phi)] == pytest.approx(0.3, abs=grid100.dx)
        assert phi.max() <= 1.0
        assert phi.min() > 0.0

    def test_sine_has_zero_mean(self, grid100):
        phi = init_field(grid100.x_cell, grid100.L, "sine")
        assert abs(phi.mean()) < 1e-12
        assert phi.max() == pytest.approx(1.0, abs=1e-3)

    def test_triangle(self, grid100):
        """Triangle is 1 - |x - L/2| / (0.2 L) inside, 0 outside."""
        phi = init_field(grid100.x_cell, grid100.L, "triangle")
        assert phi.max() == pytest.approx(1.0 - 0.005 / 0.2)
        assert np.all(phi[grid100.x_cell < 0.3] == 0.0)
        assert np.all(phi[grid100.x_cell > 0.7] == 0.0)

    def test_scales_with_domain_length(self):
        """Positions are fractions of L."""
        grid = create_grid(100, 4.0)
        phi = init_field(grid.x_cell, grid.L, "step")
        assert np.all(phi[20:40] == 1.0)
        assert phi.sum() == 20

    def test_returns_fresh_array(self, grid100):
        a = init_field(grid100.x_cell, grid100.L, "step")
        b = init_field(grid100.x_cell, grid100.L, "step")
        a[:] = 5.0
        assert b.max() == 1.0

    def test_unknown_profile(self, grid100):
        with pytest.raises(InvalidConfig, match="Unknown initial profile"):
            init_field(grid100.x_cell, grid100.L, "square")

    @pytest.mark.parametrize("L", ["one", None, 0.0, float("nan")])
    def test_invalid_domain_length(self, grid100, L):
        with pytest.raises(InvalidConfig, match="Domain length"):
            init_field(grid100.x_cell, L, "step")

    def test_unknown_parameter(self):
        with pytest.raises(InvalidConfig, match="Unknown initial condition parameters"):
            as_initial_condition({"type": "step", "height": 2.0})

    def test_none_values_use_defaults(self):
        """Mapping entries set to None fall back to the defaults."""
        ic = as_initial_condition({"type": "gaussian", "gauss_sigma": None})
        assert ic == InitialCondition(type="gaussian")

    def test_non_positive_sigma(self):
        with pytest.raises(InvalidConfig):
            as_initial_condition({"type": "gaussian", "gauss_sigma": 0.0})
