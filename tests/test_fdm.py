"""Tests for the finite difference stencils and heat equation solver."""

import numpy as np
import pytest

from transport import HeatConfig, HeatSolver, InvalidConfig, RunState, create_grid, run_heat
from transport.fdm import (
    FD_STENCILS,
    apply_stencil,
    get_stencil,
    heat_max_dt,
    init_heat_gaussian,
    init_heat_step,
)


class TestStencils:
    """Finite difference stencil table."""

    @pytest.mark.parametrize("name", list(FD_STENCILS))
    def test_weights_sum_to_zero(self, name):
        """Derivatives of a constant vanish."""
        assert sum(get_stencil(name).weights) == pytest.approx(0.0)

    @pytest.mark.parametrize("name", ["forward-1", "backward-1", "central-1"])
    def test_first_derivative_of_linear_is_exact(self, name):
        x = np.linspace(0.0, 1.0, 11)
        d = apply_stencil(3.0 * x + 1.0, name, h=0.1)
        assert np.allclose(d, 3.0)

    def test_second_derivative_of_quadratic_is_exact(self):
        x = np.linspace(0.0, 1.0, 21)
        d = apply_stencil(x**2, "central-2", h=0.05)
        assert d.shape == (19,)
        assert np.allclose(d, 2.0)

    def test_central_is_second_order(self):
        """Halving h reduces the central error by about 4."""
        errors = []
        for n in (20, 40):
            x = np.linspace(0.0, 1.0, n + 1)
            h = 1.0 / n
            d = apply_stencil(np.sin(x), "central-1", h)
            errors.append(np.max(np.abs(d - np.cos(x[1:-1]))))
        assert errors[0] / errors[1] == pytest.approx(4.0, rel=0.05)

    def test_stencil_metadata(self):
        s = get_stencil("central-2")
        assert s.kind == "central"
        assert s.order == 2
        assert s.radius == 1
        assert "Delta x^2" in s.formula

    def test_unknown_stencil(self):
        with pytest.raises(InvalidConfig):
            get_stencil("central-4")

    def test_too_few_points(self):
        with pytest.raises(InvalidConfig):
            apply_stencil(np.array([1.0, 2.0]), "central-2", 0.1)


class TestHeatSolver:
    """Explicit FTCS heat equation with fixed ends."""

    def test_initial_profiles(self):
        T = init_heat_step(100, 1.0)
        assert np.all(T[30:70] == 1.0)
        assert T.sum() == 40
        G = init_heat_gaussian(101, 1.0)
        assert np.argmax(G) == 50

    def test_heat_max_dt(self):
        assert heat_max_dt(0.1, 0.5) == pytest.approx(0.4 * 0.01 / 1.0)

    def test_stable_run_decays(self):
        grid = create_grid(50, 1.0)
        dt = heat_max_dt(grid.dx, 0.01)
        config = HeatConfig(grid=grid, dt=dt, alpha=0.01, n_steps=200, snapshot_interval=50)
        solver = HeatSolver(config)
        history = solver.solve(init_heat_step(50, 1.0))

        assert solver.r == pytest.approx(0.2)
        assert history.state is RunState.COMPLETED
        assert history.final.phi.max() < 1.0
        assert history.final.phi.min() >= 0.0
        assert history.final.phi[0] == 0.0
        assert history.final.phi[-1] == 0.0

    def test_fixed_end_temperatures(self):
        grid = create_grid(20, 1.0)
        config = HeatConfig(
            grid=grid, dt=heat_max_dt(grid.dx, 0.01), alpha=0.01, T_left=1.0, T_right=0.5, n_steps=10
        )
        history = run_heat(np.zeros(20), config)
        assert history.final.phi[0] == 1.0
        assert history.final.phi[-1] == 0.5
        assert history.final.phi[1] > 0.0

    def test_hot_wall_is_not_divergence(self):
        """A wall far hotter than the initial field does not trip the divergence check."""
        grid = create_grid(20, 1.0)
        config = HeatConfig(
            grid=grid, dt=heat_max_dt(grid.dx, 0.01), alpha=0.01, T_left=1e9, T_right=0.0, n_steps=10
        )
        history = run_heat(np.zeros(20), config)
        assert not history.diverged
        assert history.state is RunState.COMPLETED
        assert history.final.phi[0] == 1e9
        assert history.final.phi.max() <= 1e9

    def test_unstable_run_diverges(self):
        """r = 0.6 > 0.5 violates the FTCS stability limit."""
        grid = create_grid(50, 1.0)
        dt = 0.6 * grid.dx**2 / 0.01
        config = HeatConfig(grid=grid, dt=dt, alpha=0.01, n_steps=500)
        solver = HeatSolver(config)
        history = solver.solve(init_heat_step(50, 1.0))
        assert solver.metrics.fourier == pytest.approx(0.6)
        assert history.diverged

    def test_invalid_alpha(self):
        with pytest.raises(InvalidConfig):
            HeatConfig(grid=create_grid(10, 1.0), dt=0.01, alpha=-1.0)
