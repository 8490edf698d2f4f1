"""Pytest configuration and fixtures for the transport solver tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


ALL_SCHEMES = ["UDS", "CDS", "TVD-minmod", "TVD-vanLeer", "TVD-superbee"]
TVD_SCHEMES = ["TVD-minmod", "TVD-vanLeer", "TVD-superbee"]


@pytest.fixture
def grid100():
    """Standard N=100 grid on [0, 1]."""
    from transport import create_grid

    return create_grid(100, 1.0)


@pytest.fixture
def step_field(grid100):
    """Step profile equal to 1 on [0.2, 0.4] (cells 20..39)."""
    from transport import init_field

    return init_field(grid100.x_cell, grid100.L, "step")


@pytest.fixture
def make_config(grid100):
    """Factory for SimulationConfig on the N=100 grid at a given CFL."""
    from transport import SimulationConfig

    def _make(scheme="UDS", cfl=0.5, u=1.0, gamma=0.0, n_steps=100, snapshot_interval=10, **kwargs):
        dt = cfl * grid100.dx / abs(u) if u != 0 else 1e-3
        return SimulationConfig(
            grid=grid100,
            dt=dt,
            u=u,
            gamma=gamma,
            scheme=scheme,
            n_steps=n_steps,
            snapshot_interval=snapshot_interval,
            **kwargs,
        )

    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
