"""Finite difference solver for the 1D heat equation.

    dT/dt = alpha d2T/dx2

Explicit Euler in time with the central second-derivative stencil:

    T_i^{n+1} = T_i^n + r (T_{i+1} - 2 T_i + T_{i-1}),   r = alpha dt / dx^2

The end values are held fixed. The scheme is stable for r <= 0.5.
"""

import numpy as np

from ..base import TransportSolver
from ..datastructures import HeatConfig, SimulationHistory
from ..metrics import fourier_number
from .stencils import FD_STENCILS, apply_stencil


class HeatSolver(TransportSolver):
    """Explicit FDM heat equation solver with fixed end temperatures."""

    Config = HeatConfig

    def __init__(self, config=None, **kwargs):
        super().__init__(config, **kwargs)
        self.dx = self.grid.dx
        self.r = fourier_number(self.config.alpha, self.config.dt, self.dx)
        self._laplacian = FD_STENCILS["central-2"]

    def step(self, phi, out, step):
        cfg = self.config
        out[:] = phi
        if phi.shape[0] > 2:
            out[1:-1] += cfg.alpha * cfg.dt * apply_stencil(phi, self._laplacian, self.dx)
        out[0] = cfg.T_left
        out[-1] = cfg.T_right
        return out

    def _boundary_magnitudes(self) -> tuple:
        return abs(self.config.T_left), abs(self.config.T_right)

    def _stability_numbers(self) -> dict:
        return {"cfl": 0.0, "peclet": 0.0, "fourier": self.r}


def init_heat_gaussian(nx: int, L: float, center: float = None, sigma: float = 0.05) -> np.ndarray:
    """Gaussian temperature bump sampled at the cell centres (center and sigma absolute)."""
    c = 0.5 * L if center is None else center
    x = (np.arange(nx) + 0.5) * L / nx
    return np.exp(-((x - c) ** 2) / (2.0 * sigma * sigma))


def init_heat_step(nx: int, L: float, x_left: float = None, x_right: float = None) -> np.ndarray:
    """Top-hat temperature profile, 1 on [x_left, x_right]."""
    xl = 0.3 * L if x_left is None else x_left
    xr = 0.7 * L if x_right is None else x_right
    x = (np.arange(nx) + 0.5) * L / nx
    return np.where((x >= xl) & (x <= xr), 1.0, 0.0)


def heat_max_dt(dx: float, alpha: float, safety_factor: float = 0.4) -> float:
    """Stable time step: safety_factor * dx^2 / (2 alpha)."""
    return safety_factor * dx * dx / (2.0 * alpha)


def run_heat(T0, config: HeatConfig) -> SimulationHistory:
    """Functional entry point mirroring ``run_simulation``."""
    return HeatSolver(config).solve(T0)
