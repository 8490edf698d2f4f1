"""Finite difference method: stencil table and the explicit heat equation solver."""

from .stencils import FDStencil, FD_STENCILS, apply_stencil, get_stencil
from .solver import HeatSolver, heat_max_dt, init_heat_gaussian, init_heat_step, run_heat

__all__ = [
    "FDStencil",
    "FD_STENCILS",
    "apply_stencil",
    "get_stencil",
    "HeatSolver",
    "heat_max_dt",
    "init_heat_gaussian",
    "init_heat_step",
    "run_heat",
]
