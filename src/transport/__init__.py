"""1D scalar transport solvers for teaching computational fluid dynamics.

Solver Hierarchy:
-----------------
TransportSolver (abstract base - time loop, snapshots, divergence, metrics)
├── FVSolver (finite volume convection-diffusion, UDS/CDS/TVD face schemes)
└── HeatSolver (finite difference heat equation)

Data flow: grid -> initial field -> [face values -> fluxes -> update] ->
snapshot history -> diagnostics.
"""

from .base import TransportSolver
from .datastructures import (
    HeatConfig,
    RunConfig,
    RunFailure,
    RunMetrics,
    RunState,
    SimulationConfig,
    SimulationHistory,
    Snapshot,
    StencilResult,
)
from .errors import InvalidConfig, TransportError, UserSchemeError
from .export import export_json, history_to_dict, load_json
from .fdm import HeatSolver, run_heat
from .fields import InitialCondition, init_field
from .fv.assembly import convection_stencil
from .fv.boundary import BCType, BoundaryCondition, BoundarySpec
from .fv.schemes import Scheme, face_value, face_values
from .fv.solver import FVSolver, run_simulation
from .fv.user_scheme import UserFaceFunction, UserSchemeSlot, compile_face_function
from .meshing import Grid1D, create_grid
from .metrics import (
    DiagnosticSeries,
    cfl_number,
    compute_max_dt,
    fourier_number,
    history_diagnostics,
    is_bounded,
    l2_norm,
    linf_norm,
    peclet_number,
    total_mass,
)
from .presets import PRESETS, Preset, get_preset

__all__ = [
    # Solvers
    "TransportSolver",
    "FVSolver",
    "HeatSolver",
    "run_simulation",
    "run_heat",
    # Configuration
    "RunConfig",
    "SimulationConfig",
    "HeatConfig",
    "Grid1D",
    "create_grid",
    "InitialCondition",
    "init_field",
    "BCType",
    "BoundaryCondition",
    "BoundarySpec",
    "Scheme",
    "face_value",
    "face_values",
    # Results
    "RunState",
    "RunFailure",
    "RunMetrics",
    "Snapshot",
    "SimulationHistory",
    "StencilResult",
    "convection_stencil",
    # Diagnostics
    "DiagnosticSeries",
    "history_diagnostics",
    "is_bounded",
    "l2_norm",
    "linf_norm",
    "total_mass",
    "cfl_number",
    "peclet_number",
    "fourier_number",
    "compute_max_dt",
    # Extension point
    "UserFaceFunction",
    "UserSchemeSlot",
    "compile_face_function",
    # Export / presets
    "export_json",
    "history_to_dict",
    "load_json",
    "Preset",
    "PRESETS",
    "get_preset",
    # Errors
    "TransportError",
    "InvalidConfig",
    "UserSchemeError",
]
