"""Data structures for solver configuration and results.

This module defines the configuration and result data structures
for the 1D transport solvers (finite volume and finite difference).

Structure:
- RunConfig / SimulationConfig / HeatConfig: Input configuration (immutable)
- Snapshot / SimulationHistory: Time series of field states produced by a run
- RunMetrics: Output summary (logged to MLflow at the end of a run)
- StencilResult: Explicit update coefficients for a representative cell
"""

import math
import numbers
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from .errors import InvalidConfig
from .fv.boundary import BoundarySpec
from .fv.schemes import Scheme
from .fv.user_scheme import UserFaceFunction
from .meshing.grid import Grid1D


def _finite_float(name: str, value, minimum: Optional[float] = None, strict: bool = False) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidConfig(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidConfig(f"{name} must be finite, got {value}")
    if minimum is not None:
        if strict and value <= minimum:
            raise InvalidConfig(f"{name} must be > {minimum}, got {value}")
        if not strict and value < minimum:
            raise InvalidConfig(f"{name} must be >= {minimum}, got {value}")
    return value


def _integer(name: str, value, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfig(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidConfig(f"{name} must be >= {minimum}, got {value}")
    return int(value)


# ========================================================
# Run state
# ========================================================


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    DIVERGED = "diverged"


# ========================================================
# Configuration (Input)
# ========================================================


@dataclass(frozen=True)
class RunConfig:
    """Settings shared by every explicit time-marching run."""

    grid: Grid1D
    dt: float
    n_steps: int = 100
    snapshot_interval: int = 10
    # |phi| above divergence_limit * max(1, max|phi0|) counts as diverged
    divergence_limit: float = 1e8

    method = ""

    def __post_init__(self):
        if not isinstance(self.grid, Grid1D):
            raise InvalidConfig(f"grid must be a Grid1D, got {type(self.grid).__name__}")
        object.__setattr__(self, "dt", _finite_float("dt", self.dt, 0.0, strict=True))
        object.__setattr__(self, "n_steps", _integer("n_steps", self.n_steps, 0))
        object.__setattr__(
            self, "snapshot_interval", _integer("snapshot_interval", self.snapshot_interval, 1)
        )
        limit = self.divergence_limit
        if isinstance(limit, bool) or not isinstance(limit, numbers.Real) or math.isnan(limit) or limit <= 0:
            raise InvalidConfig(f"divergence_limit must be > 0, got {limit!r}")
        object.__setattr__(self, "divergence_limit", float(limit))

    def to_mlflow(self) -> dict:
        return {
            "method": self.method,
            "nx": self.grid.nx,
            "L": self.grid.L,
            "dx": self.grid.dx,
            "dt": self.dt,
            "n_steps": self.n_steps,
            "snapshot_interval": self.snapshot_interval,
            "divergence_limit": self.divergence_limit,
        }

    def to_dataframe(self):
        return pd.DataFrame([self.to_mlflow()])


@dataclass(frozen=True)
class SimulationConfig(RunConfig):
    """Finite volume convection-diffusion run (explicit Euler)."""

    u: float = 1.0
    gamma: float = 0.0
    scheme: Union[Scheme, UserFaceFunction] = Scheme.UDS
    bc: BoundarySpec = field(default_factory=BoundarySpec)

    method = "FV-explicit"

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "u", _finite_float("u", self.u))
        object.__setattr__(self, "gamma", _finite_float("gamma", self.gamma, 0.0))
        object.__setattr__(self, "scheme", self._coerce_scheme(self.scheme))
        object.__setattr__(self, "bc", BoundarySpec.coerce(self.bc))

    @staticmethod
    def _coerce_scheme(scheme) -> Union[Scheme, UserFaceFunction]:
        if isinstance(scheme, (Scheme, UserFaceFunction)):
            return scheme
        if isinstance(scheme, str):
            return Scheme.parse(scheme)
        if callable(scheme):
            return UserFaceFunction(scheme, name=getattr(scheme, "__name__", "user"))
        raise InvalidConfig(f"Cannot use {type(scheme).__name__} as a scheme")

    @property
    def scheme_name(self) -> str:
        return self.scheme.value

    def to_mlflow(self) -> dict:
        params = super().to_mlflow()
        params.update(
            {
                "u": self.u,
                "gamma": self.gamma,
                "scheme": self.scheme_name,
                **self.bc.to_mlflow(),
            }
        )
        return params


@dataclass(frozen=True)
class HeatConfig(RunConfig):
    """Finite difference heat equation run: dT/dt = alpha d2T/dx2 with fixed ends."""

    alpha: float = 0.01
    T_left: float = 0.0
    T_right: float = 0.0

    method = "FDM-heat"

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "alpha", _finite_float("alpha", self.alpha, 0.0))
        object.__setattr__(self, "T_left", _finite_float("T_left", self.T_left))
        object.__setattr__(self, "T_right", _finite_float("T_right", self.T_right))

    def to_mlflow(self) -> dict:
        params = super().to_mlflow()
        params.update({"alpha": self.alpha, "T_left": self.T_left, "T_right": self.T_right})
        return params


# ========================================================
# Snapshots and history (Output)
# ========================================================


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Independent, read-only copy of the field at one recorded instant."""

    time: float
    step: int
    phi: np.ndarray

    @classmethod
    def capture(cls, phi: np.ndarray, step: int, time: float) -> "Snapshot":
        data = np.array(phi, dtype=np.float64, copy=True)
        data.setflags(write=False)
        return cls(time=float(time), step=int(step), phi=data)


@dataclass(frozen=True)
class RunFailure:
    """Where and why a run was aborted by a failing user face function."""

    step: int
    face: Optional[int]
    message: str


@dataclass
class SimulationHistory:
    """Ordered snapshots of one run plus its terminal state."""

    snapshots: List[Snapshot] = field(default_factory=list)
    diverged: bool = False
    state: RunState = RunState.COMPLETED
    final_step: int = 0
    failure: Optional[RunFailure] = None

    def __len__(self):
        return len(self.snapshots)

    @property
    def initial(self) -> Snapshot:
        return self.snapshots[0]

    @property
    def final(self) -> Snapshot:
        return self.snapshots[-1]

    @property
    def times(self) -> List[float]:
        return [s.time for s in self.snapshots]

    @property
    def steps(self) -> List[int]:
        return [s.step for s in self.snapshots]

    def to_dataframe(self, x: Optional[np.ndarray] = None) -> pd.DataFrame:
        """Long format: one row per (snapshot, cell)."""
        frames = []
        for snap in self.snapshots:
            n = snap.phi.shape[0]
            frames.append(
                pd.DataFrame(
                    {
                        "step": np.full(n, snap.step),
                        "time": np.full(n, snap.time),
                        "cell": np.arange(n),
                        "x": x if x is not None else np.full(n, np.nan),
                        "phi": snap.phi,
                    }
                )
            )
        if not frames:
            return pd.DataFrame(columns=["step", "time", "cell", "x", "phi"])
        return pd.concat(frames, ignore_index=True)


# ========================================================
# Stencil
# ========================================================


@dataclass(frozen=True)
class StencilResult:
    """Explicit update phi_P^{n+1} = aW phi_W + aP phi_P + aE phi_E."""

    aW: float
    aP: float
    aE: float
    description: str = ""

    @property
    def total(self) -> float:
        return self.aW + self.aP + self.aE


# ========================================================
# Metrics (Output Results)
# ========================================================


@dataclass
class RunMetrics:
    """Run summary - computed by the solver after the time loop."""

    steps_completed: int = 0
    final_time: float = 0.0
    state: str = RunState.IDLE.value
    diverged: bool = False
    wall_time_seconds: float = 0.0
    initial_mass: float = 0.0
    final_mass: float = 0.0
    mass_drift: float = 0.0  # |M_final - M_0| / max(|M_0|, tiny)
    phi_min: float = 0.0
    phi_max: float = 0.0
    cfl: float = 0.0
    peclet: float = float("inf")
    fourier: float = 0.0

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])

    def to_mlflow(self) -> dict:
        """Numeric, finite entries only (MLflow rejects strings as metrics)."""
        metrics = {}
        for key, value in asdict(self).items():
            if isinstance(value, bool):
                metrics[key] = float(value)
            elif isinstance(value, numbers.Real) and math.isfinite(value):
                metrics[key] = float(value)
        return metrics
