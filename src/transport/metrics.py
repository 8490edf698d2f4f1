"""Diagnostics for 1D transport runs: error norms, conservation and stability numbers."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, asdict, field
from typing import List, Optional

import numpy as np
import pandas as pd


# -----------------------------------------------------------------------------
# Norms / errors
# -----------------------------------------------------------------------------


def l2_norm(a: np.ndarray, b: np.ndarray) -> float:
    """Root-mean-square difference sqrt(mean((a - b)^2))."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.mean(diff**2)))


def linf_norm(a: np.ndarray, b: np.ndarray) -> float:
    """Maximum absolute difference."""
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.max(np.abs(diff)))


def total_mass(phi: np.ndarray, dx: float) -> float:
    """Discrete integral dx * sum(phi)."""
    return float(dx * np.sum(phi))


def field_is_valid(phi: np.ndarray) -> bool:
    """True when every value is finite."""
    return bool(np.all(np.isfinite(phi)))


def field_max(phi: np.ndarray) -> float:
    """Largest absolute value."""
    return float(np.max(np.abs(phi)))


def field_extrema(phi: np.ndarray) -> tuple:
    return float(np.min(phi)), float(np.max(phi))


# -----------------------------------------------------------------------------
# Stability numbers
# -----------------------------------------------------------------------------


def cfl_number(u: float, dt: float, dx: float) -> float:
    """Convective stability ratio |u| dt / dx."""
    return abs(u) * dt / dx


def peclet_number(u: float, dx: float, gamma: float) -> float:
    """Cell Peclet number |u| dx / Gamma (infinite without diffusion)."""
    if gamma <= 0:
        return math.inf
    return abs(u) * dx / gamma


def fourier_number(alpha: float, dt: float, dx: float) -> float:
    """Diffusive stability ratio alpha dt / dx^2."""
    return alpha * dt / dx**2


def compute_max_dt(dx: float, u: float, cfl: float, gamma: float = 0.0) -> float:
    """Largest time step allowed by the CFL target and, with diffusion, the Fourier limit.

    dt = min(cfl * dx / |u|, 0.4 * dx^2 / (2 * gamma))
    """
    dt = cfl * dx / max(abs(u), 1e-30)
    if gamma > 0:
        dt = min(dt, 0.4 * dx * dx / (2.0 * gamma))
    return dt


# -----------------------------------------------------------------------------
# Run-level diagnostics
# -----------------------------------------------------------------------------


@dataclass
class DiagnosticSeries:
    """Per-snapshot diagnostics of a run (one value per snapshot)."""

    times: List[float] = field(default_factory=list)
    steps: List[int] = field(default_factory=list)
    l2_errors: List[float] = field(default_factory=list)
    linf_errors: List[float] = field(default_factory=list)
    masses: List[float] = field(default_factory=list)
    max_values: List[float] = field(default_factory=list)
    min_values: List[float] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame with one row per snapshot."""
        return pd.DataFrame(asdict(self))

    def to_mlflow_batch(self) -> list:
        """MLflow ``Metric`` entities for ``MlflowClient.log_batch``."""
        from mlflow.entities import Metric

        timestamp = int(time.time() * 1000)
        batch = []
        for i, step in enumerate(self.steps):
            for key in ("l2_errors", "linf_errors", "masses", "max_values", "min_values"):
                value = getattr(self, key)[i]
                if math.isfinite(value):
                    batch.append(Metric(key=key, value=float(value), timestamp=timestamp, step=int(step)))
        return batch


def history_diagnostics(history, dx: float, reference: Optional[np.ndarray] = None) -> DiagnosticSeries:
    """Norms, masses and extrema for every snapshot.

    Errors are measured against ``reference`` or, by default, the initial snapshot.
    """
    if reference is None:
        reference = history.initial.phi

    series = DiagnosticSeries()
    for snap in history.snapshots:
        lo, hi = field_extrema(snap.phi)
        series.times.append(snap.time)
        series.steps.append(snap.step)
        series.l2_errors.append(l2_norm(snap.phi, reference))
        series.linf_errors.append(linf_norm(snap.phi, reference))
        series.masses.append(total_mass(snap.phi, dx))
        series.max_values.append(hi)
        series.min_values.append(lo)
    return series


def is_bounded(history, eps: float = 1e-8) -> bool:
    """True when no snapshot leaves [min(phi_0) - eps, max(phi_0) + eps]."""
    lo, hi = field_extrema(history.initial.phi)
    for snap in history.snapshots:
        if not field_is_valid(snap.phi):
            return False
        if np.min(snap.phi) < lo - eps or np.max(snap.phi) > hi + eps:
            return False
    return True


def mass_drift(history, dx: float) -> float:
    """Relative change of the total mass between the first and the last snapshot."""
    m0 = total_mass(history.initial.phi, dx)
    m1 = total_mass(history.final.phi, dx)
    return abs(m1 - m0) / max(abs(m0), 1e-12)
