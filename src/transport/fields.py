"""Initial conditions for 1D scalar fields.

Each profile is a pure function of the cell-centre coordinates and the
domain length. Positions and widths are given as fractions of L so the same
parameters work on any domain.
"""

import math
from dataclasses import dataclass, asdict, fields as dataclass_fields
from typing import Callable, Dict, Mapping, Union

import numpy as np
import pandas as pd

from .errors import InvalidConfig


@dataclass(frozen=True)
class InitialCondition:
    """Analytic initial profile sampled on the grid."""

    type: str = "step"
    step_pos: float = 0.2  # left edge of the step (fraction of L)
    step_width: float = 0.2  # width of the step (fraction of L)
    gauss_center: float = 0.5
    gauss_sigma: float = 0.05

    def to_dataframe(self):
        return pd.DataFrame([asdict(self)])


def _step(x: np.ndarray, L: float, ic: InitialCondition) -> np.ndarray:
    left = ic.step_pos * L
    right = (ic.step_pos + ic.step_width) * L
    return np.where((x >= left) & (x <= right), 1.0, 0.0)


def _gaussian(x: np.ndarray, L: float, ic: InitialCondition) -> np.ndarray:
    center = ic.gauss_center * L
    sigma = ic.gauss_sigma * L
    return np.exp(-((x - center) ** 2) / (2.0 * sigma**2))


def _sine(x: np.ndarray, L: float, ic: InitialCondition) -> np.ndarray:
    return np.sin(2.0 * np.pi * x / L)


def _triangle(x: np.ndarray, L: float, ic: InitialCondition) -> np.ndarray:
    mid = 0.5 * L
    half_width = 0.2 * L
    return np.where(np.abs(x - mid) < half_width, 1.0 - np.abs(x - mid) / half_width, 0.0)


PROFILES: Dict[str, Callable[[np.ndarray, float, InitialCondition], np.ndarray]] = {
    "step": _step,
    "gaussian": _gaussian,
    "sine": _sine,
    "triangle": _triangle,
}


def as_initial_condition(ic: Union[InitialCondition, Mapping, str]) -> InitialCondition:
    """Coerce a profile tag, a mapping or an InitialCondition into an InitialCondition."""
    if isinstance(ic, InitialCondition):
        result = ic
    elif isinstance(ic, str):
        result = InitialCondition(type=ic)
    elif isinstance(ic, Mapping):
        known = {f.name for f in dataclass_fields(InitialCondition)}
        unknown = set(ic) - known
        if unknown:
            raise InvalidConfig(f"Unknown initial condition parameters: {sorted(unknown)}")
        result = InitialCondition(**{k: v for k, v in ic.items() if v is not None})
    else:
        raise InvalidConfig(f"Cannot build an initial condition from {type(ic).__name__}")

    if result.type not in PROFILES:
        raise InvalidConfig(
            f"Unknown initial profile '{result.type}'. Available: {', '.join(PROFILES)}"
        )
    if result.type == "gaussian" and result.gauss_sigma <= 0:
        raise InvalidConfig(f"gauss_sigma must be > 0, got {result.gauss_sigma}")
    if result.type == "step" and result.step_width < 0:
        raise InvalidConfig(f"step_width must be >= 0, got {result.step_width}")
    return result


def init_field(x_cell, L: float, ic) -> np.ndarray:
    """Sample an analytic initial profile on the cell centres.

    Parameters
    ----------
    x_cell : array_like
        Cell-centre coordinates.
    L : float
        Domain length.
    ic : InitialCondition, Mapping or str
        Profile selection and parameters.

    Returns
    -------
    np.ndarray
        Fresh float64 array of length ``len(x_cell)``.
    """
    ic = as_initial_condition(ic)
    try:
        L = float(L)
    except (TypeError, ValueError) as e:
        raise InvalidConfig(f"Domain length must be a number, got {L!r}") from e
    if not math.isfinite(L) or L <= 0.0:
        raise InvalidConfig(f"Domain length must be > 0, got {L}")
    x = np.asarray(x_cell, dtype=np.float64)
    return np.array(PROFILES[ic.type](x, L, ic), dtype=np.float64)
