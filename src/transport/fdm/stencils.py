"""Finite difference stencils on a uniform 1D grid.

A stencil approximates a derivative at node i by a weighted sum of the
neighbours i + offset, divided by h**deriv_order.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from ..errors import InvalidConfig


@dataclass(frozen=True)
class FDStencil:
    name: str
    kind: str  # forward, backward or central
    offsets: Tuple[int, ...]
    weights: Tuple[float, ...]
    order: int  # truncation error order
    deriv_order: int
    formula: str  # LaTeX
    taylor_error: str  # LaTeX

    @property
    def radius(self) -> int:
        return max(abs(o) for o in self.offsets)


FD_STENCILS: Dict[str, FDStencil] = {
    "forward-1": FDStencil(
        name="forward-1",
        kind="forward",
        offsets=(0, 1),
        weights=(-1.0, 1.0),
        order=1,
        deriv_order=1,
        formula=r"\frac{df}{dx}\bigg|_i \approx \frac{f_{i+1} - f_i}{\Delta x}",
        taylor_error=r"\mathcal{O}(\Delta x)",
    ),
    "backward-1": FDStencil(
        name="backward-1",
        kind="backward",
        offsets=(-1, 0),
        weights=(-1.0, 1.0),
        order=1,
        deriv_order=1,
        formula=r"\frac{df}{dx}\bigg|_i \approx \frac{f_i - f_{i-1}}{\Delta x}",
        taylor_error=r"\mathcal{O}(\Delta x)",
    ),
    "central-1": FDStencil(
        name="central-1",
        kind="central",
        offsets=(-1, 0, 1),
        weights=(-0.5, 0.0, 0.5),
        order=2,
        deriv_order=1,
        formula=r"\frac{df}{dx}\bigg|_i \approx \frac{f_{i+1} - f_{i-1}}{2\Delta x}",
        taylor_error=r"\mathcal{O}(\Delta x^2)",
    ),
    "central-2": FDStencil(
        name="central-2",
        kind="central",
        offsets=(-1, 0, 1),
        weights=(1.0, -2.0, 1.0),
        order=2,
        deriv_order=2,
        formula=r"\frac{d^2f}{dx^2}\bigg|_i \approx \frac{f_{i+1} - 2f_i + f_{i-1}}{\Delta x^2}",
        taylor_error=r"\mathcal{O}(\Delta x^2)",
    ),
}


def get_stencil(name: str) -> FDStencil:
    try:
        return FD_STENCILS[name]
    except KeyError:
        raise InvalidConfig(
            f"Unknown stencil '{name}'. Available: {', '.join(FD_STENCILS)}"
        ) from None


def apply_stencil(values: np.ndarray, stencil, h: float) -> np.ndarray:
    """Evaluate a stencil at every node where it fits.

    Returns an array of length ``len(values) - (max_offset - min_offset)``,
    aligned so entry k belongs to node ``k - min(offsets)``.
    """
    if isinstance(stencil, str):
        stencil = get_stencil(stencil)
    values = np.asarray(values, dtype=np.float64)
    lo, hi = min(stencil.offsets), max(stencil.offsets)
    n_out = values.shape[0] - (hi - lo)
    if n_out <= 0:
        raise InvalidConfig(f"Need more than {hi - lo} points for stencil '{stencil.name}'")

    result = np.zeros(n_out)
    for offset, weight in zip(stencil.offsets, stencil.weights):
        start = offset - lo
        result += weight * values[start:start + n_out]
    return result / h**stencil.deriv_order
