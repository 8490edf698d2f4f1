"""
Grid1D: uniform cell-centred finite volume mesh in one dimension.

Indexing Conventions (N cells):

    face:  |---f0---|---f1---|--- ... ---|---fN---|
    cell:     P0       P1        ...        P(N-1)

- x_face has length N+1, x_cell has length N.
- Face i sits between cell i-1 (owner, "P") and cell i (neighbour, "E").
- The grid is immutable; a new one is built whenever N or L changes.
"""

import math
from dataclasses import dataclass, field

import numpy as np

from ..errors import InvalidConfig


@dataclass(frozen=True, eq=False)
class Grid1D:
    """Uniform 1D cell-centred grid on [0, L]."""

    nx: int
    L: float
    dx: float = field(init=False)
    x_cell: np.ndarray = field(init=False, repr=False)
    x_face: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        nx, L = self.nx, self.L
        if isinstance(nx, bool) or not isinstance(nx, (int, np.integer)):
            raise InvalidConfig(f"Cell count must be an integer, got {nx!r}")
        if nx < 1:
            raise InvalidConfig(f"Cell count must be >= 1, got {nx}")
        try:
            L = float(L)
        except (TypeError, ValueError) as e:
            raise InvalidConfig(f"Domain length must be a number, got {L!r}") from e
        if not math.isfinite(L) or L <= 0.0:
            raise InvalidConfig(f"Domain length must be > 0, got {L}")

        nx = int(nx)
        dx = L / nx
        x_cell = (np.arange(nx, dtype=np.float64) + 0.5) * dx
        x_face = np.arange(nx + 1, dtype=np.float64) * dx
        x_cell.setflags(write=False)
        x_face.setflags(write=False)

        # frozen dataclass: normalized and derived attributes go through object.__setattr__
        object.__setattr__(self, "nx", nx)
        object.__setattr__(self, "L", L)
        object.__setattr__(self, "dx", dx)
        object.__setattr__(self, "x_cell", x_cell)
        object.__setattr__(self, "x_face", x_face)

    @property
    def n_faces(self) -> int:
        return self.nx + 1


def create_grid(nx: int, L: float) -> Grid1D:
    """Create a uniform 1D cell-centred grid.

    Parameters
    ----------
    nx : int
        Number of cells, at least 1.
    L : float
        Domain length, strictly positive.

    Returns
    -------
    Grid1D
        Grid with ``dx = L / nx`` and cell centres ``(i + 0.5) * dx``.

    Raises
    ------
    InvalidConfig
        If ``nx`` is not an integer >= 1 or ``L`` is not a finite positive number.
    """
    return Grid1D(nx=nx, L=L)
