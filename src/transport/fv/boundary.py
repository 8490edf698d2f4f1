"""Boundary conditions for 1D cell-centred fields.

Two mechanisms cooperate:

- ``extend_with_ghosts`` pads the field with ghost cells before the face
  values are computed, so stencils never index outside the array.
- ``apply_boundary_conditions`` patches the boundary cells after the update.

Periodicity is handled entirely by the ghost cells (wrap-around), which makes
the first and last face carry the same flux and keeps the total mass fixed.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Union

import numpy as np

from ..errors import InvalidConfig


class BCType(Enum):
    PERIODIC = "periodic"
    FIXED = "fixed"
    ZERO_GRADIENT = "zeroGradient"

    @classmethod
    def _missing_(cls, value):
        aliases = {"zero-gradient": cls.ZERO_GRADIENT, "zero_gradient": cls.ZERO_GRADIENT}
        if isinstance(value, str):
            return aliases.get(value) or aliases.get(value.lower())
        return None


@dataclass(frozen=True)
class BoundaryCondition:
    """Condition on one side of the domain. ``value`` is only used by FIXED."""

    type: BCType = BCType.PERIODIC
    value: Optional[float] = None

    def __post_init__(self):
        try:
            bc_type = BCType(self.type)
        except ValueError:
            raise InvalidConfig(
                f"Unknown boundary condition '{self.type}'. "
                f"Available: {', '.join(t.value for t in BCType)}"
            ) from None
        object.__setattr__(self, "type", bc_type)

        if bc_type is BCType.FIXED:
            if self.value is None:
                raise InvalidConfig("A fixed boundary condition needs a value")
            try:
                value = float(self.value)
            except (TypeError, ValueError) as e:
                raise InvalidConfig(f"Fixed boundary value must be a number, got {self.value!r}") from e
            if not math.isfinite(value):
                raise InvalidConfig(f"Fixed boundary value must be finite, got {value}")
            object.__setattr__(self, "value", value)

    @classmethod
    def coerce(cls, bc: Union["BoundaryCondition", Mapping, str]) -> "BoundaryCondition":
        if isinstance(bc, cls):
            return bc
        if isinstance(bc, str):
            return cls(type=bc)
        if isinstance(bc, Mapping):
            return cls(type=bc.get("type", BCType.PERIODIC), value=bc.get("value"))
        raise InvalidConfig(f"Cannot build a boundary condition from {type(bc).__name__}")


@dataclass(frozen=True)
class BoundarySpec:
    """Left and right boundary conditions."""

    left: BoundaryCondition = field(default_factory=BoundaryCondition)
    right: BoundaryCondition = field(default_factory=BoundaryCondition)

    def __post_init__(self):
        left = BoundaryCondition.coerce(self.left)
        right = BoundaryCondition.coerce(self.right)
        if (left.type is BCType.PERIODIC) != (right.type is BCType.PERIODIC):
            raise InvalidConfig("Periodic boundary conditions must be set on both sides")
        object.__setattr__(self, "left", left)
        object.__setattr__(self, "right", right)

    @property
    def periodic(self) -> bool:
        return self.left.type is BCType.PERIODIC

    @classmethod
    def coerce(cls, bc) -> "BoundarySpec":
        if isinstance(bc, cls):
            return bc
        if bc is None:
            return cls()
        if isinstance(bc, str):
            return cls(left=bc, right=bc)
        if isinstance(bc, Mapping):
            return cls(left=bc.get("left", "periodic"), right=bc.get("right", "periodic"))
        raise InvalidConfig(f"Cannot build boundary conditions from {type(bc).__name__}")

    def to_mlflow(self) -> dict:
        return {
            "bc_left": self.left.type.value,
            "bc_left_value": self.left.value,
            "bc_right": self.right.type.value,
            "bc_right_value": self.right.value,
        }


def extend_with_ghosts(phi: np.ndarray, bc: BoundarySpec, n_ghost: int = 2) -> np.ndarray:
    """Return a copy of ``phi`` padded with ``n_ghost`` ghost cells on each side.

    Parameters
    ----------
    phi : np.ndarray
        Cell values, length N.
    bc : BoundarySpec
        Boundary conditions.
    n_ghost : int
        Ghost layers per side (2 for the TVD stencils).

    Returns
    -------
    np.ndarray
        Array of length N + 2 * n_ghost; ``ext[n_ghost + i] == phi[i]``.
    """
    n = phi.shape[0]
    idx = np.arange(-n_ghost, n + n_ghost)
    if bc.periodic:
        return np.take(phi, idx, mode="wrap")

    ext = np.take(phi, idx, mode="clip")
    if bc.left.type is BCType.FIXED:
        ext[:n_ghost] = bc.left.value
    if bc.right.type is BCType.FIXED:
        ext[n + n_ghost:] = bc.right.value
    return ext


def apply_boundary_conditions(phi: np.ndarray, bc: BoundarySpec) -> np.ndarray:
    """Patch the boundary cells of ``phi`` in place and return it."""
    n = phi.shape[0]
    if bc.periodic:
        return phi

    if bc.left.type is BCType.FIXED:
        phi[0] = bc.left.value
    elif bc.left.type is BCType.ZERO_GRADIENT and n > 1:
        phi[0] = phi[1]

    if bc.right.type is BCType.FIXED:
        phi[n - 1] = bc.right.value
    elif bc.right.type is BCType.ZERO_GRADIENT and n > 1:
        phi[n - 1] = phi[n - 2]
    return phi
