"""Exception types raised by the transport solvers.

A diverged run is not an exception: it is a terminal state reported on
the returned history.
"""

from typing import Optional


class TransportError(Exception):
    """Base class for all solver errors."""


class InvalidConfig(TransportError, ValueError):
    """Malformed grid, initial condition, boundary condition or run config."""


class UserSchemeError(TransportError):
    """A user-supplied face function failed to compile, raised, or returned a bad value.

    Parameters
    ----------
    message : str
        Human readable description of the failure.
    face : int, optional
        Index of the face being evaluated when the failure happened.
    step : int, optional
        Time step during which the failure happened (set by the solver).
    """

    def __init__(self, message: str, face: Optional[int] = None, step: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.face = face
        self.step = step

    def __str__(self) -> str:
        where = []
        if self.step is not None:
            where.append(f"step {self.step}")
        if self.face is not None:
            where.append(f"face {self.face}")
        if where:
            return f"{self.message} ({', '.join(where)})"
        return self.message
