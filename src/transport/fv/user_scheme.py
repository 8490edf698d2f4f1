"""User-supplied face interpolation functions.

A user function has the scalar signature

    face_value(phi_w, phi_p, phi_e, phi_ee, u) -> float

and must be pure with a finite result. The solver calls it once per face per
step through ``UserFaceFunction``, which validates every return value and
converts any failure into a ``UserSchemeError`` carrying the face index.

``compile_face_function`` turns Python source into such a function. The
namespace it runs in only exposes ``math`` and a handful of numeric builtins;
this keeps casual mistakes out but is not a security sandbox.
"""

import logging
import math
import numbers
from typing import Callable, Optional, Union

import numpy as np

from ..errors import UserSchemeError

log = logging.getLogger(__name__)

ENTRY_POINT = "face_value"

SAFE_BUILTINS = {
    "abs": abs,
    "min": min,
    "max": max,
    "float": float,
    "int": int,
    "round": round,
    "len": len,
    "range": range,
    "bool": bool,
    "ValueError": ValueError,
    "ZeroDivisionError": ZeroDivisionError,
}

# (phi_w, phi_p, phi_e, phi_ee, u) stencils used by the smoke test
SMOKE_TESTS = (
    (0.0, 1.0, 2.0, 3.0, 1.0),
    (0.0, 1.0, 2.0, 3.0, -1.0),
    (1.0, 1.0, 1.0, 1.0, 1.0),
    (0.0, 1.0, 0.0, 1.0, 0.5),
)

DEFAULT_SOURCE = '''\
def face_value(phi_w, phi_p, phi_e, phi_ee, u):
    """Upwind differencing: take the value of the cell the flow comes from."""
    if u >= 0:
        return phi_p
    return phi_e
'''


def _check_result(value, face: Optional[int]) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise UserSchemeError(
            f"Face function must return a real number, got {type(value).__name__}", face=face
        )
    value = float(value)
    if not math.isfinite(value):
        raise UserSchemeError(f"Face function returned a non-finite value ({value})", face=face)
    return value


class UserFaceFunction:
    """Wrap a scalar face function so it can stand in for a built-in scheme."""

    def __init__(self, func: Callable, name: str = "user"):
        if not callable(func):
            raise UserSchemeError(f"Face function must be callable, got {type(func).__name__}")
        self.func = func
        self.name = name

    @property
    def value(self) -> str:
        return self.name

    def evaluate(self, phi_w: float, phi_p: float, phi_e: float, phi_ee: float, u: float,
                 face: Optional[int] = None) -> float:
        """Evaluate a single face, validating the result."""
        try:
            result = self.func(phi_w, phi_p, phi_e, phi_ee, u)
        except UserSchemeError:
            raise
        except Exception as e:
            raise UserSchemeError(
                f"Face function raised {type(e).__name__}: {e}", face=face
            ) from e
        return _check_result(result, face)

    def __call__(self, phi_w, phi_p, phi_e, phi_ee, u) -> np.ndarray:
        phi_w, phi_p, phi_e, phi_ee, u = np.broadcast_arrays(
            np.asarray(phi_w, dtype=np.float64),
            np.asarray(phi_p, dtype=np.float64),
            np.asarray(phi_e, dtype=np.float64),
            np.asarray(phi_ee, dtype=np.float64),
            np.asarray(u, dtype=np.float64),
        )
        out = np.empty(phi_p.shape, dtype=np.float64)
        for f in range(out.size):
            out.flat[f] = self.evaluate(
                float(phi_w.flat[f]),
                float(phi_p.flat[f]),
                float(phi_e.flat[f]),
                float(phi_ee.flat[f]),
                float(u.flat[f]),
                face=f,
            )
        return out

    def __repr__(self):
        return f"UserFaceFunction(name={self.name!r})"


def smoke_test(fn: UserFaceFunction) -> UserFaceFunction:
    """Evaluate ``fn`` on a few sample stencils; raise UserSchemeError on the first failure."""
    for stencil in SMOKE_TESTS:
        try:
            fn.evaluate(*stencil)
        except UserSchemeError as e:
            raise UserSchemeError(f"Validation failed for neighbours {stencil}: {e.message}") from e
    return fn


def compile_face_function(source: str, name: str = "user") -> UserFaceFunction:
    """Compile user source code into a validated face function.

    Parameters
    ----------
    source : str
        Python source defining ``face_value(phi_w, phi_p, phi_e, phi_ee, u)``
        (or exactly one function of any name).
    name : str
        Label used in logs and stencil descriptions.

    Returns
    -------
    UserFaceFunction

    Raises
    ------
    UserSchemeError
        On syntax errors, errors at definition time, a missing entry point,
        or a failed smoke test.
    """
    if not isinstance(source, str) or not source.strip():
        raise UserSchemeError("No source code given")

    try:
        code = compile(source, f"<{name}>", "exec")
    except SyntaxError as e:
        raise UserSchemeError(f"Syntax error on line {e.lineno}: {e.msg}") from e

    namespace = {"__builtins__": SAFE_BUILTINS, "math": math}
    try:
        exec(code, namespace)
    except Exception as e:
        raise UserSchemeError(f"Error while loading code: {type(e).__name__}: {e}") from e

    func = namespace.get(ENTRY_POINT)
    if not callable(func):
        candidates = [
            v for k, v in namespace.items() if not k.startswith("__") and hasattr(v, "__code__")
        ]
        if len(candidates) != 1:
            raise UserSchemeError(
                f"Define a function named '{ENTRY_POINT}(phi_w, phi_p, phi_e, phi_ee, u)'"
            )
        func = candidates[0]

    return smoke_test(UserFaceFunction(func, name=name))


class UserSchemeSlot:
    """Holds the currently active user face function.

    ``install`` only replaces the active function when the new one compiles and
    validates; otherwise the previous function stays active and the error is
    raised to the caller.
    """

    def __init__(self):
        self._default = compile_face_function(DEFAULT_SOURCE, name="user-default")
        self._active = self._default

    @property
    def active(self) -> UserFaceFunction:
        return self._active

    def install(self, candidate: Union[str, Callable, UserFaceFunction], name: str = "user") -> UserFaceFunction:
        if isinstance(candidate, UserFaceFunction):
            fn = smoke_test(candidate)
        elif isinstance(candidate, str):
            fn = compile_face_function(candidate, name=name)
        else:
            fn = smoke_test(UserFaceFunction(candidate, name=name))
        self._active = fn
        log.info(f"Installed user face function '{fn.name}'")
        return fn

    def reset(self) -> UserFaceFunction:
        self._active = self._default
        return self._active
