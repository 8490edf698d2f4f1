"""Face interpolation schemes for the convective flux.

Nomenclature for the face between cells P (left) and E (right):

    |  W  |  P  |f|  E  |  EE  |

All built-in schemes are vectorized: every argument is an array with one
entry per face (or a scalar), and the result is the array of face values
phi_f. Schemes are dispatched through the ``FACE_INTERPOLATORS`` table,
so a new scheme is a new table entry.

TVD schemes use the slope-limiter form

    phi_f = phi_U + 0.5 * psi(r) * (phi_D - phi_U),
    r     = (phi_U - phi_UU) / (phi_D - phi_U),

where U, D and UU are the upwind, downwind and far-upwind cells relative to
the flow direction. When |phi_D - phi_U| <= RATIO_EPS the ratio is set to
r = 0, i.e. the face falls back to first-order upwind.
"""

from enum import Enum
from functools import partial
from typing import Callable, Dict

import numpy as np

from ..errors import InvalidConfig

RATIO_EPS = 1e-12


class Scheme(Enum):
    UDS = "UDS"
    CDS = "CDS"
    TVD_MINMOD = "TVD-minmod"
    TVD_VANLEER = "TVD-vanLeer"
    TVD_SUPERBEE = "TVD-superbee"

    @classmethod
    def parse(cls, tag) -> "Scheme":
        """Return the scheme for a tag, raising InvalidConfig for unknown tags."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            raise InvalidConfig(
                f"Unknown scheme '{tag}'. Available: {', '.join(s.value for s in cls)}"
            ) from None

    @property
    def is_tvd(self) -> bool:
        return self in LIMITERS

    @property
    def is_linear(self) -> bool:
        return not self.is_tvd


# -----------------------------------------------------------------------------
# Flux limiters psi(r)
# -----------------------------------------------------------------------------


def minmod(r):
    """psi(r) = max(0, min(1, r))"""
    return np.maximum(0.0, np.minimum(1.0, r))


def van_leer(r):
    """psi(r) = (r + |r|) / (1 + |r|), zero for r <= 0"""
    r = np.asarray(r, dtype=np.float64)
    abs_r = np.abs(r)
    return np.where(r > 0.0, (r + abs_r) / (1.0 + abs_r), 0.0)


def superbee(r):
    """psi(r) = max(0, min(2r, 1), min(r, 2))"""
    return np.maximum(0.0, np.maximum(np.minimum(2.0 * r, 1.0), np.minimum(r, 2.0)))


LIMITERS: Dict[Scheme, Callable] = {
    Scheme.TVD_MINMOD: minmod,
    Scheme.TVD_VANLEER: van_leer,
    Scheme.TVD_SUPERBEE: superbee,
}


# -----------------------------------------------------------------------------
# Face values
# -----------------------------------------------------------------------------


def upwind_triplet(phi_w, phi_p, phi_e, phi_ee, u):
    """Return (phi_UU, phi_U, phi_D) for each face given the flow direction."""
    forward = np.asarray(u) >= 0.0
    phi_uu = np.where(forward, phi_w, phi_ee)
    phi_u = np.where(forward, phi_p, phi_e)
    phi_d = np.where(forward, phi_e, phi_p)
    return phi_uu, phi_u, phi_d


def gradient_ratio(phi_uu, phi_u, phi_d, eps: float = RATIO_EPS):
    """Smoothness ratio r = (phi_U - phi_UU) / (phi_D - phi_U), with r = 0 on flat denominators."""
    num = np.asarray(phi_u - phi_uu, dtype=np.float64)
    denom = np.asarray(phi_d - phi_u, dtype=np.float64)
    num, denom = np.broadcast_arrays(num, denom)
    r = np.zeros(denom.shape, dtype=np.float64)
    mask = np.abs(denom) > eps
    np.divide(num, denom, out=r, where=mask)
    return r


def _uds(phi_w, phi_p, phi_e, phi_ee, u):
    return np.where(np.asarray(u) >= 0.0, phi_p, phi_e).astype(np.float64)


def _cds(phi_w, phi_p, phi_e, phi_ee, u):
    return 0.5 * (np.asarray(phi_p, dtype=np.float64) + np.asarray(phi_e, dtype=np.float64))


def _tvd(phi_w, phi_p, phi_e, phi_ee, u, limiter):
    phi_uu, phi_u, phi_d = upwind_triplet(phi_w, phi_p, phi_e, phi_ee, u)
    psi = limiter(gradient_ratio(phi_uu, phi_u, phi_d))
    return phi_u + 0.5 * psi * (phi_d - phi_u)


FACE_INTERPOLATORS: Dict[Scheme, Callable] = {
    Scheme.UDS: _uds,
    Scheme.CDS: _cds,
    Scheme.TVD_MINMOD: partial(_tvd, limiter=minmod),
    Scheme.TVD_VANLEER: partial(_tvd, limiter=van_leer),
    Scheme.TVD_SUPERBEE: partial(_tvd, limiter=superbee),
}


def face_values(scheme, phi_w, phi_p, phi_e, phi_ee, u) -> np.ndarray:
    """Interpolate the face values for every face with a built-in scheme.

    Parameters
    ----------
    scheme : Scheme or str
        Scheme selection.
    phi_w, phi_p, phi_e, phi_ee : np.ndarray
        Neighbour values around each face (see module docstring).
    u : float or np.ndarray
        Face velocity; only its sign matters for the interpolation.

    Returns
    -------
    np.ndarray
        Face values phi_f.
    """
    scheme = Scheme.parse(scheme)
    return FACE_INTERPOLATORS[scheme](phi_w, phi_p, phi_e, phi_ee, u)


def face_value(scheme, phi_w: float, phi_p: float, phi_e: float, phi_ee: float, u: float) -> float:
    """Scalar face value for a single face."""
    values = face_values(
        scheme,
        np.atleast_1d(float(phi_w)),
        np.atleast_1d(float(phi_p)),
        np.atleast_1d(float(phi_e)),
        np.atleast_1d(float(phi_ee)),
        u,
    )
    return float(values[0])


def limiter_values(scheme, phi_w, phi_p, phi_e, phi_ee, u) -> np.ndarray:
    """Limiter value psi per face.

    Linear schemes report their equivalent constant: UDS is psi = 0 and CDS is psi = 1.
    """
    scheme = Scheme.parse(scheme)
    shape = np.broadcast(phi_w, phi_p, phi_e, phi_ee, u).shape
    if scheme is Scheme.UDS:
        return np.zeros(shape)
    if scheme is Scheme.CDS:
        return np.ones(shape)
    phi_uu, phi_u, phi_d = upwind_triplet(phi_w, phi_p, phi_e, phi_ee, u)
    return np.broadcast_to(LIMITERS[scheme](gradient_ratio(phi_uu, phi_u, phi_d)), shape).copy()
