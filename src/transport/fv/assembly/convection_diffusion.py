"""Vectorized flux assembly for the explicit 1D finite volume update.

The field is first padded with ghost cells (see ``fv.boundary``); every face
of the grid then has a full (W, P, E, EE) neighbourhood and the fluxes for all
N+1 faces are computed with NumPy array operations.

    phi_P^{n+1} = phi_P^n - (dt/dx) (F_e - F_w) + (dt/dx) (D_e - D_w)

    F_f = u * phi_f                  (convective flux)
    D_f = Gamma / dx * (phi_E - phi_P)  (diffusive flux)
"""

import numpy as np

from ...datastructures import StencilResult
from ...errors import InvalidConfig
from ..boundary import BoundarySpec, extend_with_ghosts
from ..schemes import Scheme, limiter_values
from ..user_scheme import UserFaceFunction

N_GHOST = 2


def face_neighbours(phi_ext: np.ndarray, n_ghost: int = N_GHOST):
    """Slice the padded field into (W, P, E, EE) arrays, one entry per face.

    Face i lies between cell i-1 (P) and cell i (E), i = 0..N.
    """
    n_faces = phi_ext.shape[0] - 2 * n_ghost + 1
    start = n_ghost - 2
    phi_w = phi_ext[start:start + n_faces]
    phi_p = phi_ext[start + 1:start + 1 + n_faces]
    phi_e = phi_ext[start + 2:start + 2 + n_faces]
    phi_ee = phi_ext[start + 3:start + 3 + n_faces]
    return phi_w, phi_p, phi_e, phi_ee


def convective_fluxes(phi_face: np.ndarray, u: float) -> np.ndarray:
    """F_f = u * phi_f"""
    return u * phi_face


def diffusive_fluxes(phi_ext: np.ndarray, gamma: float, dx: float, n_ghost: int = N_GHOST) -> np.ndarray:
    """D_f = Gamma/dx * (phi_E - phi_P) for every face."""
    _, phi_p, phi_e, _ = face_neighbours(phi_ext, n_ghost)
    return gamma / dx * (phi_e - phi_p)


def explicit_update(phi, conv_flux, diff_flux, dt: float, dx: float, out: np.ndarray) -> np.ndarray:
    """Conservative explicit Euler update written into ``out``.

    ``out`` must not alias ``phi``.
    """
    ratio = dt / dx
    np.subtract(conv_flux[1:], conv_flux[:-1], out=out)
    out *= -ratio
    out += phi
    if diff_flux is not None:
        out += ratio * (diff_flux[1:] - diff_flux[:-1])
    return out


# -----------------------------------------------------------------------------
# Stencil coefficients
# -----------------------------------------------------------------------------


def _representative_limiters(scheme: Scheme, u: float, phi, bc):
    """Limiter values (psi_w, psi_e) at the cell with the steepest local gradient."""
    if phi is None:
        return 1.0, 1.0, None

    phi = np.asarray(phi, dtype=np.float64)
    bc = BoundarySpec.coerce(bc)
    ext = extend_with_ghosts(phi, bc, N_GHOST)
    psi = limiter_values(scheme, *face_neighbours(ext), u)

    # central difference per cell: ext[i+3] - ext[i+1]
    n = phi.shape[0]
    jump = np.abs(ext[N_GHOST + 1:N_GHOST + 1 + n] - ext[N_GHOST - 1:N_GHOST - 1 + n])
    cell = int(np.argmax(jump)) if np.any(jump > 0) else n // 2
    return float(psi[cell]), float(psi[cell + 1]), cell


def convection_stencil(scheme, u: float, dx: float, dt: float, gamma: float = 0.0, phi=None, bc=None) -> StencilResult:
    """Explicit update coefficients (aW, aP, aE) for an interior cell.

    For UDS and CDS the coefficients follow by substituting the face rule into
    the conservative update and are exact. TVD schemes are nonlinear: their
    coefficients are frozen around the current state ``phi`` (at the cell with
    the steepest gradient), or around a smooth state (psi = 1) when no field
    is given. They describe one step only and are not used to advance the run.

    Parameters
    ----------
    scheme : Scheme or str
        Built-in scheme.
    u, dx, dt : float
        Velocity, cell width and time step.
    gamma : float
        Diffusion coefficient; adds the Fourier number d = gamma dt/dx^2.
    phi : array_like, optional
        Current field for the TVD linearization.
    bc : BoundarySpec, optional
        Boundary conditions used to pad ``phi`` (periodic by default).

    Returns
    -------
    StencilResult
        Coefficients with aW + aP + aE = 1.
    """
    if isinstance(scheme, UserFaceFunction) or (callable(scheme) and not isinstance(scheme, str)):
        raise InvalidConfig("Stencil coefficients are only available for built-in schemes")
    scheme = Scheme.parse(scheme)
    if dx <= 0 or dt <= 0:
        raise InvalidConfig(f"dx and dt must be > 0, got dx={dx}, dt={dt}")
    if gamma < 0:
        raise InvalidConfig(f"gamma must be >= 0, got {gamma}")

    c = u * dt / dx  # signed CFL number

    if scheme is Scheme.UDS:
        if u >= 0:
            aW, aP, aE = c, 1.0 - c, 0.0
            description = f"UDS (u>=0): phi_P^(n+1) = {aP:.3f} phi_P + {aW:.3f} phi_W"
        else:
            aW, aP, aE = 0.0, 1.0 + c, -c
            description = f"UDS (u<0): phi_P^(n+1) = {aP:.3f} phi_P + {aE:.3f} phi_E"
    elif scheme is Scheme.CDS:
        aW, aP, aE = 0.5 * c, 1.0, -0.5 * c
        description = f"CDS: phi_P^(n+1) = phi_P - (c/2)(phi_E - phi_W)  [c={c:.3f}]"
    else:
        psi_w, psi_e, cell = _representative_limiters(scheme, u, phi, bc)
        if u >= 0:
            aW = c * (1.0 - 0.5 * psi_w)
            aP = 1.0 - c * (1.0 - 0.5 * psi_e - 0.5 * psi_w)
            aE = -0.5 * c * psi_e
        else:
            aW = 0.5 * c * psi_w
            aP = 1.0 - c * (0.5 * psi_e - 1.0 + 0.5 * psi_w)
            aE = -c * (1.0 - 0.5 * psi_e)
        where = f"cell {cell}" if cell is not None else "smooth state"
        description = (
            f"{scheme.value}: approximate, frozen at {where} "
            f"(psi_w={psi_w:.3f}, psi_e={psi_e:.3f}, c={c:.3f})"
        )

    if gamma > 0:
        d = gamma * dt / dx**2
        aW += d
        aP -= 2.0 * d
        aE += d
        description += f" + diffusion [d={d:.3f}]"

    return StencilResult(aW=float(aW), aP=float(aP), aE=float(aE), description=description)
