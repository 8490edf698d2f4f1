"""Flux and stencil assembly for the explicit finite volume update."""

from .convection_diffusion import (
    convection_stencil,
    convective_fluxes,
    diffusive_fluxes,
    explicit_update,
    face_neighbours,
)

__all__ = [
    "convection_stencil",
    "convective_fluxes",
    "diffusive_fluxes",
    "explicit_update",
    "face_neighbours",
]
