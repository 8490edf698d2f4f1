"""Finite volume solver package.

This package contains the explicit finite volume convection-diffusion solver,
its face interpolation schemes, boundary conditions and flux assembly.
"""

# Keep lightweight: datastructures imports submodules of this package.
__all__ = []
