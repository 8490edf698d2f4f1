"""Mesh generation for the 1D transport solvers."""

from .grid import Grid1D, create_grid

__all__ = ["Grid1D", "create_grid"]
