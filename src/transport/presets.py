"""Ready-made configurations for the teaching scenarios."""

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from .datastructures import SimulationConfig
from .errors import InvalidConfig
from .fields import InitialCondition, init_field
from .fv.boundary import BoundaryCondition, BoundarySpec
from .meshing.grid import Grid1D, create_grid
from .metrics import compute_max_dt

PERIODIC = BoundarySpec()
FIXED_WALLS = BoundarySpec(
    left=BoundaryCondition("fixed", 1.0),
    right=BoundaryCondition("fixed", 0.0),
)


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    nx: int = 100
    L: float = 1.0
    u: float = 1.0
    gamma: float = 0.0
    cfl: float = 0.5
    scheme: str = "UDS"
    ic: InitialCondition = field(default_factory=InitialCondition)
    bc: BoundarySpec = PERIODIC
    n_steps: int = 100
    snapshot_interval: int = 10

    def build(self, **overrides) -> Tuple[Grid1D, np.ndarray, SimulationConfig]:
        """Create (grid, phi0, config); keyword overrides replace config fields."""
        grid = create_grid(self.nx, self.L)
        phi0 = init_field(grid.x_cell, grid.L, self.ic)
        params = dict(
            grid=grid,
            dt=compute_max_dt(grid.dx, self.u, self.cfl, self.gamma),
            u=self.u,
            gamma=self.gamma,
            scheme=self.scheme,
            bc=self.bc,
            n_steps=self.n_steps,
            snapshot_interval=self.snapshot_interval,
        )
        params.update(overrides)
        return grid, phi0, SimulationConfig(**params)


PRESETS: List[Preset] = [
    Preset(
        name="step-uds-stable",
        description="Step profile with upwind at CFL=0.5. Shows numerical diffusion.",
        ic=InitialCondition("step", step_pos=0.2),
    ),
    Preset(
        name="step-cds-oscillations",
        description="Step profile with central differencing. Shows 2dx wiggles.",
        scheme="CDS",
        ic=InitialCondition("step", step_pos=0.2),
        n_steps=80,
    ),
    Preset(
        name="gaussian-uds",
        description="Gaussian pulse: UDS smears, CDS is sharper but less stable.",
        nx=200,
        cfl=0.8,
        ic=InitialCondition("gaussian", gauss_center=0.3, gauss_sigma=0.05),
        n_steps=150,
        snapshot_interval=15,
    ),
    Preset(
        name="sine-cfl-unstable",
        description="Sine wave at CFL=1.2: the solution blows up (CFL condition).",
        nx=80,
        cfl=1.2,
        ic=InitialCondition("sine"),
        n_steps=300,
        snapshot_interval=10,
    ),
    Preset(
        name="convection-diffusion-high-peclet",
        description="Convection dominated (Pe >> 1). UDS stays bounded, CDS oscillates.",
        nx=50,
        gamma=0.001,
        cfl=0.4,
        ic=InitialCondition("step", step_pos=0.0, step_width=0.3),
        bc=FIXED_WALLS,
        n_steps=200,
        snapshot_interval=20,
    ),
    Preset(
        name="convection-diffusion-low-peclet",
        description="Diffusion dominated (Pe ~ 1). The solution becomes smooth.",
        nx=50,
        u=0.1,
        gamma=0.01,
        cfl=0.4,
        scheme="CDS",
        ic=InitialCondition("step", step_pos=0.0, step_width=0.3),
        bc=FIXED_WALLS,
        n_steps=500,
        snapshot_interval=50,
    ),
    Preset(
        name="step-tvd-minmod",
        description="TVD limiter suppresses oscillations while keeping the step sharp.",
        scheme="TVD-minmod",
        ic=InitialCondition("step", step_pos=0.2),
    ),
    Preset(
        name="triangle-comparison",
        description="Triangle pulse for side-by-side scheme comparison.",
        nx=150,
        ic=InitialCondition("triangle"),
        n_steps=120,
        snapshot_interval=12,
    ),
]


def get_preset(name: str) -> Preset:
    for preset in PRESETS:
        if preset.name == name:
            return preset
    raise InvalidConfig(f"Unknown preset '{name}'. Available: {', '.join(p.name for p in PRESETS)}")
