"""
Scalar transport runner - Hydra configuration + optional MLflow tracking.

Usage:
    python main.py
    python main.py scheme=TVD-superbee nx=200 cfl=0.4
    python main.py preset=step-cds-oscillations
    python main.py compare_scheme=CDS mlflow.enabled=true
    python main.py -m scheme=UDS,CDS,TVD-minmod,TVD-vanLeer,TVD-superbee
"""

import logging
import os
from dataclasses import replace
from pathlib import Path

import hydra
import mlflow
from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

from transport import (
    FVSolver,
    SimulationConfig,
    compute_max_dt,
    convection_stencil,
    create_grid,
    export_json,
    get_preset,
    history_diagnostics,
    init_field,
)
from transport.fv.schemes import Scheme

load_dotenv()

log = logging.getLogger(__name__)


def setup_mlflow(cfg: DictConfig) -> str:
    """Setup MLflow tracking and return experiment name."""
    tracking_uri = cfg.mlflow.get("tracking_uri", "./mlruns")
    if str(cfg.mlflow.get("mode", "")).lower() in ("files", "local"):
        os.environ.pop("MLFLOW_TRACKING_URI", None)
    os.environ["MLFLOW_TRACKING_URI"] = str(tracking_uri)
    mlflow.set_tracking_uri(tracking_uri)

    experiment_name = cfg.experiment_name
    prefix = cfg.mlflow.get("project_prefix", "")
    if prefix and not experiment_name.startswith("/"):
        experiment_name = f"{prefix}/{experiment_name}"
    return experiment_name


def build_run(cfg: DictConfig):
    """Create (grid, phi0, SimulationConfig) from the Hydra config or a preset."""
    if cfg.get("preset"):
        return get_preset(cfg.preset).build()

    grid = create_grid(int(cfg.nx), float(cfg.L))
    phi0 = init_field(grid.x_cell, grid.L, OmegaConf.to_container(cfg.ic, resolve=True))
    dt = cfg.get("dt") or compute_max_dt(grid.dx, cfg.u, cfg.cfl, cfg.gamma)

    config = SimulationConfig(
        grid=grid,
        dt=float(dt),
        u=float(cfg.u),
        gamma=float(cfg.gamma),
        scheme=cfg.scheme,
        bc=OmegaConf.to_container(cfg.bc, resolve=True),
        n_steps=int(cfg.n_steps),
        snapshot_interval=int(cfg.snapshot_interval),
        divergence_limit=float(cfg.divergence_limit),
    )
    return grid, phi0, config


def run_one(cfg: DictConfig, grid, phi0, config: SimulationConfig, output_dir: Path, label: str):
    """Run one simulation, export JSON and (optionally) log to MLflow."""
    solver = FVSolver(config)
    run_name = f"{config.scheme_name}_N{grid.nx}"

    if cfg.mlflow.enabled:
        solver.mlflow_start(setup_mlflow(cfg), run_name, os.environ.get("MLFLOW_PARENT_RUN_ID"))
        mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")

    history = solver.solve(phi0)
    m = solver.metrics
    log.info(
        f"[{label}] {config.scheme_name}: state={m.state}, steps={m.steps_completed}, "
        f"CFL={m.cfl:.3f}, Pe={m.peclet:.3g}, mass drift={m.mass_drift:.2e}, "
        f"range=[{m.phi_min:.4f}, {m.phi_max:.4f}]"
    )
    if history.failure is not None:
        log.error(f"[{label}] user face function failed: {history.failure.message}")

    if isinstance(config.scheme, Scheme):
        stencil = convection_stencil(
            config.scheme, config.u, grid.dx, config.dt, config.gamma, phi=phi0, bc=config.bc
        )
        log.info(f"[{label}] stencil: {stencil.description}")

    export_path = output_dir / f"{label}_{cfg.export_name}"
    export_json(history, grid, export_path)
    log.info(f"[{label}] exported results to {export_path}")

    if cfg.mlflow.enabled:
        batch = history_diagnostics(history, grid.dx).to_mlflow_batch()
        if batch:
            mlflow.tracking.MlflowClient().log_batch(mlflow.active_run().info.run_id, metrics=batch)
        solver.mlflow_log_artifact(str(export_path))
        solver.mlflow_end()

    return history


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    output_dir = Path(hydra.core.hydra_config.HydraConfig.get().runtime.output_dir)
    grid, phi0, config = build_run(cfg)
    log.info(f"Grid: N={grid.nx}, L={grid.L}, dx={grid.dx:.4e}, dt={config.dt:.4e}")

    run_one(cfg, grid, phi0, config, output_dir, label="base")

    if cfg.get("compare_scheme"):
        compare = replace(config, scheme=cfg.compare_scheme)
        run_one(cfg, grid, phi0, compare, output_dir, label="compare")


if __name__ == "__main__":
    main()
