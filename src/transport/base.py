"""Abstract base solver for explicit 1D transport runs."""

from abc import ABC, abstractmethod
import logging
import os
import time

import numpy as np
import mlflow

from .datastructures import (
    RunConfig,
    RunFailure,
    RunMetrics,
    RunState,
    SimulationHistory,
    Snapshot,
)
from .errors import InvalidConfig, UserSchemeError
from .metrics import field_is_valid, field_max, total_mass

log = logging.getLogger(__name__)


class TransportSolver(ABC):
    """Abstract base solver for explicit time-marching of a 1D scalar field.

    Handles:
    - Config management (immutable input configuration)
    - Run state machine: idle -> running -> {completed, diverged}
    - Time loop with double-buffered fields and snapshot recording
    - Divergence detection and user-scheme failure capture
    - Metrics tracking and MLflow logging

    Subclasses must:
    - Set the Config class attribute (e.g., SimulationConfig)
    - Implement step() - advance one time step into a separate output buffer
    - Implement _stability_numbers() for the run summary
    """

    Config = None  # Subclasses set this to SimulationConfig or HeatConfig

    def __init__(self, config=None, **kwargs):
        """Initialize solver with a config.

        Parameters
        ----------
        config : RunConfig, optional
            Config object. If not provided, kwargs are used to create one.
        **kwargs
            Configuration parameters passed to the Config class if config is None.
        """
        if config is None:
            if self.Config is None:
                raise ValueError("Subclass must define Config class attribute")
            config = self.Config(**kwargs)
        elif self.Config is not None and not isinstance(config, self.Config):
            raise InvalidConfig(
                f"{type(self).__name__} needs a {self.Config.__name__}, got {type(config).__name__}"
            )

        self.config: RunConfig = config
        self.state = RunState.IDLE
        self.metrics = RunMetrics()
        self.history = None  # Populated after solve()

    @property
    def grid(self):
        return self.config.grid

    @abstractmethod
    def step(self, phi: np.ndarray, out: np.ndarray, step: int) -> np.ndarray:
        """Advance one time step.

        Parameters
        ----------
        phi : np.ndarray
            Field at time level n (read only).
        out : np.ndarray
            Buffer for time level n+1; never aliases ``phi``.
        step : int
            Index of the step being computed (1-based).

        Returns
        -------
        np.ndarray
            ``out`` filled with the new field.
        """
        pass

    @abstractmethod
    def _stability_numbers(self) -> dict:
        """Return {'cfl': ..., 'peclet': ..., 'fourier': ...} for the run summary."""
        pass

    def _prepare_initial_field(self, phi0) -> np.ndarray:
        phi = np.array(phi0, dtype=np.float64, copy=True)
        if phi.ndim != 1 or phi.shape[0] != self.grid.nx:
            raise InvalidConfig(
                f"Initial field must have shape ({self.grid.nx},), got {phi.shape}"
            )
        if not np.all(np.isfinite(phi)):
            raise InvalidConfig("Initial field contains non-finite values")
        return phi

    def _boundary_magnitudes(self) -> tuple:
        """Absolute values the run writes into the field at the boundaries."""
        return ()

    def _divergence_bound(self, phi0: np.ndarray) -> float:
        """divergence_limit * max(1, max|phi0|, |boundary values|)"""
        scale = max(1.0, field_max(phi0), *self._boundary_magnitudes())
        return self.config.divergence_limit * scale

    def _is_diverged(self, phi: np.ndarray, bound: float) -> bool:
        if not field_is_valid(phi):
            return True
        return field_max(phi) > bound

    def solve(self, phi0) -> SimulationHistory:
        """Run the full time loop and return the snapshot history.

        Stores results in solver attributes:
        - self.history : SimulationHistory with the recorded snapshots
        - self.metrics : RunMetrics with the run summary
        - self.state : terminal RunState

        Parameters
        ----------
        phi0 : array_like
            Initial field, one value per cell.
        """
        cfg = self.config
        phi = self._prepare_initial_field(phi0)
        phi_next = np.empty_like(phi)

        bound = self._divergence_bound(phi)
        history = SimulationHistory(state=RunState.RUNNING)
        history.snapshots.append(Snapshot.capture(phi, step=0, time=0.0))
        self.state = RunState.RUNNING

        log.debug(
            f"{type(self).__name__}: nx={cfg.grid.nx}, dt={cfg.dt:.4e}, "
            f"n_steps={cfg.n_steps}, snapshot_interval={cfg.snapshot_interval}"
        )

        time_start = time.time()
        final_step = 0

        for n in range(1, cfg.n_steps + 1):
            try:
                self.step(phi, phi_next, n)
            except UserSchemeError as e:
                e.step = n
                log.warning(f"User face function failed: {e}")
                history.failure = RunFailure(step=n, face=e.face, message=e.message)
                self.state = RunState.DIVERGED
                break

            # Swap buffers (zero-copy); phi now holds level n
            phi, phi_next = phi_next, phi
            final_step = n
            t = n * cfg.dt

            if self._is_diverged(phi, bound):
                history.snapshots.append(Snapshot.capture(phi, step=n, time=t))
                self.state = RunState.DIVERGED
                log.warning(f"Run diverged at step {n} (t={t:.4e})")
                break

            if n % cfg.snapshot_interval == 0 or n == cfg.n_steps:
                history.snapshots.append(Snapshot.capture(phi, step=n, time=t))
        else:
            self.state = RunState.COMPLETED

        wall_time = time.time() - time_start

        history.state = self.state
        history.diverged = self.state is RunState.DIVERGED
        history.final_step = final_step
        self.history = history
        self._store_metrics(history, wall_time)

        log.info(
            f"{type(self).__name__} finished: state={self.state.value}, "
            f"steps={final_step}/{cfg.n_steps}, time={wall_time:.3f}s"
        )
        return history

    def _store_metrics(self, history: SimulationHistory, wall_time: float):
        """Summarize the finished run into self.metrics."""
        dx = self.grid.dx
        final = history.final.phi
        m0 = total_mass(history.initial.phi, dx)
        m1 = total_mass(final, dx)
        finite = final[np.isfinite(final)]

        self.metrics = RunMetrics(
            steps_completed=history.final_step,
            final_time=history.final_step * self.config.dt,
            state=history.state.value,
            diverged=history.diverged,
            wall_time_seconds=wall_time,
            initial_mass=m0,
            final_mass=m1,
            mass_drift=abs(m1 - m0) / max(abs(m0), 1e-12),
            phi_min=float(np.min(finite)) if finite.size else float("nan"),
            phi_max=float(np.max(finite)) if finite.size else float("nan"),
            **self._stability_numbers(),
        )

    # ========================================================================
    # MLflow Integration
    # ========================================================================

    def mlflow_start(self, experiment_name: str, run_name: str, parent_run_id: str = None):
        """Start MLflow run and log parameters.

        Parameters
        ----------
        experiment_name : str
            Name of the MLflow experiment (created if missing).
        run_name : str
            Name of the run within the experiment.
        parent_run_id : str, optional
            If given, the run is nested under this parent run.
        """
        if mlflow.get_experiment_by_name(experiment_name) is None:
            mlflow.create_experiment(name=experiment_name)
        mlflow.set_experiment(experiment_name)

        tags = {"method": self.config.method}
        if parent_run_id:
            tags.update({"mlflow.parentRunId": parent_run_id, "sweep": "child"})
        mlflow.start_run(run_name=run_name, tags=tags, nested=bool(parent_run_id))

        mlflow.log_params(self.config.to_mlflow())

        # Log HPC job info if running on an LSF cluster
        job_id = os.environ.get("LSB_JOBID")
        if job_id:
            mlflow.set_tag("lsf.job_id", job_id)

    def mlflow_end(self):
        """Log final metrics and end the MLflow run."""
        mlflow.log_metrics(self.metrics.to_mlflow())
        mlflow.set_tag("state", self.metrics.state)
        if self.history is not None and self.history.failure is not None:
            mlflow.set_tag("failure", str(self.history.failure.message))
        mlflow.end_run()

    def mlflow_log_artifact(self, filepath: str):
        """Log an artifact (e.g., the JSON export) to MLflow."""
        mlflow.log_artifact(filepath)
