"""JSON export of a finished run for external plotting and analysis tools.

Document layout::

    {
      "times":     [t0, t1, ...],
      "l2Errors":  [...],           # relative to the first snapshot
      "masses":    [...],
      "snapshots": [{"time": t, "phi": [...]}, ...],
      "x":         [...]            # cell centres
    }

Non-finite numbers (from a diverged run) are written as ``null`` so the
document stays valid JSON.
"""

import json
import math
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .datastructures import SimulationHistory
from .meshing.grid import Grid1D
from .metrics import history_diagnostics


def _clean(values) -> list:
    return [float(v) if math.isfinite(v) else None for v in np.asarray(values, dtype=np.float64).tolist()]


def history_to_dict(history: SimulationHistory, grid: Grid1D) -> dict:
    """Build the export document for ``history`` on ``grid``."""
    diagnostics = history_diagnostics(history, grid.dx)
    return {
        "times": _clean(diagnostics.times),
        "l2Errors": _clean(diagnostics.l2_errors),
        "masses": _clean(diagnostics.masses),
        "snapshots": [{"time": float(s.time), "phi": _clean(s.phi)} for s in history.snapshots],
        "x": _clean(grid.x_cell),
    }


def export_json(
    history: SimulationHistory,
    grid: Grid1D,
    path: Optional[Union[str, Path]] = None,
    indent: int = 2,
) -> str:
    """Serialize ``history`` to JSON; also write it to ``path`` when given."""
    text = json.dumps(history_to_dict(history, grid), indent=indent, allow_nan=False)
    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return text


def load_json(path: Union[str, Path]) -> dict:
    """Read an export document back; field arrays are returned as numpy arrays."""
    data = json.loads(Path(path).read_text())
    data["x"] = np.asarray(data["x"], dtype=np.float64)
    for snap in data["snapshots"]:
        snap["phi"] = np.array([np.nan if v is None else v for v in snap["phi"]], dtype=np.float64)
    return data
