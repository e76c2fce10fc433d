from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence


# Project root: .../parallel-pso
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_ROOT = PROJECT_ROOT / "data"
RESULTS_ROOT = DATA_ROOT / "results"
FIGURES_ROOT = DATA_ROOT / "figures"


@dataclass
class RunConfig:
    """Run parameters stored with each run."""
    function: str        # benchmark name, e.g. "rastrigin"
    dim: int
    swarm_size: int
    xmin: float
    xmax: float
    max_iter: int
    workers: int
    seed: int
    w: float
    c1: float
    c2: float
    backend: str = "process"


def _ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def create_run_dir(function: str, mode: str = "single", root: Optional[Path] = None) -> Path:
    """
    Create and return a unique directory for a single run.

    Structure:
        {root}/{function}/{mode}/run_YYYYmmdd_HHMMSS_XXXX/

    mode : "single" or "multi"
    """
    if mode not in {"single", "multi"}:
        raise ValueError(f"Unknown mode: {mode}")

    base = Path(root or RESULTS_ROOT) / function / mode
    _ensure_dir(base)

    now = datetime.now()
    # short suffix from microseconds to avoid collisions
    run_dir = base / f"run_{now.strftime('%Y%m%d_%H%M%S')}_{now.strftime('%f')[-4:]}"
    _ensure_dir(run_dir)
    return run_dir


def save_convergence_csv(run_dir: Path, history: Sequence[Dict[str, Any]]) -> Path:
    """
    Save per-iteration history to CSV:
        iter, f_best, f_mean, f_std, gbest_index, gbest_f
    """
    path = Path(run_dir) / "convergence.csv"
    fields = ["iter", "f_best", "f_mean", "f_std", "gbest_index", "gbest_f"]
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fields, extrasaction="ignore")
        writer.writeheader()
        for row in history:
            writer.writerow(row)
    return path


def save_swarm_2d_csv(run_dir: Path, swarm_history: Sequence[Any]) -> Path:
    """
    Save 2D swarm positions over time.

    swarm_history: list of arrays of shape (n_particles, 2)

    CSV columns:
        snapshot, particle, x1, x2
    """
    path = Path(run_dir) / "swarm_2d.csv"
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["snapshot", "particle", "x1", "x2"])
        for it, swarm in enumerate(swarm_history):
            for pid, pos in enumerate(swarm):
                writer.writerow([it, pid, float(pos[0]), float(pos[1])])
    return path


def save_run_metadata(run_dir: Path, config: RunConfig, extra: Dict[str, Any] | None = None) -> Path:
    """
    Save run configuration and optional extra info to metadata.json.
    """
    meta: Dict[str, Any] = asdict(config)
    if extra:
        meta.update(extra)

    path = Path(run_dir) / "metadata.json"
    with path.open("w") as f:
        json.dump(meta, f, indent=2)
    return path


def append_multi_summary(
    function: str,
    rows: Iterable[Dict[str, Any]],
    filename: str = "summary.csv",
    root: Optional[Path] = None,
) -> Path:
    """
    Append summary rows for multiple runs.

    Each row should be a flat dict with consistent keys.

    File location:
        {root}/{function}/multi/{filename}
    """
    base = Path(root or RESULTS_ROOT) / function / "multi"
    _ensure_dir(base)

    path = base / filename

    rows = list(rows)
    if not rows:
        return path

    # Ensure consistent column order
    fieldnames: List[str] = sorted(rows[0].keys())

    write_header = not path.exists()
    with path.open("a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row)

    return path
