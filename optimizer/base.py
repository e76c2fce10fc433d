from __future__ import annotations
from typing import Dict, Optional
import numpy as np


def project(x: np.ndarray, xmin: float, xmax: float) -> np.ndarray:
    """Saturating clamp of every component to [xmin, xmax]."""
    return np.minimum(np.maximum(x, xmin), xmax)


def velocity_limit(xmin: float, xmax: float) -> float:
    return abs(xmax - xmin)


def check_bounds(xmin: float, xmax: float) -> None:
    if not (np.isfinite(xmin) and np.isfinite(xmax)):
        raise ValueError("xmin/xmax must be finite")
    if xmin >= xmax:
        raise ValueError(f"xmin ({xmin}) must be smaller than xmax ({xmax})")


class Optimizer:
    """
    Iteration-driven interface: step() advances one iteration, run() steps
    until the budget is spent, best() / state() report progress.
    """
    def __init__(self, max_iter: int, seed: Optional[int] = None, options: Optional[Dict] = None):
        if int(max_iter) < 0:
            raise ValueError("`max_iter` must be >= 0")
        self.max_iter: int = int(max_iter)
        self.seed = seed
        self.options: Dict = options or {}
        self._iters = 0

    def step(self):
        raise NotImplementedError

    def best(self):
        raise NotImplementedError

    def state(self) -> Dict:
        return {"iter": self._iters}

    def done(self) -> bool:
        return self._iters >= self.max_iter

    def run(self):
        while not self.done():
            self.step()
        return self.best()
