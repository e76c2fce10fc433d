from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union
import numpy as np

from benchmarks.functions import Benchmark
from .base import Optimizer
from .initializer import initialize_swarm, validate
from .parallel import WorkerPool, partition
from .particle import Swarm
from .reduce import argmin_fitness
from .update import C1, C2, W, update_chunk


@dataclass
class OptimizationResult:
    best_index: int
    best_position: np.ndarray
    best_fitness: float
    iterations: int
    history: List[Dict] = field(default_factory=list)


class PSO(Optimizer):
    """
    Particle Swarm Optimisation over [xmin, xmax]^dim with a fixed worker pool.
    - inertia w, cognitive c1, social c2
    - velocity resampled when it leaves [-|xmax-xmin|, |xmax-xmin|]
    - gbest topology, refreshed once per iteration
    - optional 2D trajectory tracing (trace_every > 0 and dim == 2)

    Each step() is three fork-join phases over static partitions of the
    swarm: update every particle against last iteration's gbest, reduce to
    the new best index, broadcast it.
    """
    def __init__(self, function: Union[str, Benchmark], dim: int, swarm_size: int,
                 xmin: float, xmax: float, max_iter: int,
                 seed: Optional[int] = None, options: Optional[Dict] = None):
        super().__init__(max_iter, seed, options)
        opt = self.options

        self.w: float = float(opt.get("w", W))
        self.c1: float = float(opt.get("c1", C1))
        self.c2: float = float(opt.get("c2", C2))
        self.workers: int = int(opt.get("workers", 1))
        self.backend: str = str(opt.get("backend", "process"))
        self.rng_mode: str = str(opt.get("rng_mode", "per_particle"))
        # 0 disables tracing; otherwise record particle positions every N iterations (only if dim==2).
        self.trace_every: int = int(opt.get("trace_every", 0))
        self._positions_trace: List[np.ndarray] = []
        self._history: List[Dict] = []

        validate(function, dim, swarm_size, xmin, xmax, self.workers)
        self.pool = WorkerPool(self.workers, self.backend)
        try:
            self.swarm: Swarm = initialize_swarm(
                function, dim, swarm_size, xmin, xmax,
                workers=self.workers, seed=seed, rng_mode=self.rng_mode, pool=self.pool,
            )
        except BaseException:
            self.pool.close()
            raise
        self._chunks = partition(len(self.swarm), self.workers)
        self._record()

    @property
    def D(self) -> int:
        return self.swarm.dim

    def _record(self):
        f = self.swarm.fitness
        finite = f[np.isfinite(f)]
        g = self.swarm.gbest
        row = {
            "iter": self._iters,
            "f_best": float(np.min(finite)) if finite.size else float("inf"),
            "f_mean": float(np.mean(finite)) if finite.size else float("inf"),
            "f_std": float(np.std(finite)) if finite.size else 0.0,
            "gbest_index": self.swarm.gbest_index,
            "gbest_f": float(g.fitness),
        }
        self._history.append(row)
        if self.trace_every and (self._iters % self.trace_every == 0) and self.D == 2:
            self._positions_trace.append(self.swarm.positions)

    def step(self):
        sw = self.swarm
        # every particle pulls toward the same, read-only copy of last iteration's gbest
        gbest_x = sw.gbest.position.copy()

        # 1) update (barrier on return)
        tasks = [(sw.particles[s], gbest_x, sw.benchmark, sw.xmin, sw.xmax, self.w, self.c1, self.c2)
                 for s in self._chunks]
        chunks = self.pool.map(update_chunk, tasks)
        sw.particles[:] = [p for chunk in chunks for p in chunk]

        # 2) reduce (barrier on return), 3) broadcast
        g = argmin_fitness(sw, self.workers, self.pool)
        sw.broadcast(g)

        self._iters += 1
        self._record()

    def best(self):
        g = self.swarm.gbest
        return {"index": self.swarm.gbest_index, "x": g.position.copy(), "f": float(g.fitness)}

    def state(self) -> Dict:
        st = dict(self._history[-1])
        st["gbest_x"] = self.swarm.gbest.position.copy()
        st["evals_total"] = len(self.swarm) * (self._iters + 1)
        st["trace_len"] = len(self._positions_trace)
        return st

    def history(self) -> List[Dict]:
        return list(self._history)

    def positions_trace(self) -> List[np.ndarray]:
        """Return the recorded list of (pop, 2) arrays. Empty if tracing disabled or dim != 2."""
        return list(self._positions_trace)

    def result(self) -> OptimizationResult:
        b = self.best()
        return OptimizationResult(b["index"], b["x"], b["f"], self._iters, self.history())

    def close(self):
        self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def run_optimization(function: Union[str, Benchmark], dim: int, swarm_size: int,
                     xmin: float, xmax: float, max_iter: int, workers: int = 1,
                     seed: Optional[int] = None, options: Optional[Dict] = None) -> OptimizationResult:
    """
    Minimise `function` and return the final global best.

    Errors (unknown function, bad dimension, bad parameters) are raised
    before any swarm storage is allocated; any failure during the run
    propagates and no partial result is returned.
    """
    opts = dict(options or {})
    opts["workers"] = workers
    with PSO(function, dim, swarm_size, xmin, xmax, max_iter, seed=seed, options=opts) as opt:
        opt.run()
        return opt.result()
