from __future__ import annotations
from typing import Optional, Sequence, Tuple, Union
import numpy as np

from .parallel import WorkerPool, partition
from .particle import Swarm


def _as_fitness(values: Union[Swarm, Sequence[float], np.ndarray]) -> np.ndarray:
    f = values.fitness if isinstance(values, Swarm) else np.asarray(values, dtype=float)
    f = np.array(f, dtype=float).ravel()
    f[np.isnan(f)] = np.inf
    return f


def _scan(f: np.ndarray, start: int = 0) -> Tuple[int, float]:
    # strict '<' keeps the first occurrence of a tie
    best_i, best_f = start, f[0]
    for k in range(1, len(f)):
        if f[k] < best_f:
            best_i, best_f = start + k, f[k]
    return best_i, float(best_f)


def _local_min(task: Tuple[int, np.ndarray]) -> Tuple[int, float]:
    start, chunk = task
    return _scan(chunk, start)


def argmin_fitness(values, workers: int = 1, pool: Optional[WorkerPool] = None) -> int:
    """
    Index of the lowest fitness, ties broken by lowest index.

    workers == 1 does a single linear scan. Otherwise the indices are split
    into contiguous partitions, each partition reports its local minimum
    (on `pool` when one is given), and one merge step picks the winner.
    Partitions are ordered, so the earliest partition wins a tie and the
    answer equals the sequential scan for any partition count.
    """
    f = _as_fitness(values)
    if f.size == 0:
        raise ValueError("cannot reduce an empty swarm")
    if workers <= 1:
        return _scan(f)[0]

    tasks = [(s.start, f[s]) for s in partition(f.size, workers)]
    partials = pool.map(_local_min, tasks) if pool is not None else [_local_min(t) for t in tasks]

    g, best = partials[0]
    for i, fi in partials[1:]:
        if fi < best:
            g, best = i, fi
    return g
