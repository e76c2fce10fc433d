from __future__ import annotations
import multiprocessing
from multiprocessing.pool import ThreadPool
from typing import Callable, List, Sequence


def partition(n: int, workers: int) -> List[slice]:
    """
    Split range(n) into min(workers, n) contiguous slices whose sizes differ
    by at most one, earlier slices taking the remainder.
    """
    if n < 1:
        return []
    k = max(1, min(int(workers), n))
    base, extra = divmod(n, k)
    out, start = [], 0
    for c in range(k):
        stop = start + base + (1 if c < extra else 0)
        out.append(slice(start, stop))
        start = stop
    return out


class WorkerPool:
    """
    Fixed pool of `workers` workers. map() is a fork-join: it returns only
    once every task has finished, results in task order.

    backend "process" uses multiprocessing.Pool, "thread" uses ThreadPool.
    With a single worker everything runs inline and no pool is created.
    """
    BACKENDS = ("process", "thread")

    def __init__(self, workers: int = 1, backend: str = "process"):
        self.workers = int(workers)
        if self.workers < 1:
            raise ValueError("`workers` must be a positive integer (>= 1)")
        if backend not in self.BACKENDS:
            raise ValueError(f"Unknown backend: {backend}")
        self.backend = backend
        self._pool = None
        if self.workers > 1:
            if backend == "process":
                self._pool = multiprocessing.Pool(processes=self.workers)
            else:
                self._pool = ThreadPool(processes=self.workers)

    @property
    def parallel(self) -> bool:
        return self._pool is not None

    def map(self, fn: Callable, tasks: Sequence) -> list:
        if self._pool is None:
            return [fn(t) for t in tasks]
        return self._pool.map(fn, tasks, chunksize=1)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
