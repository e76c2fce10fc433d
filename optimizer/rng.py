from __future__ import annotations
import time
from typing import List, Optional
import numpy as np


def base_seed(seed: Optional[int] = None) -> int:
    """Return `seed` unchanged, or a time-based seed when it is None."""
    if seed is None:
        return int(time.time() * 1000000) % (2**31)
    return int(seed)


class RandomSource:
    """
    Uniform sampler over one numpy Generator.

    Instances are plain values: pickling one (e.g. to ship a particle to a
    worker process) carries the generator state with it.
    """
    def __init__(self, seed=None):
        self.gen = np.random.default_rng(seed)

    def sample(self, lo: float, hi: float) -> float:
        return float(self.gen.uniform(lo, hi))

    def uniform(self, lo, hi, size=None) -> np.ndarray:
        return self.gen.uniform(lo, hi, size)

    def random(self, size=None) -> np.ndarray:
        return self.gen.random(size)


def shared_source(seed: Optional[int] = None) -> RandomSource:
    """One stream for everything. Only safe when a single worker draws from it."""
    return RandomSource(base_seed(seed))


def worker_sources(seed: Optional[int], count: int) -> List[RandomSource]:
    """
    `count` independent streams, stream i seeded with [base, i] so that
    concurrent workers never share or correlate their sequences.
    """
    base = base_seed(seed)
    return [RandomSource([base, i]) for i in range(count)]
