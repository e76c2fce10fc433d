from __future__ import annotations
from typing import Iterator, List, Optional
import numpy as np

from benchmarks.functions import Benchmark
from .rng import RandomSource

_POS, _VEL, _PBEST = 0, 1, 2


class Particle:
    """
    One swarm member. position / velocity / pbest are row views of a single
    owned (3, dim) buffer, so a particle is copied, pickled and released as
    one value.
    """
    __slots__ = ("buf", "fitness", "pbest_fitness", "gbest_index", "rng")

    def __init__(self, dim: int, rng: Optional[RandomSource] = None):
        if dim < 1:
            raise ValueError("`dim` must be a positive integer (>= 1)")
        self.buf = np.zeros((3, int(dim)), dtype=float)
        self.fitness: float = np.inf
        self.pbest_fitness: float = np.inf
        self.gbest_index: int = -1
        self.rng = rng

    @property
    def dim(self) -> int:
        return self.buf.shape[1]

    @property
    def position(self) -> np.ndarray:
        return self.buf[_POS]

    @position.setter
    def position(self, value) -> None:
        self.buf[_POS] = value

    @property
    def velocity(self) -> np.ndarray:
        return self.buf[_VEL]

    @velocity.setter
    def velocity(self, value) -> None:
        self.buf[_VEL] = value

    @property
    def pbest(self) -> np.ndarray:
        return self.buf[_PBEST]

    @pbest.setter
    def pbest(self, value) -> None:
        self.buf[_PBEST] = value

    def __getstate__(self):
        return {k: getattr(self, k) for k in self.__slots__}

    def __setstate__(self, state):
        for k, v in state.items():
            setattr(self, k, v)

    def __repr__(self):
        return (f"Particle(dim={self.dim}, fitness={self.fitness:.6g}, "
                f"pbest_fitness={self.pbest_fitness:.6g}, g={self.gbest_index})")


class Swarm:
    """Fixed-size population plus the constants of the run it belongs to."""

    def __init__(self, particles: List[Particle], benchmark: Benchmark, xmin: float, xmax: float):
        if not particles:
            raise ValueError("a swarm needs at least one particle")
        dims = {p.dim for p in particles}
        if len(dims) != 1:
            raise ValueError(f"particles disagree on dim: {sorted(dims)}")
        self.particles = particles
        self.benchmark = benchmark
        self.xmin = float(xmin)
        self.xmax = float(xmax)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __getitem__(self, i: int) -> Particle:
        return self.particles[i]

    @property
    def num_particles(self) -> int:
        return len(self.particles)

    @property
    def dim(self) -> int:
        return self.particles[0].dim

    @property
    def fitness(self) -> np.ndarray:
        return np.array([p.fitness for p in self.particles], dtype=float)

    @property
    def positions(self) -> np.ndarray:
        return np.stack([p.position for p in self.particles], axis=0)

    @property
    def gbest_index(self) -> int:
        return self.particles[0].gbest_index

    @property
    def gbest(self) -> Particle:
        return self.particles[self.gbest_index]

    def broadcast(self, g: int) -> None:
        if not 0 <= g < len(self.particles):
            raise IndexError(f"global best index {g} outside swarm of {len(self.particles)}")
        for p in self.particles:
            p.gbest_index = g
