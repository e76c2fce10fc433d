from __future__ import annotations
from typing import List, Optional, Tuple, Union
import numpy as np

from benchmarks.functions import Benchmark, resolve
from .base import check_bounds, velocity_limit
from .errors import AllocationFailure
from .parallel import WorkerPool, partition
from .particle import Particle, Swarm
from .reduce import argmin_fitness
from .rng import RandomSource, shared_source, worker_sources

RNG_MODES = ("per_particle", "shared")


def validate(function: Union[str, Benchmark], dim: int, swarm_size: int,
             xmin: float, xmax: float, workers: int = 1) -> Benchmark:
    """Check every run parameter; nothing is allocated before this passes."""
    bench = resolve(function)
    if int(dim) < 1:
        raise ValueError("`dim` must be a positive integer (>= 1)")
    bench.check_dim(int(dim))
    if int(swarm_size) < 1:
        raise ValueError("`swarm_size` must be a positive integer (>= 1)")
    if int(workers) < 1:
        raise ValueError("`workers` must be a positive integer (>= 1)")
    check_bounds(xmin, xmax)
    return bench


def _allocate(dim: int, sources: List[RandomSource]) -> List[Particle]:
    try:
        return [Particle(dim, rng) for rng in sources]
    except MemoryError as e:
        raise AllocationFailure(f"could not allocate {len(sources)} particles of dim {dim}") from e


def _init_chunk(task: Tuple[List[Particle], Benchmark, float, float]) -> List[Particle]:
    particles, bench, xmin, xmax = task
    vmax = velocity_limit(xmin, xmax)
    for p in particles:
        p.position = p.rng.uniform(xmin, xmax, p.dim)
        p.velocity = p.rng.uniform(-vmax, vmax, p.dim)
        p.pbest = p.position
        p.fitness = bench(p.position)
        p.pbest_fitness = p.fitness
        p.gbest_index = -1
    return particles


def initialize_swarm(function: Union[str, Benchmark], dim: int, swarm_size: int,
                     xmin: float, xmax: float, workers: int = 1,
                     seed: Optional[int] = None, rng_mode: str = "per_particle",
                     pool: Optional[WorkerPool] = None) -> Swarm:
    """
    Build a swarm of `swarm_size` particles in [xmin, xmax]^dim.

    Each particle gets a uniform position, a uniform velocity in
    [-|xmax-xmin|, |xmax-xmin|], pbest = position and its evaluated fitness.
    Particles are initialised over static partitions of the swarm (on `pool`
    when given), then the best index is reduced and written into every
    particle.

    rng_mode "per_particle" gives particle i its own stream seeded from
    [seed, i]; "shared" draws everything from one stream and needs workers == 1.
    """
    bench = validate(function, dim, swarm_size, xmin, xmax, workers)
    if rng_mode not in RNG_MODES:
        raise ValueError(f"Unknown rng_mode: {rng_mode}")
    if rng_mode == "shared" and (workers > 1 or (pool is not None and pool.parallel)):
        raise ValueError("a shared random stream can only be used with a single worker")
    dim, swarm_size, xmin, xmax = int(dim), int(swarm_size), float(xmin), float(xmax)

    if rng_mode == "shared":
        rng = shared_source(seed)
        sources = [rng] * swarm_size
    else:
        sources = worker_sources(seed, swarm_size)
    particles = _allocate(dim, sources)

    tasks = [(particles[s], bench, xmin, xmax) for s in partition(swarm_size, workers)]
    chunks = pool.map(_init_chunk, tasks) if pool is not None else [_init_chunk(t) for t in tasks]
    particles = [p for chunk in chunks for p in chunk]

    swarm = Swarm(particles, bench, xmin, xmax)
    swarm.broadcast(argmin_fitness(swarm, workers, pool))
    return swarm
