from __future__ import annotations
from typing import List, Tuple
import numpy as np

from benchmarks.functions import Benchmark
from .base import project, velocity_limit
from .particle import Particle

# Inertia / cognitive / social defaults
W = 0.79
C1 = 1.49
C2 = 1.49


def update_particle(p: Particle, gbest_x: np.ndarray, bench: Benchmark,
                    xmin: float, xmax: float,
                    w: float = W, c1: float = C1, c2: float = C2) -> Particle:
    """
    One PSO step for a single particle, in place:

        v <- w * v + c1 * r1 * (pbest - x) + c2 * r2 * (gbest - x)
        x <- clip(x + v, xmin, xmax)

    r1, r2 are i.i.d. U(0, 1) per component, drawn from the particle's own
    stream. A velocity component that leaves [-|xmax-xmin|, |xmax-xmin|] is
    redrawn uniformly from that range rather than clipped to its edge.

    fitness always becomes the fitness of the new position; pbest only moves
    when that fitness is strictly better than pbest_fitness.
    """
    vmax = velocity_limit(xmin, xmax)
    x = p.position

    r1 = p.rng.random(p.dim)
    r2 = p.rng.random(p.dim)
    v = w * p.velocity + c1 * r1 * (p.pbest - x) + c2 * r2 * (gbest_x - x)

    bad = (v < -vmax) | (v > vmax)
    if np.any(bad):
        v[bad] = p.rng.uniform(-vmax, vmax, int(np.count_nonzero(bad)))
    p.velocity = v
    p.position = project(x + v, xmin, xmax)

    p.fitness = bench(p.position)
    if p.fitness < p.pbest_fitness:
        p.pbest_fitness = p.fitness
        p.pbest = p.position
    return p


def update_chunk(task: Tuple[List[Particle], np.ndarray, Benchmark, float, float, float, float, float]) -> List[Particle]:
    particles, gbest_x, bench, xmin, xmax, w, c1, c2 = task
    return [update_particle(p, gbest_x, bench, xmin, xmax, w, c1, c2) for p in particles]
