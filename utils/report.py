from __future__ import annotations
import sys
from typing import TextIO

import numpy as np

from optimizer.particle import Particle, Swarm


def _vec(v: np.ndarray) -> str:
    return " ".join(f"{float(c):.2f}" for c in v)


def format_particle(p: Particle) -> str:
    return (
        f"position: {_vec(p.position)}\n"
        f"velocity: {_vec(p.velocity)}\n"
        f"pbest: {_vec(p.pbest)}\n"
        f"fitness: {p.fitness:.4f}\n"
        f"g: {p.gbest_index}"
    )


def print_particle(p: Particle, stream: TextIO = None) -> None:
    print(format_particle(p), file=stream or sys.stderr)


def print_swarm(swarm: Swarm, stream: TextIO = None) -> None:
    stream = stream or sys.stderr
    for i, p in enumerate(swarm):
        print(f"\nParticle: {i}", file=stream)
        print_particle(p, stream)
