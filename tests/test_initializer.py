import numpy as np
import pytest

import optimizer.initializer as initializer
from benchmarks.functions import evaluate
from optimizer.errors import AllocationFailure, InvalidDimensionForFunction, UnknownFunction
from optimizer.initializer import initialize_swarm
from optimizer.parallel import WorkerPool


@pytest.mark.parametrize("workers", [1, 3])
def test_initial_particles_in_bounds(workers):
    xmin, xmax = -5.12, 5.12
    swarm = initialize_swarm("rastrigin", 4, 50, xmin, xmax, workers=workers, seed=1)
    vmax = abs(xmax - xmin)
    assert len(swarm) == 50 and swarm.dim == 4
    for p in swarm:
        assert np.all((p.position >= xmin) & (p.position <= xmax))
        assert np.all((p.velocity >= -vmax) & (p.velocity <= vmax))
        assert np.array_equal(p.pbest, p.position)
        assert not np.shares_memory(p.pbest, p.position)
        assert p.fitness == evaluate("rastrigin", p.position)
        assert p.pbest_fitness == p.fitness


def test_global_best_broadcast_to_every_particle():
    swarm = initialize_swarm("schwefel", 3, 40, -500.0, 500.0, seed=2)
    g = int(np.argmin(swarm.fitness))
    assert all(p.gbest_index == g for p in swarm)
    assert swarm.gbest.fitness == swarm.fitness.min()


def test_same_seed_same_swarm_for_any_worker_count():
    a = initialize_swarm("eggholder", 2, 30, -512.0, 512.0, workers=1, seed=9)
    with WorkerPool(4, "thread") as pool:
        b = initialize_swarm("eggholder", 2, 30, -512.0, 512.0, workers=4, seed=9, pool=pool)
    assert np.array_equal(a.positions, b.positions)
    assert a.gbest_index == b.gbest_index


def test_process_pool_initialisation():
    with WorkerPool(2, "process") as pool:
        swarm = initialize_swarm("booth", 2, 10, -10.0, 10.0, workers=2, seed=4, pool=pool)
    ref = initialize_swarm("booth", 2, 10, -10.0, 10.0, seed=4)
    assert np.array_equal(swarm.positions, ref.positions)
    assert np.array_equal(swarm.fitness, ref.fitness)


def test_shared_stream_mode():
    swarm = initialize_swarm("booth", 2, 10, -10.0, 10.0, seed=4, rng_mode="shared")
    assert len({id(p.rng) for p in swarm}) == 1
    # consecutive particles do not repeat the same draws
    assert not np.array_equal(swarm[0].position, swarm[1].position)
    with pytest.raises(ValueError):
        initialize_swarm("booth", 2, 10, -10.0, 10.0, workers=2, rng_mode="shared")


def test_unknown_function_allocates_nothing(monkeypatch):
    def fail(*a, **k):
        raise AssertionError("swarm storage allocated")
    monkeypatch.setattr(initializer, "_allocate", fail)
    with pytest.raises(UnknownFunction):
        initialize_swarm("sphere", 2, 10, -1.0, 1.0)
    with pytest.raises(InvalidDimensionForFunction):
        initialize_swarm("holder_table", 3, 10, -10.0, 10.0)


def test_allocation_failure(monkeypatch):
    class NoMemory:
        def __init__(self, *a, **k):
            raise MemoryError
    monkeypatch.setattr(initializer, "Particle", NoMemory)
    with pytest.raises(AllocationFailure):
        initialize_swarm("rastrigin", 2, 10, -1.0, 1.0)


@pytest.mark.parametrize("kwargs", [
    dict(dim=0), dict(swarm_size=0), dict(workers=0), dict(xmin=1.0, xmax=1.0),
])
def test_invalid_parameters(kwargs):
    args = dict(function="rastrigin", dim=2, swarm_size=5, xmin=-1.0, xmax=1.0, workers=1)
    args.update(kwargs)
    with pytest.raises(ValueError):
        initialize_swarm(**args)
