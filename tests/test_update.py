import numpy as np

from benchmarks.functions import Benchmark
from optimizer.initializer import initialize_swarm
from optimizer.particle import Particle
from optimizer.rng import RandomSource
from optimizer.update import update_particle


def _particle(x, v, seed=0):
    p = Particle(len(x), RandomSource(seed))
    p.position = x
    p.velocity = v
    p.pbest = x
    p.fitness = p.pbest_fitness = Benchmark.RASTRIGIN(p.position)
    return p


def test_update_keeps_bounds():
    xmin, xmax = -5.12, 5.12
    vmax = abs(xmax - xmin)
    swarm = initialize_swarm("rastrigin", 5, 40, xmin, xmax, seed=11)
    for _ in range(30):
        gx = swarm.gbest.position.copy()
        for p in swarm:
            update_particle(p, gx, swarm.benchmark, xmin, xmax, w=1.5, c1=2.5, c2=2.5)
            assert np.all((p.position >= xmin) & (p.position <= xmax))
            assert np.all((p.velocity >= -vmax) & (p.velocity <= vmax))


def test_position_saturates_at_bound():
    # v == vmax is legal, so it is not resampled and x + v overshoots xmax
    p = _particle(np.array([4.0, -4.0]), np.array([2.0, -2.0]))
    update_particle(p, p.position.copy(), Benchmark.RASTRIGIN, -5.0, 5.0, w=1.0, c1=0.0, c2=0.0)
    assert np.array_equal(p.position, [5.0, -5.0])
    assert np.array_equal(p.velocity, [2.0, -2.0])


def test_velocity_resampled_not_clipped():
    p = _particle(np.array([0.0, 0.0, 0.0]), np.array([1.9, 0.1, 0.5]), seed=3)
    update_particle(p, p.position.copy(), Benchmark.RASTRIGIN, -1.0, 1.0, w=10.0, c1=0.0, c2=0.0)
    # 19.0 and 5.0 violate |v| <= 2 and are redrawn from U(-2, 2); 1.0 is kept
    ref = RandomSource(3)
    ref.random(3)
    ref.random(3)
    redrawn = ref.uniform(-2.0, 2.0, 2)
    assert np.allclose(p.velocity, [redrawn[0], 1.0, redrawn[1]])
    assert np.all(np.abs(p.velocity) <= 2.0)


def test_in_range_velocity_follows_formula():
    p = _particle(np.array([0.0, 0.0]), np.array([0.1, -0.1]))
    update_particle(p, p.position.copy(), Benchmark.RASTRIGIN, -1.0, 1.0, w=0.5, c1=1.0, c2=1.0)
    # pbest == gbest == x, so only the inertia term remains
    assert np.allclose(p.velocity, [0.05, -0.05])
    assert np.allclose(p.position, [0.05, -0.05])


def test_fitness_tracks_current_position():
    swarm = initialize_swarm("schwefel", 3, 20, -500.0, 500.0, seed=5)
    gx = swarm.gbest.position.copy()
    for p in swarm:
        update_particle(p, gx, swarm.benchmark, swarm.xmin, swarm.xmax)
        assert p.fitness == swarm.benchmark(p.position)
        assert p.pbest_fitness <= p.fitness
        assert p.pbest_fitness == swarm.benchmark(p.pbest)


def test_pbest_only_moves_on_strict_improvement():
    p = _particle(np.array([0.0, 0.0]), np.array([0.0, 0.0]))
    before = p.pbest.copy()
    # from the global minimum every move is worse (or equal)
    update_particle(p, np.array([0.0, 0.0]), Benchmark.RASTRIGIN, -5.12, 5.12, w=1.0)
    assert np.array_equal(p.pbest, before)
    assert p.pbest_fitness == 0.0


def test_pbest_fitness_monotone():
    swarm = initialize_swarm("rastrigin", 2, 30, -5.12, 5.12, seed=8)
    prev = np.array([p.pbest_fitness for p in swarm])
    for _ in range(25):
        gx = swarm.gbest.position.copy()
        for p in swarm:
            update_particle(p, gx, swarm.benchmark, swarm.xmin, swarm.xmax)
        cur = np.array([p.pbest_fitness for p in swarm])
        assert np.all(cur <= prev)
        prev = cur
