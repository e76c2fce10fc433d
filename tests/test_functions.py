import numpy as np
import pytest

from benchmarks.functions import (Benchmark, available, booth, eggholder, evaluate,
                                  holder_table, rastrigin, resolve, schwefel)
from optimizer.errors import InvalidDimensionForFunction, UnknownFunction


def test_booth_minimum():
    assert booth(np.array([1.0, 3.0])) == 0.0


@pytest.mark.parametrize("dim", [1, 2, 5, 10])
def test_rastrigin_zero(dim):
    assert rastrigin(np.zeros(dim)) == 0.0


@pytest.mark.parametrize("x", [(8.05502, 9.66459), (-8.05502, 9.66459),
                               (8.05502, -9.66459), (-8.05502, -9.66459)])
def test_holder_table_four_minima(x):
    assert np.isclose(holder_table(np.array(x)), -19.2085, atol=1e-3)


def test_eggholder_minimum():
    assert np.isclose(eggholder(np.array([512.0, 404.2319])), -959.6407, atol=1e-3)


@pytest.mark.parametrize("dim", [1, 2, 3, 10])
def test_schwefel_minimum_any_dim(dim):
    assert np.isclose(schwefel(np.full(dim, 420.9687)), 0.0, atol=1e-3)


@pytest.mark.parametrize("bench", list(Benchmark))
def test_known_minimum_per_benchmark(bench):
    dim = bench.fixed_dim or 4
    assert np.isclose(bench(bench.argmin(dim)), bench.f_min, atol=1e-3)


def test_minimum_is_lower_than_random_points():
    rng = np.random.default_rng(3)
    for bench in Benchmark:
        dim = bench.fixed_dim or 3
        lo, hi = bench.domain
        for x in rng.uniform(lo, hi, size=(50, dim)):
            assert bench(x) >= bench.f_min - 1e-3


def test_dispatch_by_name():
    x = np.array([0.5, -1.5])
    assert evaluate("booth", x) == booth(x)
    assert evaluate(Benchmark.RASTRIGIN, x) == rastrigin(x)
    assert resolve("holder_table") is Benchmark.HOLDER_TABLE
    assert available() == ["booth", "rastrigin", "holder_table", "eggholder", "schwefel"]


@pytest.mark.parametrize("name", ["griewank", "Booth", "", None])
def test_unknown_function(name):
    with pytest.raises(UnknownFunction):
        resolve(name)
    with pytest.raises(ValueError):
        evaluate(name, np.zeros(2))


@pytest.mark.parametrize("name", ["booth", "holder_table", "eggholder"])
def test_two_dimensional_only(name):
    bench = resolve(name)
    bench.check_dim(2)
    with pytest.raises(InvalidDimensionForFunction) as exc:
        bench.check_dim(3)
    assert exc.value.required == 2 and exc.value.dim == 3


def test_any_dimension_allowed():
    Benchmark.RASTRIGIN.check_dim(7)
    Benchmark.SCHWEFEL.check_dim(1)
