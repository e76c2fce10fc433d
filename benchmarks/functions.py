from __future__ import annotations
from enum import Enum
from typing import List, Optional, Tuple, Union
import numpy as np

from optimizer.errors import UnknownFunction, InvalidDimensionForFunction


def booth(x: np.ndarray) -> float:
    """
    Booth function (2D).
    Global minimum f(1, 3) = 0. Bounds typically [-10, 10]^2.
    """
    x = np.asarray(x, dtype=float)
    return float((x[0] + 2 * x[1] - 7) ** 2 + (2 * x[0] + x[1] - 5) ** 2)


def rastrigin(x: np.ndarray) -> float:
    """
    Rastrigin function, A = 10.
    Global minimum at x = 0, f = 0. Bounds typically [-5.12, 5.12]^D.
    """
    x = np.asarray(x, dtype=float)
    return float(10.0 * x.size + np.sum(x * x - 10.0 * np.cos(2 * np.pi * x)))


def holder_table(x: np.ndarray) -> float:
    """
    Holder table function (2D). Four identical minima f = -19.2085 at
    (+-8.05502, +-9.66459). Bounds typically [-10, 10]^2.
    """
    x = np.asarray(x, dtype=float)
    r = np.sqrt(x[0] ** 2 + x[1] ** 2)
    return float(-abs(np.sin(x[0]) * np.cos(x[1]) * np.exp(abs(1.0 - r / np.pi))))


def eggholder(x: np.ndarray) -> float:
    """
    Eggholder function (2D), many local minima.
    Global minimum f(512, 404.2319) = -959.6407. Bounds typically [-512, 512]^2.
    """
    x = np.asarray(x, dtype=float)
    a = x[1] + 47.0
    return float(-a * np.sin(np.sqrt(abs(x[0] / 2.0 + a)))
                 - x[0] * np.sin(np.sqrt(abs(x[0] - a))))


def schwefel(x: np.ndarray) -> float:
    """
    Schwefel function.
    Global minimum f = 0 at x_i = 420.9687. Bounds typically [-500, 500]^D.
    """
    x = np.asarray(x, dtype=float)
    return float(418.9829 * x.size - np.sum(x * np.sin(np.sqrt(np.abs(x)))))


class Benchmark(Enum):
    # (name, formula, domain, f_min, minimiser (one coordinate repeated, or the full point), fixed_dim)
    BOOTH = ("booth", booth, (-10.0, 10.0), 0.0, (1.0, 3.0), 2)
    RASTRIGIN = ("rastrigin", rastrigin, (-5.12, 5.12), 0.0, (0.0,), None)
    HOLDER_TABLE = ("holder_table", holder_table, (-10.0, 10.0), -19.2085, (8.05502, 9.66459), 2)
    EGGHOLDER = ("eggholder", eggholder, (-512.0, 512.0), -959.6407, (512.0, 404.2319), 2)
    SCHWEFEL = ("schwefel", schwefel, (-500.0, 500.0), 0.0, (420.9687,), None)

    def __init__(self, label, fn, domain, f_min, x_min, fixed_dim):
        self.label = label
        self.fn = fn
        self.domain: Tuple[float, float] = domain
        self.f_min: float = f_min
        self._x_min = x_min
        self.fixed_dim: Optional[int] = fixed_dim

    def __str__(self):
        return self.label

    def __call__(self, x: np.ndarray) -> float:
        return self.fn(x)

    def check_dim(self, dim: int) -> None:
        if self.fixed_dim is not None and dim != self.fixed_dim:
            raise InvalidDimensionForFunction(self.label, dim, self.fixed_dim)

    def argmin(self, dim: int) -> np.ndarray:
        """A known global minimiser for the given dimension."""
        self.check_dim(dim)
        if self.fixed_dim is None:
            return np.full(dim, self._x_min[0], dtype=float)
        return np.array(self._x_min, dtype=float)


_BY_NAME = {b.label: b for b in Benchmark}


def available() -> List[str]:
    return list(_BY_NAME)


def resolve(name: Union[str, Benchmark]) -> Benchmark:
    if isinstance(name, Benchmark):
        return name
    try:
        return _BY_NAME[name]
    except (KeyError, TypeError):
        raise UnknownFunction(name, available()) from None


def evaluate(name: Union[str, Benchmark], x: np.ndarray) -> float:
    return resolve(name)(x)
