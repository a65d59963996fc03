from fractions import Fraction

import numpy as np
import pytest

from symexpr.expressions import Add, Div, Mul, Negate, Pow, const, var

NAMES = ("a", "b", "c")


def random_expr(rng: np.random.Generator, depth: int):
    """Random tree over a, b, c with small nonzero integer constants."""
    if depth == 0 or rng.random() < 0.25:
        if rng.random() < 0.6:
            return var(str(rng.choice(NAMES)))
        return const(int(rng.choice([-3, -2, -1, 1, 2, 3])))
    kind = int(rng.integers(6))
    if kind == 0:
        return Add([random_expr(rng, depth - 1) for _ in range(int(rng.integers(2, 4)))])
    if kind == 1:
        return Mul([random_expr(rng, depth - 1) for _ in range(int(rng.integers(2, 4)))])
    if kind == 2:
        return Div(random_expr(rng, depth - 1), random_expr(rng, depth - 1))
    if kind == 3:
        return Pow(random_expr(rng, depth - 1), int(rng.integers(-2, 3)))
    if kind == 4:
        return Negate(random_expr(rng, depth - 1))
    return random_expr(rng, depth - 1) - random_expr(rng, depth - 1)


def random_binding(rng: np.random.Generator, names=NAMES):
    return {name: Fraction(int(rng.integers(-4, 5)), int(rng.choice([1, 1, 2]))) for name in names}


@pytest.fixture
def make_expr():
    return random_expr


@pytest.fixture
def make_binding():
    return random_binding
