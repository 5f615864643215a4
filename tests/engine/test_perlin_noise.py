from __future__ import annotations

import numpy as np
import pytest

from engine.core.noise import PerlinNoise, permutation_table
from engine.core.random import SeededRandom


def test_permutation_table_shape() -> None:
    p = permutation_table(SeededRandom(1))
    assert p.shape == (512,)
    assert sorted(p[:256].tolist()) == list(range(256))
    assert np.array_equal(p[:256], p[256:])


def test_same_seed_same_noise() -> None:
    a = PerlinNoise(SeededRandom(7))
    b = PerlinNoise(SeededRandom(7))
    pts = [(0.1, 0.2), (1.7, 3.3), (10.5, -2.25)]
    assert [a.noise2d(x, y) for x, y in pts] == [b.noise2d(x, y) for x, y in pts]


def test_noise_is_bounded_and_zero_on_lattice() -> None:
    n = PerlinNoise(SeededRandom(8))
    xs = np.linspace(0, 8, 33)
    g = n.grid(xs, xs)
    assert g.shape == (33, 33)
    assert np.all(np.abs(g) <= 1.5)
    assert n.noise3d(3.0, 4.0, 5.0) == pytest.approx(0.0, abs=1e-9)
    assert g[4, 4] == pytest.approx(n.noise2d(xs[4], xs[4]))


def test_requires_rng() -> None:
    with pytest.raises(ValueError):
        PerlinNoise(None)  # type: ignore[arg-type]
