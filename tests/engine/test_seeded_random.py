from __future__ import annotations

import pytest

from engine.core.random import MAX_SEED, SeededRandom, generate_seed


def test_same_seed_same_sequence() -> None:
    a, b = SeededRandom(42), SeededRandom(42)
    seq_a = [a.random(), a.rnd_range(1, 10), a.nrand(), a.choose("abc")]
    seq_b = [b.random(), b.rnd_range(1, 10), b.nrand(), b.choose("abc")]
    assert seq_a == seq_b
    assert SeededRandom(43).random() != SeededRandom(42).random()


def test_rnd_range_integer_bounds_are_inclusive_ints() -> None:
    r = SeededRandom(1)
    values = {r.rnd_range(1, 3) for _ in range(300)}
    assert values == {1, 2, 3}
    assert all(isinstance(v, int) for v in values)


def test_rnd_range_float_bounds_and_order() -> None:
    r = SeededRandom(2)
    for _ in range(200):
        v = r.rnd_range(0.8, 0.2)
        assert 0.2 <= v < 0.8
        assert isinstance(v, float)


def test_choose_empty_raises() -> None:
    with pytest.raises(ValueError):
        SeededRandom(1).choose([])


def test_permutation_covers_range() -> None:
    assert sorted(SeededRandom(4).permutation(5).tolist()) == [0, 1, 2, 3, 4]
    assert SeededRandom(4).permutation(8).tolist() == SeededRandom(4).permutation(8).tolist()


def test_generate_seed_range() -> None:
    for _ in range(20):
        s = generate_seed()
        assert 1 <= s < MAX_SEED
