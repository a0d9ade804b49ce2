from __future__ import annotations

import random
from collections import Counter

import pytest

from quiz_trainer.sampler import EmptyPoolError, Sampler


def test_draws_every_id_exactly_once_then_fails() -> None:
    ids = [3, 7, 11, 42, 99]
    sampler = Sampler(ids, rng=random.Random(7))

    drawn = [sampler.draw_one() for _ in ids]

    assert sorted(drawn) == sorted(ids)
    assert sampler.is_empty()
    assert len(sampler) == 0
    with pytest.raises(EmptyPoolError):
        sampler.draw_one()


def test_remaining_shrinks_by_one_per_draw() -> None:
    sampler = Sampler(range(4), rng=random.Random(0))

    counts = []
    while not sampler.is_empty():
        sampler.draw_one()
        counts.append(sampler.remaining)

    assert counts == [3, 2, 1, 0]


def test_empty_pool_is_empty_immediately() -> None:
    sampler = Sampler([])

    assert sampler.is_empty()
    with pytest.raises(EmptyPoolError):
        sampler.draw_one()


def test_rejects_duplicate_ids() -> None:
    with pytest.raises(ValueError):
        Sampler([1, 2, 1])


def test_does_not_mutate_source_sequence() -> None:
    ids = [1, 2, 3]
    sampler = Sampler(ids, rng=random.Random(3))
    sampler.draw_one()

    assert ids == [1, 2, 3]


def test_first_draw_is_uniform() -> None:
    rng = random.Random(2024)
    ids = [10, 20, 30, 40]
    trials = 20_000

    firsts = Counter(Sampler(ids, rng=rng).draw_one() for _ in range(trials))

    expected = trials / len(ids)
    for ident in ids:
        assert abs(firsts[ident] - expected) < expected * 0.06


def test_later_draws_stay_uniform_over_remaining() -> None:
    rng = random.Random(99)
    ids = [1, 2, 3]
    trials = 18_000

    seconds: Counter[int] = Counter()
    for _ in range(trials):
        sampler = Sampler(ids, rng=rng)
        if sampler.draw_one() != 1:
            continue
        seconds[sampler.draw_one()] += 1

    total = sum(seconds.values())
    assert set(seconds) == {2, 3}
    for ident in (2, 3):
        assert abs(seconds[ident] / total - 0.5) < 0.04
