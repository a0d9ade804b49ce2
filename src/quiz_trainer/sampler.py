"""Uniform sampling without replacement over a pool of question ids."""

from __future__ import annotations

import random
from typing import Iterable

__all__ = ["EmptyPoolError", "Sampler"]


class EmptyPoolError(RuntimeError):
    """Raised when drawing from a pool that has no identifiers left."""


class Sampler:
    """Mutable pool of identifiers drawn one at a time, never twice.

    Each draw picks uniformly among the identifiers still in the pool, so the
    full sequence of draws is a uniformly random permutation revealed one
    element at a time.
    """

    def __init__(
        self, ids: Iterable[int], *, rng: random.Random | None = None
    ) -> None:
        pool = list(ids)
        if len(set(pool)) != len(pool):
            raise ValueError("Sampler pool must not contain duplicate ids.")
        self._pool = pool
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._pool)

    @property
    def remaining(self) -> int:
        return len(self._pool)

    def is_empty(self) -> bool:
        return not self._pool

    def draw_one(self) -> int:
        if not self._pool:
            raise EmptyPoolError("Cannot draw from an empty pool.")
        index = self._rng.randrange(len(self._pool))
        # Pool order carries no meaning; swap the pick to the tail and pop.
        self._pool[index], self._pool[-1] = self._pool[-1], self._pool[index]
        return self._pool.pop()
