"""Weighted random selection over counted candidates."""

import random
from bisect import bisect_right
from collections.abc import Sequence
from itertools import accumulate


def weighted_choice[T](
    candidates: Sequence[tuple[T, int]], rng: random.Random | None = None
) -> T:
    """
    Pick one candidate with probability proportional to its count.

    Draws a uniform integer in ``[0, total)`` and locates it in the running
    sums of the counts, so each draw costs O(len(candidates)) regardless of
    how large the counts are.

    :param candidates: ``(item, count)`` pairs with positive counts.
    :param rng: Random source; the module-level generator when ``None``.
    :raises ValueError: If ``candidates`` is empty or holds a non-positive count.
    """
    if not candidates:
        raise ValueError("cannot sample from an empty candidate set")
    if any(count < 1 for _, count in candidates):
        raise ValueError("candidate counts must be positive")

    cumulative = list(accumulate(count for _, count in candidates))
    draw = (rng or random).randrange(cumulative[-1])
    return candidates[bisect_right(cumulative, draw)][0]


__all__ = ["weighted_choice"]
