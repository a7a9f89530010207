"""Bipartite matching of sequence items for exact multiset equivalence.

The item predicate is evaluated once per pair into a boolean matrix, and
scipy's ``linear_sum_assignment`` picks the assignment that pairs the most
matching items.  A perfect matching exists when that assignment pairs every
item.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import numpy as np
from scipy.optimize import linear_sum_assignment  # type: ignore[import-untyped]

__all__ = ["has_perfect_matching", "match_matrix", "maximum_matching"]


def match_matrix(
    items1: Sequence[Any],
    items2: Sequence[Any],
    item_equal: Callable[[Any, Any], bool],
) -> np.ndarray:
    """Boolean ``(m, n)`` matrix, True where ``item_equal(items1[i], items2[j])``."""
    matches = np.zeros((len(items1), len(items2)), dtype=bool)
    for i, item1 in enumerate(items1):
        for j, item2 in enumerate(items2):
            matches[i, j] = bool(item_equal(item1, item2))
    return matches


def maximum_matching(matches: np.ndarray) -> list[tuple[int, int]]:
    """Pair as many rows with matching columns as possible.

    Args:
        matches: Boolean matrix from ``match_matrix``.

    Returns:
        ``(row, column)`` pairs, each row and column used at most once, all
        on True cells.  Empty when nothing matches.
    """
    if not matches.any():
        return []
    row_ind, col_ind = linear_sum_assignment(matches.astype(float), maximize=True)
    return [
        (int(row), int(col))
        for row, col in zip(row_ind, col_ind, strict=True)
        if matches[row, col]
    ]


def has_perfect_matching(
    items1: Sequence[Any],
    items2: Sequence[Any],
    item_equal: Callable[[Any, Any], bool],
) -> bool:
    """Return True when every item of ``items1`` has its own match in ``items2``.

    Both sequences must have the same length for a perfect matching to exist.
    """
    if len(items1) != len(items2):
        return False
    if not items1:
        return True
    pairs = maximum_matching(match_matrix(items1, items2, item_equal))
    return len(pairs) == len(items1)
