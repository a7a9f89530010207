"""Tests for bipartite item matching.

Covers the boolean match matrix built from an item predicate, the maximum
matching over it, and ``has_perfect_matching`` for multisets.
"""

from __future__ import annotations

import numpy as np

from structural_compare.matcher import (
    has_perfect_matching,
    match_matrix,
    maximum_matching,
)


def _equal(x: object, y: object) -> bool:
    return x == y


# ---------------------------------------------------------------------------
# Match matrix
# ---------------------------------------------------------------------------


class TestMatchMatrix:
    def test_true_where_items_match(self) -> None:
        matches = match_matrix([1, 2], [2, 1, 1], _equal)
        assert matches.shape == (2, 3)
        assert matches.dtype == bool
        assert matches[0].tolist() == [False, True, True]
        assert matches[1].tolist() == [True, False, False]

    def test_predicate_receives_items_in_order(self) -> None:
        seen: list[tuple[str, str]] = []

        def predicate(x: str, y: str) -> bool:
            seen.append((x, y))
            return False

        match_matrix(["a"], ["b", "c"], predicate)
        assert seen == [("a", "b"), ("a", "c")]


# ---------------------------------------------------------------------------
# Maximum matching
# ---------------------------------------------------------------------------


class TestMaximumMatching:
    def test_nothing_matches(self) -> None:
        assert maximum_matching(np.zeros((2, 2), dtype=bool)) == []

    def test_empty_matrix(self) -> None:
        assert maximum_matching(np.zeros((0, 0), dtype=bool)) == []

    def test_diagonal(self) -> None:
        matches = np.array([[True, False], [False, True]])
        assert maximum_matching(matches) == [(0, 0), (1, 1)]

    def test_contended_column_pairs_one_row(self) -> None:
        # Both rows can only use column 0.
        matches = np.array([[True, False], [True, False]])
        pairs = maximum_matching(matches)
        assert len(pairs) == 1
        assert pairs[0][1] == 0

    def test_avoids_greedy_dead_end(self) -> None:
        # Greedy row 0 -> column 0 would leave row 1 unmatched.
        matches = np.array([[True, True], [True, False]])
        assert sorted(maximum_matching(matches)) == [(0, 1), (1, 0)]

    def test_pairs_sit_on_matching_cells(self) -> None:
        rng = np.random.default_rng(7)
        matches = rng.random((30, 30)) < 0.2
        pairs = maximum_matching(matches)
        assert all(matches[row, col] for row, col in pairs)
        assert len({row for row, _ in pairs}) == len(pairs)
        assert len({col for _, col in pairs}) == len(pairs)


# ---------------------------------------------------------------------------
# Perfect matching
# ---------------------------------------------------------------------------


class TestHasPerfectMatching:
    def test_permutation(self) -> None:
        assert has_perfect_matching([1, 2, 2], [2, 1, 2], _equal)

    def test_unbalanced_duplicates(self) -> None:
        assert not has_perfect_matching([1, 1], [1, 2], _equal)

    def test_length_mismatch(self) -> None:
        assert not has_perfect_matching([1], [1, 1], _equal)

    def test_empty(self) -> None:
        assert has_perfect_matching([], [], _equal)

    def test_non_transitive_predicate(self) -> None:
        # Not transitive: 1 is close to 2 and 2 to 3, but 1 is not close to 3.
        def close(x: int, y: int) -> bool:
            return abs(x - y) <= 1

        assert has_perfect_matching([1, 3], [2, 3], close)
        assert not has_perfect_matching([1, 1], [2, 5], close)
