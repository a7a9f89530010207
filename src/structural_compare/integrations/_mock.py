"""Argument matchers for ``unittest.mock`` call assertions.

Each factory returns an object whose ``__eq__`` runs a structural or
collection comparison, so it can stand in for an argument in
``assert_called_with`` / ``assert_any_call`` / ``call(...)`` comparisons:

    repo.save.assert_called_once_with(match_property_values(expected_order))
    repo.save_all.assert_called_with(match_equivalent_sequence_by_properties(orders))

A failed match writes the usual mismatch report to the diagnostic sink.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from structural_compare.comparator import StructuralComparator
from structural_compare.diagnostics import render_value
from structural_compare.sequences import CollectionComparator, ItemPredicate

if TYPE_CHECKING:
    from structural_compare.policy import ComparisonPolicy
    from structural_compare.protocols import OutputSink

__all__ = [
    "ArgumentMatcher",
    "match_equal_sequence",
    "match_equal_sequence_by_properties",
    "match_equivalent_sequence",
    "match_equivalent_sequence_by_properties",
    "match_property_values",
]


class ArgumentMatcher:
    """Equality adapter: ``matcher == argument`` evaluates ``predicate(argument)``."""

    def __init__(self, description: str, predicate: Callable[[Any], bool]) -> None:
        self._description = description
        self._predicate = predicate

    def __eq__(self, other: object) -> bool:
        return self._predicate(other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<{self._description}>"


def _describe(name: str, expected: Any) -> str:
    return f"{name} {render_value(expected)}"


def _is_sequence_argument(actual: Any) -> bool:
    return actual is None or (
        isinstance(actual, Iterable) and not isinstance(actual, (str, bytes))
    )


def _sequence_matcher(
    name: str,
    expected: Iterable[Any] | None,
    check: Callable[[list[Any] | None, Any], bool],
) -> ArgumentMatcher:
    items = None if expected is None else list(expected)
    return ArgumentMatcher(
        _describe(name, items),
        lambda actual: _is_sequence_argument(actual) and check(items, actual),
    )


def match_property_values(
    expected: Any,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> ArgumentMatcher:
    """Match an argument structurally equal to ``expected`` under ``policy``."""
    comparator = StructuralComparator(policy=policy, sink=sink)
    return ArgumentMatcher(
        _describe("match_property_values", expected),
        lambda actual: comparator.compare(expected, actual).equal,
    )


def match_equal_sequence(
    expected: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    sink: OutputSink | None = None,
) -> ArgumentMatcher:
    """Match a sequence argument holding equal items in the same order."""
    comparator = CollectionComparator(sink)
    return _sequence_matcher(
        "match_equal_sequence",
        expected,
        lambda items, actual: comparator.compare_ordered(items, actual, item_equal),
    )


def match_equal_sequence_by_properties(
    expected: Iterable[Any] | None,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> ArgumentMatcher:
    """Match a sequence argument whose items are structurally equal, in order."""
    comparator = CollectionComparator(sink)
    return _sequence_matcher(
        "match_equal_sequence_by_properties",
        expected,
        lambda items, actual: comparator.compare_ordered_by_properties(
            items, actual, policy
        ),
    )


def match_equivalent_sequence(
    expected: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    strict: bool = False,
    sink: OutputSink | None = None,
) -> ArgumentMatcher:
    """Match a sequence argument holding the same items in any order."""
    comparator = CollectionComparator(sink)
    return _sequence_matcher(
        "match_equivalent_sequence",
        expected,
        lambda items, actual: comparator.compare_equivalent(
            items, actual, item_equal, strict=strict
        ),
    )


def match_equivalent_sequence_by_properties(
    expected: Iterable[Any] | None,
    policy: ComparisonPolicy | None = None,
    strict: bool = False,
    sink: OutputSink | None = None,
) -> ArgumentMatcher:
    """Match a sequence argument whose items are structurally equal, in any order."""
    comparator = CollectionComparator(sink)
    return _sequence_matcher(
        "match_equivalent_sequence_by_properties",
        expected,
        lambda items, actual: comparator.compare_equivalent_by_properties(
            items, actual, policy, strict=strict
        ),
    )
