"""Public API functions for structural-compare.

Boolean and asserting entry points over ``StructuralComparator`` and
``CollectionComparator``.  Each call builds a fresh comparator so no state
is carried between calls.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from structural_compare.comparator import StructuralComparator
from structural_compare.sequences import CollectionComparator, ItemPredicate

if TYPE_CHECKING:
    from structural_compare.policy import ComparisonPolicy
    from structural_compare.protocols import OutputSink

__all__ = [
    "are_properties_equal",
    "assert_properties_equal",
    "assert_sequences_equal",
    "assert_sequences_equivalent",
]


def are_properties_equal(
    expected: Any,
    actual: Any,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> bool:
    """Return True when the two values are structurally equal under ``policy``.

    Both ``None`` is equal; exactly one ``None`` is not.  On mismatch a
    report is written to the diagnostic sink.
    """
    comparator = StructuralComparator(policy=policy, sink=sink)
    return comparator.compare(expected, actual).equal


def assert_properties_equal(
    expected: Any,
    actual: Any,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> None:
    """Assert that two values are structurally equal under ``policy``.

    Passes when both are ``None``.  When ``expected`` is ``None`` the actual
    value must be ``None`` too, and vice versa.

    Raises:
        AssertionError: With the mismatching paths and reasons in the message;
            the full report goes to the diagnostic sink.
    """
    if expected is None:
        if actual is not None:
            msg = f"Expected None but got {type(actual).__name__} instance."
            raise AssertionError(msg)
        return
    if actual is None:
        msg = f"Expected {type(expected).__name__} instance but got None."
        raise AssertionError(msg)

    result = StructuralComparator(policy=policy, sink=sink).compare(expected, actual)
    if not result.equal:
        details = "\n".join(
            f"  {record.path or '(root)'}: {record.reason}"
            for record in result.inequalities
        )
        raise AssertionError(
            "Properties of items are not equal. See test output for details.\n"
            + details
        )


def assert_sequences_equal(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    sink: OutputSink | None = None,
) -> None:
    """Assert that two sequences hold equal items in the same order.

    Raises:
        AssertionError: When ``CollectionComparator.compare_ordered`` fails.
    """
    if not CollectionComparator(sink).compare_ordered(sequence1, sequence2, item_equal):
        msg = "Collections are not equal. See test output for details."
        raise AssertionError(msg)


def assert_sequences_equivalent(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    strict: bool = False,
    sink: OutputSink | None = None,
) -> None:
    """Assert that two sequences hold the same items in any order.

    Raises:
        AssertionError: When ``CollectionComparator.compare_equivalent`` fails.
    """
    if not CollectionComparator(sink).compare_equivalent(
        sequence1, sequence2, item_equal, strict=strict
    ):
        msg = "Collections are not equivalent. See test output for details."
        raise AssertionError(msg)
