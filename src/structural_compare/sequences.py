"""CollectionComparator: ordered and order-independent sequence equality.

Two modes:

- ordered:    same length, items equal position by position.
- equivalent: same length, every item of the first sequence has a counterpart
  in the second.  Duplicates are accepted only when the first sequence holds
  as many items matching the same predicate as the second does.  This
  duplicate-count check is a heuristic; ``strict=True`` replaces it with an
  exact bipartite matching, which also handles predicates that are not true
  equivalence relations.

Item equality is a caller-supplied two-argument predicate.  It defaults to
``==``; the ``*_by_properties`` variants use the ``StructuralComparator``.

Every failure writes one line naming the cause, followed by both rendered
sequences, to the diagnostic sink.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from structural_compare.comparator import StructuralComparator
from structural_compare.diagnostics import (
    report_inequalities,
    report_sequences,
    resolve_sink,
    write_line,
)
from structural_compare.matcher import has_perfect_matching
from structural_compare.paths import ROOT
from structural_compare.result import ComparisonResult, InequalityRecord, Reason

if TYPE_CHECKING:
    from structural_compare.policy import ComparisonPolicy
    from structural_compare.protocols import OutputSink

__all__ = [
    "CollectionComparator",
    "ItemPredicate",
    "compare_equivalent",
    "compare_equivalent_by_properties",
    "compare_ordered",
    "compare_ordered_by_properties",
    "diff_ordered",
]

ItemPredicate = Callable[[Any, Any], bool]

_PREFIX = "CollectionComparator - "


def _default_equal(item1: Any, item2: Any) -> bool:
    return bool(item1 == item2)


def _under_item(index: int, path: str) -> str:
    """Qualify an item-relative path with its index: ``"Id"`` -> ``"[1].Id"``."""
    prefix = str(ROOT.item(index))
    if not path:
        return prefix
    if path.startswith("["):
        return prefix + path
    return f"{prefix}.{path}"


class CollectionComparator:
    """Compares two sequences as ordered lists or as multisets.

    Example::

        from structural_compare import CollectionComparator

        cmp = CollectionComparator()
        cmp.compare_ordered([1, 2], [1, 2])        # True
        cmp.compare_ordered([1, 2], [2, 1])        # False
        cmp.compare_equivalent([1, 2], [2, 1])     # True
        cmp.compare_equivalent([1, 2, 2], [1, 2])  # False
    """

    def __init__(self, sink: OutputSink | None = None) -> None:
        """Initialise the comparator.

        Args:
            sink: Diagnostic sink for failure reports.  When None, the
                process-wide sink (or stdout) is used at report time.
        """
        self._sink = sink

    # ------------------------------------------------------------------
    # Predicate-based comparison
    # ------------------------------------------------------------------

    def compare_ordered(
        self,
        sequence1: Iterable[Any] | None,
        sequence2: Iterable[Any] | None,
        item_equal: ItemPredicate | None = None,
    ) -> bool:
        """Return True when both sequences hold equal items in the same order.

        Args:
            sequence1: First sequence, or None.
            sequence2: Second sequence, or None.
            item_equal: Item predicate.  Defaults to ``==``.

        Returns:
            True when both are None, or both have the same length and every
            position matches.  Stops at the first mismatching position.
        """
        if sequence1 is None and sequence2 is None:
            return True
        if sequence1 is None or sequence2 is None:
            self._write(f"{_PREFIX}Collections unequal due to one item being null.")
            return False

        one, two = list(sequence1), list(sequence2)
        predicate = item_equal if item_equal is not None else _default_equal

        are_equal = self._check_sizes(one, two)
        if are_equal:
            for index, (item1, item2) in enumerate(zip(one, two, strict=True)):
                if not predicate(item1, item2):
                    self._write_item_mismatch(index)
                    are_equal = False
                    break

        if not are_equal:
            report_sequences(one, two, self._sink)
        return are_equal

    def compare_equivalent(
        self,
        sequence1: Iterable[Any] | None,
        sequence2: Iterable[Any] | None,
        item_equal: ItemPredicate | None = None,
        strict: bool = False,
    ) -> bool:
        """Return True when both sequences hold the same items in any order.

        Args:
            sequence1: First sequence, or None.
            sequence2: Second sequence, or None.
            item_equal: Item predicate.  Defaults to ``==``.
            strict: Use exact bipartite matching instead of the duplicate-count
                heuristic.

        Returns:
            True when both are None, or both have the same length and every
            item of ``sequence1`` is accounted for in ``sequence2``.
        """
        if sequence1 is None and sequence2 is None:
            return True
        if sequence1 is None or sequence2 is None:
            self._write(f"{_PREFIX}Collections unequal due to one item being null.")
            return False

        one, two = list(sequence1), list(sequence2)
        predicate = item_equal if item_equal is not None else _default_equal

        are_equal = self._check_sizes(one, two)
        if are_equal:
            if strict:
                are_equal = self._matches_exactly(one, two, predicate)
            else:
                are_equal = self._matches_by_duplicate_count(one, two, predicate)

        if not are_equal:
            report_sequences(one, two, self._sink)
        return are_equal

    # ------------------------------------------------------------------
    # Property-based comparison
    # ------------------------------------------------------------------

    def compare_ordered_by_properties(
        self,
        sequence1: Iterable[Any] | None,
        sequence2: Iterable[Any] | None,
        policy: ComparisonPolicy | None = None,
    ) -> bool:
        """Ordered comparison of items field by field."""
        return self.diff_ordered(sequence1, sequence2, policy).equal

    def compare_equivalent_by_properties(
        self,
        sequence1: Iterable[Any] | None,
        sequence2: Iterable[Any] | None,
        policy: ComparisonPolicy | None = None,
        strict: bool = False,
    ) -> bool:
        """Order-independent comparison of items field by field.

        Candidate pairs that do not match are expected while searching for a
        counterpart, so item-level mismatch reports are not written.  Policy
        paths are relative to the item, exactly as for a single ``compare``.
        """
        comparator = StructuralComparator(policy=policy, sink=self._sink)
        return self.compare_equivalent(
            sequence1,
            sequence2,
            lambda x, y: comparator.compare_at(x, y).equal,
            strict=strict,
        )

    def diff_ordered(
        self,
        sequence1: Iterable[Any] | None,
        sequence2: Iterable[Any] | None,
        policy: ComparisonPolicy | None = None,
    ) -> ComparisonResult:
        """Ordered, property-based comparison returning the full mismatch report.

        Items are compared field by field even when their type overrides
        ``__eq__``.  Item paths are index-qualified (``"[1].Id"``).  The walk
        stops at the first unequal item.  A length mismatch, or exactly one ``None``
        sequence, yields one record at the root path ``""``.

        Args:
            sequence1: Expected sequence, or None.
            sequence2: Actual sequence, or None.
            policy: Item comparison rules.  Paths are relative to the item
                (``"Name"``), as for a single ``compare``; the ``"[i]"``
                prefix is added to the reported paths afterwards.

        Returns:
            A fresh ``ComparisonResult``.
        """
        if sequence1 is None and sequence2 is None:
            return ComparisonResult(equal=True)
        if sequence1 is None or sequence2 is None:
            self._write(f"{_PREFIX}Collections unequal due to one item being null.")
            return ComparisonResult.from_records(
                [InequalityRecord("", sequence1, sequence2, Reason.NULL_MISMATCH)]
            )

        one, two = list(sequence1), list(sequence2)
        if not self._check_sizes(one, two):
            reason = Reason.count_mismatch(len(one), len(two))
            result = ComparisonResult.from_records(
                [InequalityRecord("", one, two, reason)]
            )
            report_sequences(one, two, self._sink)
            return result

        comparator = StructuralComparator(policy=policy, sink=self._sink)
        ignored: list[str] = []
        for index, (item1, item2) in enumerate(zip(one, two, strict=True)):
            item_result = comparator.compare_at(item1, item2)
            ignored.extend(_under_item(index, p) for p in item_result.ignored_paths)
            if not item_result.equal:
                self._write_item_mismatch(index)
                records = [
                    replace(record, path=_under_item(index, record.path))
                    for record in item_result.inequalities
                ]
                result = ComparisonResult.from_records(records, ignored)
                report_inequalities(one, two, result, self._sink)
                return result

        return ComparisonResult.from_records([], ignored)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write(self, message: str) -> None:
        write_line(resolve_sink(self._sink), message)

    def _write_item_mismatch(self, index: int) -> None:
        self._write(
            f"{_PREFIX}Collections unequal due items at index {index} being unequal."
        )

    def _check_sizes(self, one: list[Any], two: list[Any]) -> bool:
        if len(one) == len(two):
            return True
        self._write(
            f"{_PREFIX}Collections unequal due different sizes. "
            f"Collection 1 size: {len(one)} Collection 2 size: {len(two)}"
        )
        return False

    def _matches_by_duplicate_count(
        self, one: list[Any], two: list[Any], predicate: ItemPredicate
    ) -> bool:
        for item in one:
            matching = sum(1 for other in two if predicate(item, other))
            if matching == 0:
                self._write(
                    f"{_PREFIX}Collections unequal due to no matching item found in "
                    "second collection."
                )
                return False
            if matching > 1:
                expected = sum(1 for other in one if predicate(item, other))
                if expected != matching:
                    self._write(
                        f"{_PREFIX}Collections unequal due to more than the expected "
                        "number of matching items found in second collection. Items "
                        f"matching condition in first collection: {expected}, Items "
                        f"matching condition in second collection: {matching}"
                    )
                    return False
        return True

    def _matches_exactly(
        self, one: list[Any], two: list[Any], predicate: ItemPredicate
    ) -> bool:
        if has_perfect_matching(one, two, predicate):
            return True
        self._write(
            f"{_PREFIX}Collections unequal due to no one-to-one pairing of items "
            f"between the two collections."
        )
        return False


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------


def compare_ordered(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    sink: OutputSink | None = None,
) -> bool:
    """See ``CollectionComparator.compare_ordered``."""
    return CollectionComparator(sink).compare_ordered(sequence1, sequence2, item_equal)


def compare_equivalent(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    item_equal: ItemPredicate | None = None,
    strict: bool = False,
    sink: OutputSink | None = None,
) -> bool:
    """See ``CollectionComparator.compare_equivalent``."""
    return CollectionComparator(sink).compare_equivalent(
        sequence1, sequence2, item_equal, strict=strict
    )


def compare_ordered_by_properties(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> bool:
    """See ``CollectionComparator.compare_ordered_by_properties``."""
    return CollectionComparator(sink).compare_ordered_by_properties(
        sequence1, sequence2, policy
    )


def compare_equivalent_by_properties(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    policy: ComparisonPolicy | None = None,
    strict: bool = False,
    sink: OutputSink | None = None,
) -> bool:
    """See ``CollectionComparator.compare_equivalent_by_properties``."""
    return CollectionComparator(sink).compare_equivalent_by_properties(
        sequence1, sequence2, policy, strict=strict
    )


def diff_ordered(
    sequence1: Iterable[Any] | None,
    sequence2: Iterable[Any] | None,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> ComparisonResult:
    """See ``CollectionComparator.diff_ordered``."""
    return CollectionComparator(sink).diff_ordered(sequence1, sequence2, policy)
