"""StructuralComparator: recursive, policy-driven property comparison.

Given two values presumed to share a runtime type, decides whether they are
"the same" for the purposes of a test and explains why not.

Strategy selection, per property, first match wins:

1. both ``None``                 -> equal
2. reference-only path           -> ``is``
3. exactly one ``None``          -> unequal
4. value types (numbers, enums, dates, numpy values, sets, ...) -> ``==``
5. values of unrelated types     -> unequal
6. ordered types (define ``__lt__``) -> neither orders before the other
7. types overriding ``__eq__``   -> ``==``
8. otherwise, with ``recurse_sub_properties`` and within the depth ceiling,
   sequences are compared item by item and other objects field by field;
   without recursion (or beyond the ceiling) -> ``==``

Items drawn from parallel sequences get steps 2, 6 and 7 applied to the item
as a whole before their fields are compared.

Cycles: an ``(expected, actual)`` pair that is already being compared higher
up the stack is treated as equal when it is reached again, so differences
along a cycle are reported once, where they are first encountered.  The depth
ceiling (default 15) still bounds deep acyclic graphs.

Every call builds its own traversal state; a comparator instance holds only
its immutable policy and its sink and is safe to share between threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from structural_compare.diagnostics import report_inequalities
from structural_compare.introspection import (
    describe_fields,
    has_custom_equality,
    is_ordered_comparable,
    is_sequence,
    is_value_type,
    ordered_equal,
    same_kind,
    sequence_items,
    values_equal,
)
from structural_compare.paths import ROOT, PropertyPath
from structural_compare.policy import DEFAULT_POLICY, ComparisonPolicy
from structural_compare.result import ComparisonResult, InequalityRecord, Reason

if TYPE_CHECKING:
    from structural_compare.protocols import OutputSink

__all__ = ["StructuralComparator", "compare"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Outcome:
    """Result of comparing one node, before it is frozen into a ComparisonResult.

    ``reason`` is set when the node is unequal but produced no records of its
    own (null or type mismatch, field-less object); the caller turns it into
    a single record at the node's path.
    """

    equal: bool = True
    inequalities: list[InequalityRecord] = field(default_factory=list)
    ignored: list[str] = field(default_factory=list)
    reason: str | None = None


def _shallow(reason: str) -> _Outcome:
    return _Outcome(equal=False, reason=reason)


class _Traversal:
    """Per-call traversal state: the policy and the pairs on the current stack."""

    def __init__(self, policy: ComparisonPolicy) -> None:
        self._policy = policy
        self._active: set[tuple[int, int]] = set()

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self, expected: Any, actual: Any, path: PropertyPath) -> ComparisonResult:
        outcome = self._compare_node(expected, actual, 1, path)
        records = outcome.inequalities
        if not outcome.equal and not records:
            reason = outcome.reason or Reason.DEFAULT_EQUALITY
            records = [InequalityRecord(str(path), expected, actual, reason)]
        return ComparisonResult.from_records(records, outcome.ignored)

    # ------------------------------------------------------------------
    # Node comparison
    # ------------------------------------------------------------------

    def _compare_node(
        self,
        expected: Any,
        actual: Any,
        depth: int,
        path: PropertyPath,
        item: bool = False,
    ) -> _Outcome:
        """Compare two values found at ``path``.

        Args:
            expected, actual: Values at the same structural position.
            depth: Recursion level of this call; the top-level call is 1.
            path: Path of the values; children extend it.
            item: True when the values are items drawn from parallel sequences.

        Returns:
            An ``_Outcome`` whose records carry fully qualified paths.
        """
        if expected is None and actual is None:
            return _Outcome()
        if expected is None or actual is None:
            return _shallow(Reason.NULL_MISMATCH)

        expected_type = type(expected)
        if is_value_type(expected_type) and is_value_type(type(actual)):
            if values_equal(expected, actual):
                return _Outcome()
            return _shallow(Reason.VALUE_TYPE)
        if expected_type is not type(actual):
            return _shallow(Reason.TYPE_MISMATCH)

        if item:
            as_item = self._compare_whole_item(expected, actual, path)
            if as_item is not None:
                return as_item

        key = (id(expected), id(actual))
        if key in self._active:
            logger.debug("Cycle re-entered at %r; treating pair as equal", str(path))
            return _Outcome()

        fields = describe_fields(expected, actual)
        if not fields:
            if values_equal(expected, actual):
                return _Outcome()
            return _shallow(Reason.DEFAULT_EQUALITY)

        outcome = _Outcome()
        self._active.add(key)
        try:
            for name, expected_value, actual_value in fields:
                field_path = path.child(name)
                if self._policy.is_excluded(field_path):
                    outcome.ignored.append(str(field_path))
                    continue
                self._compare_field(
                    expected_value, actual_value, depth, field_path, outcome
                )
        finally:
            self._active.discard(key)

        outcome.equal = not outcome.inequalities
        return outcome

    def _compare_whole_item(
        self, expected: Any, actual: Any, path: PropertyPath
    ) -> _Outcome | None:
        """Whole-item strategies for a sequence item; None when none applies."""
        item_type = type(expected)
        if self._policy.is_reference_only(path):
            equal, reason = expected is actual, Reason.REFERENCE
        elif is_ordered_comparable(item_type):
            equal, reason = ordered_equal(expected, actual), Reason.ORDERED
        elif has_custom_equality(item_type):
            equal, reason = bool(expected == actual), Reason.CUSTOM_EQUALITY
        else:
            return None

        if equal:
            return _Outcome()
        return _Outcome(
            equal=False,
            inequalities=[InequalityRecord(str(path), expected, actual, reason)],
        )

    def _compare_field(
        self,
        expected: Any,
        actual: Any,
        depth: int,
        path: PropertyPath,
        outcome: _Outcome,
    ) -> None:
        """Classify one property and record any mismatch into ``outcome``."""
        reason: str | None = None

        if expected is None and actual is None:
            return
        if self._policy.is_reference_only(path):
            if expected is not actual:
                reason = Reason.REFERENCE
        elif (expected is None) != (actual is None):
            reason = Reason.NULL_MISMATCH
        elif is_value_type(type(expected)) and is_value_type(type(actual)):
            if not values_equal(expected, actual):
                reason = Reason.VALUE_TYPE
        elif not same_kind(expected, actual):
            reason = Reason.TYPE_MISMATCH
        elif is_ordered_comparable(type(expected)):
            if not ordered_equal(expected, actual):
                reason = Reason.ORDERED
        elif has_custom_equality(type(expected)):
            if not expected == actual:
                reason = Reason.CUSTOM_EQUALITY
        elif self._policy.recurse_sub_properties and depth <= self._policy.max_depth:
            if is_sequence(expected) and is_sequence(actual):
                self._compare_sequences(expected, actual, depth, path, outcome)
            else:
                sub = self._compare_node(expected, actual, depth + 1, path)
                self._merge(sub, path, expected, actual, outcome)
            return
        else:
            if self._policy.recurse_sub_properties:
                logger.debug(
                    "Depth ceiling %d reached at %r; falling back to ==",
                    self._policy.max_depth,
                    str(path),
                )
            if not values_equal(expected, actual):
                reason = Reason.DEFAULT_EQUALITY

        if reason is not None:
            outcome.inequalities.append(
                InequalityRecord(str(path), expected, actual, reason)
            )

    def _compare_sequences(
        self,
        expected: Any,
        actual: Any,
        depth: int,
        path: PropertyPath,
        outcome: _Outcome,
    ) -> None:
        expected_items = sequence_items(expected)
        actual_items = sequence_items(actual)

        if len(expected_items) != len(actual_items):
            outcome.inequalities.append(
                InequalityRecord(
                    str(path),
                    expected,
                    actual,
                    Reason.count_mismatch(len(expected_items), len(actual_items)),
                )
            )
            return

        for index, (expected_item, actual_item) in enumerate(
            zip(expected_items, actual_items, strict=True)
        ):
            item_path = path.item(index)
            sub = self._compare_node(
                expected_item, actual_item, depth + 1, item_path, item=True
            )
            self._merge(sub, item_path, expected_item, actual_item, outcome)

    @staticmethod
    def _merge(
        sub: _Outcome,
        path: PropertyPath,
        expected: Any,
        actual: Any,
        outcome: _Outcome,
    ) -> None:
        """Fold a nested outcome into ``outcome``; detail-less failures add a record."""
        outcome.ignored.extend(sub.ignored)
        if sub.equal:
            return
        if sub.inequalities:
            outcome.inequalities.extend(sub.inequalities)
        else:
            outcome.inequalities.append(
                InequalityRecord(
                    str(path), expected, actual, sub.reason or Reason.DEFAULT_EQUALITY
                )
            )


class StructuralComparator:
    """Compares two values property by property under a ``ComparisonPolicy``.

    The comparator holds only immutable configuration.  Each ``compare()``
    call builds fresh traversal state and a fresh ``ComparisonResult``.

    Example::

        from structural_compare import ComparisonPolicy, StructuralComparator

        cmp = StructuralComparator(ComparisonPolicy(ignore_paths={"UpdatedAt"}))
        result = cmp.compare(expected_order, actual_order)
        result.equal            # False
        result.inequal_paths    # ["Lines[1].Quantity"]
        result.ignored_paths    # ("UpdatedAt",)
    """

    def __init__(
        self,
        policy: ComparisonPolicy | None = None,
        sink: OutputSink | None = None,
    ) -> None:
        """Initialise the comparator.

        Args:
            policy: Comparison rules.  Defaults to ``DEFAULT_POLICY`` (INCLUSIVE,
                nothing ignored, no recursion) when None.
            sink:   Diagnostic sink for mismatch reports.  When None, the
                process-wide sink (or stdout) is used at report time.
        """
        self._policy = policy if policy is not None else DEFAULT_POLICY
        self._sink = sink

    @property
    def policy(self) -> ComparisonPolicy:
        return self._policy

    @property
    def sink(self) -> OutputSink | None:
        return self._sink

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compare(self, expected: Any, actual: Any) -> ComparisonResult:
        """Compare two values and report any mismatch to the diagnostic sink.

        Args:
            expected: The expected value.
            actual:   The actual value.

        Returns:
            A ``ComparisonResult``.  A ``None``/non-``None`` or type mismatch
            of the top-level values yields a single record at path ``""``.
        """
        result = self.compare_at(expected, actual)
        if not result.equal:
            report_inequalities(expected, actual, result, self._sink)
        return result

    def are_equal(self, expected: Any, actual: Any) -> bool:
        """Boolean form of ``compare()``, suitable as an item predicate."""
        return self.compare(expected, actual).equal

    def compare_at(
        self,
        expected: Any,
        actual: Any,
        path: PropertyPath = ROOT,
    ) -> ComparisonResult:
        """Compare two values found at ``path`` without writing diagnostics.

        Args:
            expected, actual: Values to compare.
            path: Path the values live at; prefixes every record and ignored
                path.  Defaults to the root.

        Returns:
            A fresh ``ComparisonResult``.
        """
        return _Traversal(self._policy).run(expected, actual, path)


def compare(
    expected: Any,
    actual: Any,
    policy: ComparisonPolicy | None = None,
    sink: OutputSink | None = None,
) -> ComparisonResult:
    """Compare two values with a fresh ``StructuralComparator``."""
    return StructuralComparator(policy=policy, sink=sink).compare(expected, actual)
