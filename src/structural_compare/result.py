"""InequalityRecord and ComparisonResult dataclasses for comparison output.

This module provides the result types produced by every structural
comparison.  Both are frozen: a result is built once per call and never
mutated or shared afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["ComparisonResult", "InequalityRecord", "Reason"]


class Reason:
    """Human-readable mismatch reasons attached to inequality records."""

    REFERENCE = "reference equality failed"
    NULL_MISMATCH = "null mismatch"
    VALUE_TYPE = "value-type equality failed"
    ORDERED = "ordered comparison non-zero"
    CUSTOM_EQUALITY = "custom equality failed"
    DEFAULT_EQUALITY = "default equality failed"
    TYPE_MISMATCH = "type mismatch"

    @staticmethod
    def count_mismatch(expected_count: int, actual_count: int) -> str:
        return (
            f"sequence length mismatch - expected count: {expected_count} "
            f"actual count: {actual_count}"
        )


@dataclass(frozen=True, slots=True)
class InequalityRecord:
    """One leaf-level mismatch.

    Attributes:
        path: Fully qualified path of the mismatching value, with concrete
            collection indices (``"Lines[2].Sku"``).  ``""`` is the top-level
            value.
        expected_value: The value found on the expected side.
        actual_value: The value found on the actual side.
        reason: Why the two values were judged unequal (see ``Reason``).
    """

    path: str
    expected_value: Any
    actual_value: Any
    reason: str


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Outcome of one structural comparison.

    Attributes:
        equal: True when no inequality was found.  Always equal to
            ``not inequalities``.
        inequalities: Mismatches in traversal order: root first, properties in
            declaration order, collection items in positional order.
        ignored_paths: Fully qualified paths left out by the active policy.
            Populated whether or not the comparison succeeded.
    """

    equal: bool
    inequalities: tuple[InequalityRecord, ...] = ()
    ignored_paths: tuple[str, ...] = ()

    @classmethod
    def from_records(
        cls,
        inequalities: list[InequalityRecord] | tuple[InequalityRecord, ...],
        ignored_paths: list[str] | tuple[str, ...] = (),
    ) -> ComparisonResult:
        """Build a result whose ``equal`` flag is derived from ``inequalities``."""
        return cls(
            equal=not inequalities,
            inequalities=tuple(inequalities),
            ignored_paths=tuple(dict.fromkeys(ignored_paths)),
        )

    def __bool__(self) -> bool:
        return self.equal

    @property
    def inequal_paths(self) -> list[str]:
        """Paths of all recorded inequalities, in traversal order."""
        return [record.path for record in self.inequalities]
