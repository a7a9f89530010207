"""Structural compare - policy-driven structural equality for test assertions."""

from __future__ import annotations

from structural_compare.api import (
    are_properties_equal,
    assert_properties_equal,
    assert_sequences_equal,
    assert_sequences_equivalent,
)
from structural_compare.comparator import StructuralComparator, compare
from structural_compare.diagnostics import (
    ListSink,
    StreamSink,
    get_output_sink,
    set_output_sink,
)
from structural_compare.integrations import (
    match_equal_sequence,
    match_equal_sequence_by_properties,
    match_equivalent_sequence,
    match_equivalent_sequence_by_properties,
    match_property_values,
)
from structural_compare.policy import DEFAULT_POLICY, ComparisonMode, ComparisonPolicy
from structural_compare.result import ComparisonResult, InequalityRecord
from structural_compare.sequences import (
    CollectionComparator,
    compare_equivalent,
    compare_equivalent_by_properties,
    compare_ordered,
    compare_ordered_by_properties,
    diff_ordered,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "DEFAULT_POLICY",
    "CollectionComparator",
    "ComparisonMode",
    "ComparisonPolicy",
    "ComparisonResult",
    "InequalityRecord",
    "ListSink",
    "StreamSink",
    "StructuralComparator",
    "are_properties_equal",
    "assert_properties_equal",
    "assert_sequences_equal",
    "assert_sequences_equivalent",
    "compare",
    "compare_equivalent",
    "compare_equivalent_by_properties",
    "compare_ordered",
    "compare_ordered_by_properties",
    "diff_ordered",
    "get_output_sink",
    "match_equal_sequence",
    "match_equal_sequence_by_properties",
    "match_equivalent_sequence",
    "match_equivalent_sequence_by_properties",
    "match_property_values",
    "set_output_sink",
]
