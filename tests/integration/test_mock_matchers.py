"""Integration tests for the ``unittest.mock`` argument matchers.

Each matcher stands in for an argument in ``assert_called_with`` style
assertions and runs a structural or collection comparison when mock compares
the recorded call against the expected one.
"""

from __future__ import annotations

from unittest import mock

import pytest

from structural_compare import (
    ComparisonPolicy,
    ListSink,
    match_equal_sequence,
    match_equal_sequence_by_properties,
    match_equivalent_sequence,
    match_equivalent_sequence_by_properties,
    match_property_values,
)
from structural_compare.integrations import ArgumentMatcher

# ---------------------------------------------------------------------------
# Sample types
# ---------------------------------------------------------------------------


class Order:
    def __init__(self, number: int, customer: str, created_at: str) -> None:
        self.number = number
        self.customer = customer
        self.created_at = created_at


IGNORE_CREATED = ComparisonPolicy(ignore_paths={"created_at"})


@pytest.fixture
def sink() -> ListSink:
    return ListSink()


# ---------------------------------------------------------------------------
# Single values
# ---------------------------------------------------------------------------


class TestMatchPropertyValues:
    def test_matches_structurally_equal_argument(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save(Order(1, "ann", "10:00"))
        repository.save.assert_called_once_with(
            match_property_values(Order(1, "ann", "10:00"), sink=sink)
        )

    def test_policy_is_applied(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save(Order(1, "ann", "10:00"))
        repository.save.assert_called_once_with(
            match_property_values(Order(1, "ann", "11:30"), IGNORE_CREATED, sink)
        )

    def test_mismatch_fails_assertion_and_reports(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save(Order(1, "ann", "10:00"))
        with pytest.raises(AssertionError):
            repository.save.assert_called_once_with(
                match_property_values(Order(2, "ann", "10:00"), sink=sink)
            )
        assert "number" in sink.lines

    def test_works_as_keyword_argument(self, sink: ListSink) -> None:
        notifier = mock.Mock()
        notifier.send(order=Order(1, "ann", "10:00"), urgent=True)
        notifier.send.assert_called_with(
            order=match_property_values(Order(1, "ann", "10:00"), sink=sink),
            urgent=True,
        )

    def test_works_inside_call_lists(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save(Order(1, "ann", "10:00"))
        repository.save(Order(2, "bob", "10:05"))
        repository.save.assert_has_calls(
            [
                mock.call(match_property_values(Order(1, "ann", "10:00"), sink=sink)),
                mock.call(match_property_values(Order(2, "bob", "10:05"), sink=sink)),
            ]
        )


# ---------------------------------------------------------------------------
# Sequences
# ---------------------------------------------------------------------------


class TestSequenceMatchers:
    def test_equal_sequence(self, sink: ListSink) -> None:
        matcher = match_equal_sequence([1, 2], sink=sink)
        assert matcher == [1, 2]
        assert matcher == (1, 2)
        assert matcher != [2, 1]

    def test_equal_sequence_with_predicate(self, sink: ListSink) -> None:
        matcher = match_equal_sequence(["a"], lambda x, y: x == y.lower(), sink=sink)
        assert matcher == ["A"]

    def test_strings_are_not_sequence_arguments(self, sink: ListSink) -> None:
        assert match_equal_sequence(["a", "b"], sink=sink) != "ab"

    def test_none_matches_none(self, sink: ListSink) -> None:
        assert match_equal_sequence(None, sink=sink) == None  # noqa: E711
        assert match_equal_sequence([1], sink=sink) != None  # noqa: E711

    def test_equivalent_sequence(self, sink: ListSink) -> None:
        matcher = match_equivalent_sequence([1, 2], sink=sink)
        assert matcher == [2, 1]
        assert matcher != [1, 3]

    def test_equivalent_sequence_strict(self, sink: ListSink) -> None:
        assert match_equivalent_sequence([1, 1], sink=sink) == [1, 2]
        assert match_equivalent_sequence([1, 1], strict=True, sink=sink) != [1, 2]

    def test_expected_iterable_is_materialised_once(self, sink: ListSink) -> None:
        matcher = match_equal_sequence((x for x in [1, 2]), sink=sink)
        assert matcher == [1, 2]
        assert matcher == [1, 2]

    def test_equal_sequence_by_properties(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save_all([Order(1, "ann", "10:00"), Order(2, "bob", "10:05")])
        repository.save_all.assert_called_once_with(
            match_equal_sequence_by_properties(
                [Order(1, "ann", "09:00"), Order(2, "bob", "09:05")],
                ComparisonPolicy(ignore_paths={"created_at"}),
                sink,
            )
        )

    def test_equivalent_sequence_by_properties(self, sink: ListSink) -> None:
        repository = mock.Mock()
        repository.save_all([Order(1, "ann", "10:00"), Order(2, "bob", "10:05")])
        repository.save_all.assert_called_once_with(
            match_equivalent_sequence_by_properties(
                [Order(2, "bob", "10:05"), Order(1, "ann", "10:00")], sink=sink
            )
        )

    def test_by_properties_mismatch(self, sink: ListSink) -> None:
        matcher = match_equal_sequence_by_properties(
            [Order(1, "ann", "10:00")], sink=sink
        )
        assert matcher != [Order(1, "ann", "10:01")]
        assert "[0].created_at" in sink.lines


# ---------------------------------------------------------------------------
# ArgumentMatcher
# ---------------------------------------------------------------------------


class TestArgumentMatcher:
    def test_repr_describes_expectation(self) -> None:
        matcher = match_equal_sequence([1, 2])
        assert repr(matcher) == "<match_equal_sequence [1,2]>"

    def test_predicate_drives_equality(self) -> None:
        matcher = ArgumentMatcher("even", lambda value: value % 2 == 0)
        assert matcher == 4
        assert matcher != 3

    def test_matchers_are_unhashable(self) -> None:
        with pytest.raises(TypeError):
            hash(match_property_values(Order(1, "ann", "10:00")))
