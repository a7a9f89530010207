"""pytest plugin for structural-compare.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from structural_compare import api, diagnostics
from structural_compare.diagnostics import ListSink


@pytest.fixture(scope="session")
def assert_properties_equal() -> Any:
    """Fixture that returns a callable structural equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to ``api.assert_properties_equal``, which builds a fresh
    comparator per call).

    Usage in tests::

        def test_order_saved(assert_properties_equal):
            assert_properties_equal(expected_order, saved_order)

        def test_ignores_timestamps(assert_properties_equal):
            policy = ComparisonPolicy(ignore_paths={"CreatedAt"})
            assert_properties_equal(expected, actual, policy=policy)

    Returns:
        A callable ``_assert(expected, actual, policy=None) -> None`` that
        raises ``AssertionError`` listing the mismatching paths.
    """

    def _assert(expected: Any, actual: Any, policy: Any = None) -> None:
        api.assert_properties_equal(expected, actual, policy=policy)

    return _assert


@pytest.fixture(scope="session")
def assert_sequences_equal() -> Any:
    """Fixture returning ``_assert(seq1, seq2, item_equal=None)`` (ordered)."""

    def _assert(sequence1: Any, sequence2: Any, item_equal: Any = None) -> None:
        api.assert_sequences_equal(sequence1, sequence2, item_equal)

    return _assert


@pytest.fixture(scope="session")
def assert_sequences_equivalent() -> Any:
    """Fixture returning ``_assert(seq1, seq2, item_equal=None, strict=False)``."""

    def _assert(
        sequence1: Any, sequence2: Any, item_equal: Any = None, strict: bool = False
    ) -> None:
        api.assert_sequences_equivalent(sequence1, sequence2, item_equal, strict=strict)

    return _assert


@pytest.fixture
def comparison_output() -> Iterator[ListSink]:
    """Route diagnostic output of the current test into a ``ListSink``.

    Installs the sink process-wide for the duration of the test and restores
    the previously installed sink on teardown.  Tests running concurrently in
    the same process share the process-wide sink.

    Usage in tests::

        def test_report(comparison_output):
            are_properties_equal(a, b)
            assert "Description" in comparison_output.text
    """
    previous = diagnostics.get_output_sink()
    sink = ListSink()
    diagnostics.set_output_sink(sink)
    try:
        yield sink
    finally:
        diagnostics.set_output_sink(previous)
