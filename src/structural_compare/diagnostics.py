"""Diagnostic output: sink selection, value rendering and mismatch reports.

Diagnostics are a side effect of a failed comparison.  They never change a
comparison's outcome, so every function here is exception-proof:

- Sink failures (for example a closed output stream) are swallowed.
- Values that cannot be rendered as compact JSON are pretty-printed, and
  values that cannot be pretty-printed render as a fixed placeholder.

Sink resolution, first match wins:

1. the sink passed explicitly to a comparator,
2. the process-wide sink set with ``set_output_sink()`` (last writer wins),
3. ``StreamSink()``, which writes to the current ``sys.stdout``.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import fractions
import json
import logging
import pprint
import sys
import uuid
from collections.abc import Iterable, Mapping, Set
from typing import IO, TYPE_CHECKING, Any

import numpy as np

from structural_compare.introspection import KeyValuePair, describe_fields

if TYPE_CHECKING:
    from structural_compare.protocols import OutputSink
    from structural_compare.result import ComparisonResult

__all__ = [
    "UNRENDERABLE",
    "ListSink",
    "StreamSink",
    "get_output_sink",
    "render_value",
    "report_inequalities",
    "report_sequences",
    "resolve_sink",
    "set_output_sink",
    "write_line",
]

logger = logging.getLogger(__name__)

UNRENDERABLE = "Unable to determine object values."

_process_sink: OutputSink | None = None

# Rendered with str() when json cannot encode them.
_STRINGIFIED = (
    datetime.timedelta,
    uuid.UUID,
    decimal.Decimal,
    fractions.Fraction,
    complex,
)


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class StreamSink:
    """Writes lines to a text stream.

    Args:
        stream: Target stream.  When None, ``sys.stdout`` is looked up on every
            write so that output capture (pytest ``capsys``) sees the lines.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream

    def write_line(self, message: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(message + "\n")


class ListSink:
    """Collects lines in memory."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write_line(self, message: str) -> None:
        self.lines.append(message)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def clear(self) -> None:
        self.lines.clear()


def set_output_sink(sink: OutputSink | None) -> None:
    """Install the process-wide diagnostic sink.  ``None`` restores stdout output.

    The sink is a single shared reference: setting it from one test is
    visible to every other caller in the process.
    """
    global _process_sink
    _process_sink = sink


def get_output_sink() -> OutputSink | None:
    """Return the process-wide sink, or None when none is installed."""
    return _process_sink


def resolve_sink(sink: OutputSink | None = None) -> OutputSink:
    """Return ``sink`` if given, else the process-wide sink, else a stdout sink."""
    if sink is not None:
        return sink
    current = _process_sink
    return current if current is not None else StreamSink()


def write_line(sink: OutputSink, message: str = "") -> None:
    """Write one line to ``sink``, swallowing any failure of the sink."""
    try:
        sink.write_line(message)
    except Exception:
        logger.debug("Diagnostic sink %r failed; line dropped", sink, exc_info=True)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def _to_jsonable(value: Any) -> Any:
    """``json.dumps`` fallback encoder for values json does not know."""
    if isinstance(value, KeyValuePair):
        return {"key": value.key, "value": value.value}
    if isinstance(value, enum.Enum):
        return str(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, _STRINGIFIED):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return repr(bytes(value))
    if isinstance(value, Set):
        return list(value)
    if isinstance(value, Mapping):
        return {str(k): v for k, v in value.items()}
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    fields = describe_fields(value)
    if fields:
        return {name: field_value for name, field_value, _ in fields}
    if isinstance(value, Iterable) and not isinstance(value, type):
        return list(value)
    msg = f"Object of type {type(value).__name__} is not renderable"
    raise TypeError(msg)


def render_value(value: Any) -> str:
    """Render ``value`` for a diagnostic report.  Never raises.

    Tries compact JSON first, then ``pprint.pformat``, then the fixed
    ``UNRENDERABLE`` text.  Enum members render as ``str(member)`` and
    mapping entries as an indented ``{"key": ..., "value": ...}`` object.
    """
    try:
        if isinstance(value, enum.Enum):
            return str(value)
        if isinstance(value, KeyValuePair):
            return json.dumps(
                {"key": value.key, "value": value.value}, default=_to_jsonable, indent=2
            )
        return json.dumps(value, default=_to_jsonable, separators=(",", ":"))
    except Exception:
        logger.debug(
            "Compact rendering failed for %s", type(value).__name__, exc_info=True
        )

    try:
        return pprint.pformat(value)
    except Exception:
        logger.debug(
            "Verbose rendering failed for %s", type(value).__name__, exc_info=True
        )
        return UNRENDERABLE


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def _write_item_values(sink: OutputSink, label: str, item: Any) -> None:
    write_line(sink, f"{label}: ")
    write_line(sink, render_value(item))


def report_inequalities(
    expected: Any,
    actual: Any,
    result: ComparisonResult,
    sink: OutputSink | None = None,
) -> None:
    """Write the mismatched paths, reasons, values and ignored paths of ``result``.

    Args:
        expected: Top-level expected value, rendered at the end of the report.
        actual:   Top-level actual value, rendered at the end of the report.
        result:   The failed comparison.
        sink:     Explicit sink; resolved with ``resolve_sink`` when None.
    """
    out = resolve_sink(sink)
    write_line(out, "Items unequal due to having unequal properties.")
    write_line(out, "Unequal properties:")
    write_line(out)
    for record in result.inequalities:
        write_line(out, record.path or "(root)")
        write_line(out, "---------------")
        write_line(out, "Reason: ")
        write_line(out, record.reason)
        write_line(out, "Expected Value: ")
        write_line(out, render_value(record.expected_value))
        write_line(out, "Actual Value:")
        write_line(out, render_value(record.actual_value))
        write_line(out)

    if result.ignored_paths:
        write_line(out)
        write_line(out, "Ignored properties:")
        for path in result.ignored_paths:
            write_line(out, path)

    write_line(out)
    _write_item_values(out, "Expected", expected)
    _write_item_values(out, "Actual", actual)


def report_sequences(
    sequence1: Any,
    sequence2: Any,
    sink: OutputSink | None = None,
) -> None:
    """Write the rendered form of two whole sequences."""
    out = resolve_sink(sink)
    _write_item_values(out, "Collection one", sequence1)
    _write_item_values(out, "Collection two", sequence2)
