"""OutputSink Protocol for the diagnostic output extension point.

Defines the structural interface every diagnostic sink must satisfy.
Users can plug in their own sink without inheriting from any base class;
any class with a conformant ``write_line`` method passes ``isinstance``
checks.

Example::

    from structural_compare.protocols import OutputSink

    class LoggerSink:
        def __init__(self, logger):
            self._logger = logger

        def write_line(self, message: str) -> None:
            self._logger.info(message)

    assert isinstance(LoggerSink(logging.getLogger()), OutputSink)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

__all__ = ["OutputSink"]


@runtime_checkable
class OutputSink(Protocol):
    """Structural protocol for diagnostic sinks.

    ``write_line`` receives one line of text without a trailing newline.
    Sinks may raise; the comparators swallow sink failures so that a broken
    output channel never changes an assertion's outcome.
    """

    def write_line(self, message: str) -> None: ...
