"""PropertyPath: structured form of the dotted/bracketed property path strings.

Tests address properties with strings such as ``"Parent.ChildList[].Name"``:

- Field names are separated by ``.``
- ``[3]`` addresses one item of a collection
- ``[]`` is a wildcard standing in for any collection index

Path strings are parsed once into a ``PropertyPath`` (a tuple of
``FieldSegment`` / ``IndexSegment`` values) so that policy matching is an
exact, segment-wise operation rather than string manipulation.  Parsing is
memoised in a process-wide LRU cache guarded by a lock.

Example::

    path = parse_path("Orders[3].Lines[].Sku")
    str(path.normalized())            # "Orders[].Lines[].Sku"
    parse_path("Orders").is_prefix_of(path)   # True
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass

from cachetools import LRUCache, cached

__all__ = [
    "ROOT",
    "FieldSegment",
    "IndexSegment",
    "PropertyPath",
    "parse_path",
]

# One token per match: a field name, an index (possibly empty), or a separator.
_TOKEN = re.compile(r"(?P<name>[^.\[\]]+)|\[(?P<index>\d*)\]|(?P<dot>\.)")


@dataclass(frozen=True, slots=True)
class FieldSegment:
    """A named property step."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class IndexSegment:
    """A collection item step.  ``index=None`` is the ``[]`` wildcard."""

    index: int | None = None

    def __str__(self) -> str:
        return "[]" if self.index is None else f"[{self.index}]"


Segment = FieldSegment | IndexSegment


@dataclass(frozen=True, slots=True)
class PropertyPath:
    """Immutable, hashable sequence of path segments.

    The empty path (``ROOT``) addresses the top-level value and renders as
    ``""``.
    """

    segments: tuple[Segment, ...] = ()

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self.segments:
            if isinstance(segment, FieldSegment) and parts:
                parts.append(".")
            parts.append(str(segment))
        return "".join(parts)

    def __len__(self) -> int:
        return len(self.segments)

    def child(self, name: str) -> PropertyPath:
        """Return the path of property ``name`` beneath this path."""
        return PropertyPath((*self.segments, FieldSegment(name)))

    def item(self, index: int | None) -> PropertyPath:
        """Return the path of the collection item at ``index`` beneath this path."""
        return PropertyPath((*self.segments, IndexSegment(index)))

    def normalized(self) -> PropertyPath:
        """Replace every concrete index with the ``[]`` wildcard."""
        if not any(
            isinstance(s, IndexSegment) and s.index is not None for s in self.segments
        ):
            return self
        return PropertyPath(
            tuple(
                IndexSegment() if isinstance(s, IndexSegment) else s
                for s in self.segments
            )
        )

    def matches(self, other: PropertyPath) -> bool:
        """Exact match once both paths are index-normalised."""
        return self.normalized() == other.normalized()

    def is_prefix_of(self, other: PropertyPath) -> bool:
        """Segment-wise prefix test on index-normalised paths.

        ``"A.B"`` is a prefix of ``"A.B"``, ``"A.B.C"`` and ``"A.B[2]"`` but
        not of ``"A.Bc"``.
        """
        mine = self.normalized().segments
        theirs = other.normalized().segments
        return len(mine) <= len(theirs) and theirs[: len(mine)] == mine


ROOT = PropertyPath()


@cached(cache=LRUCache(maxsize=1024), lock=threading.Lock())
def parse_path(text: str) -> PropertyPath:
    """Parse a path string into a ``PropertyPath``.

    Args:
        text: Dotted/bracketed path, e.g. ``"Parent.ChildList[].Name"``.
            The empty string is the root path.

    Returns:
        The parsed path.  Concrete indices are preserved; call
        ``normalized()`` to wildcard them.

    Raises:
        ValueError: If the string is not a well-formed path (empty field
            names, ``..``, a trailing ``.``, non-numeric indices, or a field
            name directly following another step without a ``.``).
    """
    segments: list[Segment] = []
    pos = 0
    previous = "start"
    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            msg = f"Malformed property path {text!r} at offset {pos}"
            raise ValueError(msg)
        if match.group("name") is not None:
            if previous not in ("start", "dot"):
                msg = f"Missing '.' before {match.group('name')!r} in path {text!r}"
                raise ValueError(msg)
            segments.append(FieldSegment(match.group("name")))
            previous = "name"
        elif match.group("dot") is not None:
            if previous not in ("name", "index"):
                msg = f"Unexpected '.' at offset {pos} in path {text!r}"
                raise ValueError(msg)
            previous = "dot"
        else:
            if previous == "dot":
                msg = f"Index directly after '.' at offset {pos} in path {text!r}"
                raise ValueError(msg)
            raw = match.group("index")
            segments.append(IndexSegment(int(raw) if raw else None))
            previous = "index"
        pos = match.end()

    if previous == "dot":
        msg = f"Property path {text!r} ends with '.'"
        raise ValueError(msg)
    return PropertyPath(tuple(segments))
