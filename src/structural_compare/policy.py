"""ComparisonPolicy and ComparisonMode for structural comparison configuration.

ComparisonPolicy is a frozen (immutable) dataclass holding the rules that
decide which properties take part in a comparison and how.  ComparisonMode
selects between comparing everything except ignored paths (INCLUSIVE) and
comparing only included paths (EXCLUSIVE).

Path strings are parsed once, when the policy is built, into
``PropertyPath`` values; all matching is done on the parsed form.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto

from structural_compare.paths import PropertyPath, parse_path

__all__ = [
    "DEFAULT_POLICY",
    "MAX_RECURSION_DEPTH",
    "ComparisonMode",
    "ComparisonPolicy",
]

MAX_RECURSION_DEPTH = 15


class ComparisonMode(StrEnum):
    """Which properties a comparison considers.

    - INCLUSIVE: every discovered property except those in ``ignore_paths``.
    - EXCLUSIVE: only properties on the way to, at, or beneath an entry of
      ``include_paths``.
    """

    INCLUSIVE = auto()
    EXCLUSIVE = auto()


@dataclass(frozen=True, slots=True)
class ComparisonPolicy:
    """Immutable comparison policy.

    Attributes:
        recurse_sub_properties: When True, properties that have no direct
            comparison strategy (no value semantics, no ordering, no custom
            ``__eq__``) are unpacked into their own properties.  Sequences are
            compared item by item.  Default False.
        mode: INCLUSIVE or EXCLUSIVE.  Default INCLUSIVE.
        ignore_paths: Paths skipped in INCLUSIVE mode, e.g.
            ``{"Description", "Lines[].CreatedAt"}``.
        include_paths: Paths compared in EXCLUSIVE mode.  An entry includes
            the property it names, its ancestors and all of its descendants.
        reference_only_paths: Paths compared by identity (``is``).  Overrides
            every other rule, including recursion.
        max_depth: Recursion ceiling.  Beyond it, properties fall back to
            ``==``.  Default 15.

    ``None`` is accepted for any path collection and treated as empty.
    """

    recurse_sub_properties: bool = False
    mode: ComparisonMode = ComparisonMode.INCLUSIVE
    ignore_paths: frozenset[str] = frozenset()
    include_paths: frozenset[str] = frozenset()
    reference_only_paths: frozenset[str] = frozenset()
    max_depth: int = MAX_RECURSION_DEPTH

    _ignored: frozenset[PropertyPath] = field(
        init=False, repr=False, compare=False, default=frozenset()
    )
    _included: tuple[PropertyPath, ...] = field(
        init=False, repr=False, compare=False, default=()
    )
    _by_reference: frozenset[PropertyPath] = field(
        init=False, repr=False, compare=False, default=frozenset()
    )

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be >= 1, got {self.max_depth}"
            raise ValueError(msg)
        try:
            mode = ComparisonMode(self.mode)
        except ValueError:
            allowed = [m.value for m in ComparisonMode]
            msg = f"mode must be one of {allowed}, got {self.mode!r}"
            raise ValueError(msg) from None

        ignore = _freeze("ignore_paths", self.ignore_paths)
        include = _freeze("include_paths", self.include_paths)
        by_reference = _freeze("reference_only_paths", self.reference_only_paths)

        object.__setattr__(self, "mode", mode)
        object.__setattr__(self, "ignore_paths", ignore)
        object.__setattr__(self, "include_paths", include)
        object.__setattr__(self, "reference_only_paths", by_reference)
        object.__setattr__(
            self, "_ignored", frozenset(parse_path(p).normalized() for p in ignore)
        )
        object.__setattr__(
            self,
            "_included",
            tuple(sorted({parse_path(p).normalized() for p in include}, key=str)),
        )
        object.__setattr__(
            self,
            "_by_reference",
            frozenset(parse_path(p).normalized() for p in by_reference),
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def is_excluded(self, path: PropertyPath) -> bool:
        """Return True when the property at ``path`` must not be compared."""
        normalized = path.normalized()
        if self.mode is ComparisonMode.INCLUSIVE:
            return normalized in self._ignored
        return not any(
            included.is_prefix_of(normalized) or normalized.is_prefix_of(included)
            for included in self._included
        )

    def is_reference_only(self, path: PropertyPath) -> bool:
        """Return True when the value at ``path`` is compared by identity."""
        return bool(self._by_reference) and path.normalized() in self._by_reference


def _freeze(name: str, paths: Iterable[str] | None) -> frozenset[str]:
    if paths is None:
        return frozenset()
    if isinstance(paths, str):
        msg = f"{name} must be a collection of path strings, not a single string"
        raise ValueError(msg)
    frozen = frozenset(paths)
    for path in frozen:
        if not isinstance(path, str):
            msg = f"{name} entries must be strings, got {path!r}"
            raise ValueError(msg)
    return frozen


DEFAULT_POLICY = ComparisonPolicy()
