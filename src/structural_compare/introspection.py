"""Runtime type classification and field discovery for structural comparison.

The comparator chooses a comparison strategy per value from the value's
runtime type.  This module answers the questions it asks:

- Is this a value type, compared directly with ``==``?
- Does this type define an ordering (``__lt__``)?
- Does this type define its own ``__eq__``?
- Is this a sequence whose items should be compared positionally?
- Which fields does this object carry, in declaration order?

Containers (``list``, ``dict``, ``set``, ...) define ``__eq__`` and
``__lt__`` too, but those compare items with their own ``__eq__`` and are
never treated as custom equality or ordering; sequences and mappings are
unpacked instead, and mappings are iterated as ``KeyValuePair`` items.
"""

from __future__ import annotations

import dataclasses
import datetime
import enum
import math
import numbers
import uuid
from collections.abc import Collection, Iterable, Mapping, Set
from dataclasses import dataclass
from typing import Any

import numpy as np

__all__ = [
    "KeyValuePair",
    "describe_fields",
    "has_custom_equality",
    "is_ordered_comparable",
    "is_sequence",
    "is_value_type",
    "ordered_equal",
    "same_kind",
    "sequence_items",
    "values_equal",
]

# Types compared directly with ``==`` (or ``np.array_equal``), never unpacked.
_VALUE_TYPES: tuple[type, ...] = (
    numbers.Number,
    np.generic,
    np.ndarray,
    enum.Enum,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    Set,
    range,
    type,
)

# Iterables that are atoms rather than sequences of items.
_ATOMIC_ITERABLES: tuple[type, ...] = (str, bytes, bytearray, memoryview, np.ndarray)


@dataclass(frozen=True, slots=True)
class KeyValuePair:
    """One mapping entry, as produced when a mapping is compared item by item.

    Never compared as a whole: its ``key`` and ``value`` are always compared
    as properties.
    """

    key: Any
    value: Any


# ---------------------------------------------------------------------------
# Type classification
# ---------------------------------------------------------------------------


def is_value_type(tp: type) -> bool:
    """Return True for scalar-like types compared directly with ``==``."""
    return issubclass(tp, _VALUE_TYPES) and not issubclass(tp, KeyValuePair)


def _is_container(tp: type) -> bool:
    return issubclass(tp, (Collection, Mapping)) and not issubclass(
        tp, (str, bytes, bytearray)
    )


def is_ordered_comparable(tp: type) -> bool:
    """Return True when ``tp`` defines its own ``__lt__`` (str, bytes, user types)."""
    return (
        getattr(tp, "__lt__", object.__lt__) is not object.__lt__
        and not _is_container(tp)
        and not issubclass(tp, KeyValuePair)
    )


def has_custom_equality(tp: type) -> bool:
    """Return True when ``tp`` overrides ``__eq__`` (containers and pairs excluded)."""
    return (
        getattr(tp, "__eq__", object.__eq__) is not object.__eq__
        and not _is_container(tp)
        and not issubclass(tp, KeyValuePair)
    )


def is_sequence(value: Any) -> bool:
    """Return True for iterables whose items are compared positionally.

    Named tuples are records, not sequences: their fields are compared by name.
    """
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return False
    return isinstance(value, Iterable) and not isinstance(value, _ATOMIC_ITERABLES)


def same_kind(expected: Any, actual: Any) -> bool:
    """Return True when one value is an instance of the other's type."""
    return isinstance(actual, type(expected)) or isinstance(expected, type(actual))


# ---------------------------------------------------------------------------
# Equality primitives
# ---------------------------------------------------------------------------


def _is_nan(value: Any) -> bool:
    return isinstance(value, (float, np.floating)) and math.isnan(value)


def _is_float_array(value: Any) -> bool:
    return isinstance(value, np.ndarray) and np.issubdtype(value.dtype, np.inexact)


def values_equal(expected: Any, actual: Any) -> bool:
    """Direct equality that tolerates numpy arrays on either side.

    A value always equals itself, and NaN equals NaN, so comparing an object
    with itself never fails.
    """
    if expected is actual:
        return True
    if isinstance(expected, np.ndarray) or isinstance(actual, np.ndarray):
        equal_nan = _is_float_array(expected) and _is_float_array(actual)
        return bool(np.array_equal(expected, actual, equal_nan=equal_nan))
    if _is_nan(expected) and _is_nan(actual):
        return True
    return bool(expected == actual)


def ordered_equal(expected: Any, actual: Any) -> bool:
    """Return True when neither value orders before the other."""
    return not (expected < actual) and not (actual < expected)


# ---------------------------------------------------------------------------
# Structure discovery
# ---------------------------------------------------------------------------


def sequence_items(value: Any) -> list[Any]:
    """Materialise the items of a sequence; mappings yield ``KeyValuePair`` items."""
    if isinstance(value, Mapping):
        return [KeyValuePair(key, item) for key, item in value.items()]
    return list(value)


def _slot_names(tp: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(tp.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            if slot.startswith("__") and not slot.endswith("__"):
                slot = f"_{klass.__name__.lstrip('_')}{slot}"
            names.append(slot)
    return names


def _field_names(value: Any) -> list[str]:
    tp = type(value)
    names: list[str] = []
    if dataclasses.is_dataclass(value):
        names.extend(f.name for f in dataclasses.fields(value))
    elif isinstance(value, tuple) and hasattr(tp, "_fields"):
        names.extend(tp._fields)
    names.extend(_slot_names(tp))
    instance_dict = getattr(value, "__dict__", None)
    if isinstance(instance_dict, dict):
        names.extend(instance_dict)
    return names


_MISSING = object()


def describe_fields(
    expected: Any, actual: Any = _MISSING
) -> list[tuple[str, Any, Any]]:
    """List the fields of a pair of objects in declaration order.

    Field names come from dataclass fields, namedtuple fields, ``__slots__``
    (base classes first) and the instance ``__dict__``, in that order, with
    duplicates removed.  Names present only on ``actual`` are appended.
    Unset slots and attributes missing on one side read as ``None``.

    Args:
        expected: The expected object; its type defines the field order.
        actual:   The actual object.  Omit to describe ``expected`` alone.

    Returns:
        ``(name, expected_value, actual_value)`` triples.  Empty when the
        objects carry no fields.
    """
    names = _field_names(expected)
    if actual is not _MISSING:
        names.extend(_field_names(actual))
    else:
        actual = expected
    return [
        (name, getattr(expected, name, None), getattr(actual, name, None))
        for name in dict.fromkeys(names)
    ]
