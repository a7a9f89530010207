"""Integrations subpackage for structural-compare.

Contains integration adapters for external frameworks:
- pytest plugin (auto-discovered via pytest11 entry point)
- ``unittest.mock`` argument matchers (``match_property_values`` and the
  ``match_*_sequence*`` family)
"""

from __future__ import annotations

from structural_compare.integrations._mock import (
    ArgumentMatcher,
    match_equal_sequence,
    match_equal_sequence_by_properties,
    match_equivalent_sequence,
    match_equivalent_sequence_by_properties,
    match_property_values,
)

__all__ = [
    "ArgumentMatcher",
    "match_equal_sequence",
    "match_equal_sequence_by_properties",
    "match_equivalent_sequence",
    "match_equivalent_sequence_by_properties",
    "match_property_values",
]
