"""
Ordering package public API.

Re-export comparators and the registry so callers can write:
    from cmpsort.ordering import Ordering, natural, reverse, lexicographic
"""

from .comparators import (
    Comparator,
    Ordering,
    by_key,
    from_lt,
    lexicographic,
    lexicographic_n,
    natural,
    reverse,
    then,
)
from .registry import ComparatorRegistry, default_registry

__all__ = [
    "Ordering",
    "Comparator",
    "natural",
    "reverse",
    "by_key",
    "then",
    "lexicographic",
    "lexicographic_n",
    "from_lt",
    "ComparatorRegistry",
    "default_registry",
]
