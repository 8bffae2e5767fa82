"""
cmpsort: a stable, comparator-driven merge sort and its benchmark tooling.

    from cmpsort import merge_sort, natural, reverse, lexicographic

    merge_sort([1, 5, -2, 12], natural)            # [-2, 1, 5, 12]
    merge_sort([1, 2], reverse(natural))           # [2, 1]
"""

from cmpsort.algorithms.merge_sort import merge_sort
from cmpsort.ordering import (
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

__version__ = "0.1.0"

__all__ = [
    "merge_sort",
    "Ordering",
    "Comparator",
    "natural",
    "reverse",
    "by_key",
    "then",
    "lexicographic",
    "lexicographic_n",
    "from_lt",
]
