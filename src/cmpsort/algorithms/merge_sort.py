"""
Comparator-driven merge sort.

Classic top-down balanced merge sort, generic over the element type: the
order comes entirely from the comparator passed at the call site, so the same
code sorts ascending, descending, by a projected key, or lexicographically
over tuples.

Partition rule:
    left  = the first ceil(n/2) elements, in input order
    right = the remaining floor(n/2) elements, in input order

Tie-break rule:
    when cmp(left_head, right_head) is EQUAL_TO, the left head is taken first.

Together these make the sort stable: elements that compare equal keep their
relative input order.

Public API (stable):
    merge_sort(xs: Sequence[A], cmp: Comparator) -> list[A]
    sort(a, *, cmp=None, config=None) -> list       # algorithm-module seam

Precondition: `cmp` is a total order (see cmpsort.ordering). A comparator that
violates this still terminates but yields an unspecified order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TypeVar

from cmpsort.ordering import Comparator, Ordering, natural

A = TypeVar("A")

__all__ = ["merge_sort", "sort"]


def merge_sort(xs: Sequence[A], cmp: Comparator) -> List[A]:
    """
    Return a new list with the elements of `xs` in non-decreasing order under `cmp`.

    Parameters
    ----------
    xs : Sequence[A]
        Finite input sequence (list, tuple, range, ...). Never mutated.
    cmp : Comparator
        Total-order comparator over A returning an Ordering or a signed number.

    Returns
    -------
    list[A]
        Same elements as `xs`; adjacent pairs (p, q) satisfy cmp(p, q) <= 0.

    Raises
    ------
    TypeError
        If `cmp` is not callable, or returns something other than a real number.
    """
    if not callable(cmp):
        raise TypeError(f"cmp must be callable; got {type(cmp).__name__}")
    return _sort(list(xs), cmp)


def _sort(items: List[A], cmp: Comparator) -> List[A]:
    n = len(items)
    if n <= 1:
        return items
    mid = (n + 1) // 2
    left = _sort(items[:mid], cmp)
    right = _sort(items[mid:], cmp)
    return _merge(left, right, cmp)


def _merge(left: List[A], right: List[A], cmp: Comparator) -> List[A]:
    out: List[A] = []
    i = j = 0
    len_l, len_r = len(left), len(right)
    while i < len_l and j < len_r:
        # Left wins ties; this is what makes the sort stable.
        if Ordering.of(cmp(left[i], right[j])) is Ordering.GREATER_THAN:
            out.append(right[j])
            j += 1
        else:
            out.append(left[i])
            i += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out


def sort(
    a: Sequence[Any],
    *,
    cmp: Optional[Comparator] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[Any]:
    """Algorithm-module entry point used by the bench runner; cmp=None means natural order."""
    if config:
        raise ValueError(f"merge_sort takes no config keys; got {sorted(config)}")
    return merge_sort(a, natural if cmp is None else cmp)
