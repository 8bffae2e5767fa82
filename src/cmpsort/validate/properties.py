"""
Property helpers for validating sorting results and comparators.

These functions provide lightweight checks used by the tests and by the
benchmark runner's untimed sanity validation.

Public API (stable):
    is_sorted(xs, cmp=None) -> bool
    first_order_violation_index(xs, cmp=None) -> int | None
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict
    assert_no_mutation(before, after) -> None
    comparator_violations(cmp, sample, max_reports=10) -> list[str]

Notes
-----
- Sortedness is judged by the comparator: adjacent pairs must never compare
  GREATER_THAN. `cmp=None` means natural ascending order.
- Permutation checks count elements, so elements must be hashable.
- Stability is checked by tagging values with their input index, e.g. pairs
  (key, index), sorting with a key-only comparator and comparing against the
  (stable) oracle. See cmpsort.datasets "tagged" elements.
"""

from __future__ import annotations

from collections import Counter
from itertools import product
from typing import Any, Dict, Hashable, List, Optional, Sequence

from cmpsort.ordering import Comparator, Ordering, natural

__all__ = [
    "is_sorted",
    "first_order_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "assert_no_mutation",
    "comparator_violations",
]


def is_sorted(xs: Sequence[Any], cmp: Optional[Comparator] = None) -> bool:
    """Return True iff cmp(xs[i], xs[i+1]) is never GREATER_THAN."""
    return first_order_violation_index(xs, cmp) is None


def first_order_violation_index(xs: Sequence[Any], cmp: Optional[Comparator] = None) -> int | None:
    """
    Return the first index i where xs[i] sorts after xs[i+1], or None.

    Useful for precise error messages:
        i = first_order_violation_index(out, cmp)
        assert i is None, f"out of order at i={i}: {out[i]!r} > {out[i+1]!r}"
    """
    c = natural if cmp is None else cmp
    for i in range(len(xs) - 1):
        if Ordering.of(c(xs[i], xs[i + 1])) is Ordering.GREATER_THAN:
            return i
    return None


def is_permutation(a: Sequence[Hashable], b: Sequence[Hashable]) -> bool:
    """
    Return True iff `a` and `b` contain exactly the same multiset of values.
    """
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Hashable], b: Sequence[Hashable]) -> Dict[Hashable, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Assert that two sequences are exactly equal (element-wise), used to ensure
    an algorithm did not mutate its input in-place.

    Raises AssertionError with a concise message if they differ.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(
                f"Input mutated at index {i}: before={x!r}, after={y!r}"
            )


def comparator_violations(
    cmp: Comparator, sample: Sequence[Any], max_reports: int = 10
) -> List[str]:
    """
    Look for total-order violations of `cmp` over a small sample.

    Checks reflexivity, antisymmetry, consistency over all pairs and
    transitivity over all triples, so cost is O(len(sample) ** 3): keep the
    sample small. An empty result only means no violation was observed.

    Returns
    -------
    list[str]
        Up to `max_reports` human-readable descriptions.
    """
    found: List[str] = []
    xs = list(sample)
    memo: Dict[tuple, Ordering] = {}

    def c(i: int, j: int) -> Ordering:
        if (i, j) not in memo:
            memo[(i, j)] = Ordering.of(cmp(xs[i], xs[j]))
        return memo[(i, j)]

    def report(msg: str) -> bool:
        found.append(msg)
        return len(found) >= max_reports

    idx = range(len(xs))
    for i in idx:
        if c(i, i) is not Ordering.EQUAL_TO:
            if report(f"not reflexive: cmp({xs[i]!r}, {xs[i]!r}) = {c(i, i).name}"):
                return found

    for i, j in product(idx, idx):
        if i >= j:
            continue
        if c(i, j) is not c(j, i).reverse():
            if report(
                f"not antisymmetric: cmp({xs[i]!r}, {xs[j]!r}) = {c(i, j).name}, "
                f"cmp({xs[j]!r}, {xs[i]!r}) = {c(j, i).name}"
            ):
                return found
        again = Ordering.of(cmp(xs[i], xs[j]))
        if again is not c(i, j):
            if report(
                f"not consistent: cmp({xs[i]!r}, {xs[j]!r}) gave {c(i, j).name} then {again.name}"
            ):
                return found

    for i, j, k in product(idx, idx, idx):
        if c(i, j) <= 0 and c(j, k) <= 0 and c(i, k) is Ordering.GREATER_THAN:
            if report(
                f"not transitive: {xs[i]!r} <= {xs[j]!r} <= {xs[k]!r} but cmp({xs[i]!r}, {xs[k]!r}) = GREATER_THAN"
            ):
                return found

    return found
