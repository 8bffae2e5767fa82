"""
Oracle for sorting correctness.

We use Python's built-in `sorted()` with `functools.cmp_to_key` as the
ground-truth oracle:
- Honours any comparator, not just the elements' natural order
- Deterministic and portable
- Stable, so it also pins down the expected order of ties

Public API (stable):
    oracle_sort(a, cmp=None) -> list
    equals_oracle(a, out, cmp=None) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- `cmp=None` means natural ascending order.
- Every algorithm in this repo is stable, so its output must match the
  oracle exactly, including the order of elements that compare equal.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, List, Optional, Sequence

from cmpsort.ordering import Comparator, natural

ORACLE_NAME: str = "python_sorted_cmp_to_key"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(a: Sequence[Any], cmp: Optional[Comparator] = None) -> List[Any]:
    """
    Return the ground-truth sorted output for `a` under `cmp`.

    Parameters
    ----------
    a : Sequence
        Input sequence. The oracle does not mutate `a`.
    cmp : Comparator | None
        Ordering to sort by; natural ascending order when None.

    Returns
    -------
    list
        A new list with the same elements as `a`, in non-decreasing order
        under `cmp`, ties in input order.
    """
    return sorted(a, key=cmp_to_key(natural if cmp is None else cmp))


def equals_oracle(a: Sequence[Any], out: Sequence[Any], cmp: Optional[Comparator] = None) -> bool:
    """True iff `out` is exactly `oracle_sort(a, cmp)` (as a list)."""
    return list(out) == oracle_sort(a, cmp)
