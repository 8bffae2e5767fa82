"""
Comparators and comparator combinators.

A comparator is a pure two-argument callable `cmp(a, b)` returning an
`Ordering` (or any signed real number, normalised by sign):

    cmp(a, b) <  0   ->  a sorts before b
    cmp(a, b) == 0   ->  a and b are equal under this order
    cmp(a, b) >  0   ->  a sorts after b

Preconditions (documented, never checked at sort time):
- totality, antisymmetry, transitivity
- consistency: repeated calls with the same arguments give the same result

Public API (stable):
    Ordering
    natural(a, b) -> Ordering
    reverse(cmp) -> Comparator
    by_key(key, cmp=natural) -> Comparator
    then(primary, secondary) -> Comparator
    lexicographic(cmp1, cmp2) -> Comparator over 2-tuples
    lexicographic_n(*cmps) -> Comparator over N-tuples
    from_lt(less) -> Comparator

Every comparator is an explicit value passed at the call site; nothing here
is looked up implicitly. See `cmpsort.ordering.registry` for an opt-in
name/type lookup.
"""

from __future__ import annotations

from enum import IntEnum
from numbers import Real
from typing import Any, Callable, Sequence, TypeVar, Union


A = TypeVar("A")
K = TypeVar("K")

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
]


class Ordering(IntEnum):
    LESS_THAN = -1
    EQUAL_TO = 0
    GREATER_THAN = 1

    @classmethod
    def of(cls, value: Any) -> "Ordering":
        """
        Normalise a comparator result to an `Ordering` by its sign.

        Accepts `Ordering` and any real number (Python or NumPy), the same
        results `sorted(..., key=cmp_to_key(cmp))` accepts. NaN has no sign
        and maps to EQUAL_TO.

        Raises
        ------
        TypeError
            If `value` is not a real number.
        """
        if isinstance(value, Ordering):
            return value
        if not isinstance(value, Real):
            raise TypeError(
                f"comparator must return an Ordering or a signed number; got {type(value).__name__}: {value!r}"
            )
        if value < 0:
            return cls.LESS_THAN
        if value > 0:
            return cls.GREATER_THAN
        return cls.EQUAL_TO

    def reverse(self) -> "Ordering":
        return Ordering(-int(self))


Comparator = Callable[[Any, Any], Union[Ordering, float]]


def _require_callable(fn: Any, what: str) -> None:
    if not callable(fn):
        raise TypeError(f"{what} must be callable; got {type(fn).__name__}")


def natural(a: Any, b: Any) -> Ordering:
    """Ascending order by the elements' own `<`."""
    if a < b:
        return Ordering.LESS_THAN
    if b < a:
        return Ordering.GREATER_THAN
    return Ordering.EQUAL_TO


def reverse(cmp: Comparator) -> Comparator:
    """Flip `cmp`: reverse(natural) is descending order."""
    _require_callable(cmp, "cmp")

    def _reversed(a: Any, b: Any) -> Ordering:
        return Ordering.of(cmp(a, b)).reverse()

    return _reversed


def by_key(key: Callable[[A], K], cmp: Comparator = natural) -> Comparator:
    """
    Compare elements by a projected key, e.g. `by_key(len)` or
    `by_key(lambda p: p.age, reverse(natural))`.

    Elements with equal keys compare EQUAL_TO, so a stable sort keeps their
    input order.
    """
    _require_callable(key, "key")
    _require_callable(cmp, "cmp")

    def _by_key(a: A, b: A) -> Ordering:
        return Ordering.of(cmp(key(a), key(b)))

    return _by_key


def then(primary: Comparator, secondary: Comparator) -> Comparator:
    """Use `primary`; fall through to `secondary` only on EQUAL_TO."""
    _require_callable(primary, "primary")
    _require_callable(secondary, "secondary")

    def _then(a: Any, b: Any) -> Ordering:
        first = Ordering.of(primary(a, b))
        if first is not Ordering.EQUAL_TO:
            return first
        return Ordering.of(secondary(a, b))

    return _then


def lexicographic(cmp1: Comparator, cmp2: Comparator) -> Comparator:
    """
    Combine two component comparators into one over pairs `(x, y)`.

    Compares the first components with `cmp1`; if they are equal, the second
    components decide via `cmp2`.
    """
    _require_callable(cmp1, "cmp1")
    _require_callable(cmp2, "cmp2")

    def _pair(p: Sequence[Any], q: Sequence[Any]) -> Ordering:
        first = Ordering.of(cmp1(p[0], q[0]))
        if first is not Ordering.EQUAL_TO:
            return first
        return Ordering.of(cmp2(p[1], q[1]))

    return _pair


def lexicographic_n(*cmps: Comparator) -> Comparator:
    """
    N-ary lexicographic comparator: component i is compared with cmps[i],
    most significant first.

    Components past len(cmps) are never compared. When every compared
    component is equal, the shorter tuple sorts first.
    """
    if not cmps:
        raise ValueError("lexicographic_n needs at least one component comparator")
    for i, c in enumerate(cmps):
        _require_callable(c, f"cmps[{i}]")

    def _tuple(p: Sequence[Any], q: Sequence[Any]) -> Ordering:
        for c, x, y in zip(cmps, p, q):
            o = Ordering.of(c(x, y))
            if o is not Ordering.EQUAL_TO:
                return o
        return Ordering.of(len(p) - len(q))

    return _tuple


def from_lt(less: Callable[[Any, Any], bool]) -> Comparator:
    """
    Build a comparator from a strict "less than" predicate.

    Two calls per comparison: `less(a, b)` then, if false, `less(b, a)`.
    """
    _require_callable(less, "less")

    def _from_lt(a: Any, b: Any) -> Ordering:
        if less(a, b):
            return Ordering.LESS_THAN
        if less(b, a):
            return Ordering.GREATER_THAN
        return Ordering.EQUAL_TO

    return _from_lt
