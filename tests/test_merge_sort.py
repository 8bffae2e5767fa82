"""
Tests for the comparator-driven merge sort.

What we check:
- Concrete scenarios (ascending, descending, lexicographic pairs, all-equal)
- Empty / singleton boundaries
- Permutation, ordering and idempotence properties
- Stability: left-first tie-break with contiguous halves keeps equal elements in input order
- No input mutation, new list returned
- Comparison count stays within the merge sort bound
- Argument errors
"""

from __future__ import annotations

import math
from collections import Counter
from operator import itemgetter
from typing import List, Tuple

import pytest
from hypothesis import given, settings, strategies as st

from cmpsort import by_key, lexicographic, merge_sort, natural, reverse
from cmpsort.algorithms import builtin_timsort
from cmpsort.bench.measure import CountingComparator
from cmpsort.ordering import Ordering

descending = reverse(natural)
pairs = lexicographic(natural, natural)


# ------------------------- concrete scenarios ------------------------- #

def test_ascending_ints() -> None:
    assert merge_sort([1, 5, -2, 12], natural) == [-2, 1, 5, 12]


def test_empty() -> None:
    assert merge_sort([], natural) == []


def test_singleton() -> None:
    assert merge_sort([42], natural) == [42]


def test_lexicographic_pairs_break_ties_on_second_component() -> None:
    xs = [(3, "banana"), (1, "orange"), (1, "apple")]
    assert merge_sort(xs, pairs) == [(1, "apple"), (1, "orange"), (3, "banana")]


def test_all_equal() -> None:
    assert merge_sort([3, 3, 3], natural) == [3, 3, 3]


def test_descending_comparator_flips_order() -> None:
    assert merge_sort([2, 1], descending) == [2, 1]
    assert merge_sort([1, 2], descending) == [2, 1]
    assert merge_sort([1, 5, -2, 12], descending) == [12, 5, 1, -2]


def test_same_code_sorts_by_projected_key() -> None:
    words = ["pear", "fig", "banana", "kiwi"]
    assert merge_sort(words, by_key(len)) == ["fig", "pear", "kiwi", "banana"]
    assert merge_sort(words, natural) == ["banana", "fig", "kiwi", "pear"]


def test_accepts_any_sequence_and_returns_list() -> None:
    assert merge_sort((3, 1, 2), natural) == [1, 2, 3]
    assert merge_sort(range(5, 0, -1), natural) == [1, 2, 3, 4, 5]
    assert merge_sort("cab", natural) == ["a", "b", "c"]


def test_signed_int_comparator_results_are_accepted() -> None:
    # Comparator in the "a - b" style returning arbitrary signed ints.
    assert merge_sort([10, -7, 3, 3, 0], lambda a, b: a - b) == [-7, 0, 3, 3, 10]


def test_float_comparator_results_agree_with_reference() -> None:
    xs = [0.5, 0.2, 0.9, 0.2]
    by_difference = lambda a, b: a - b
    assert merge_sort(xs, by_difference) == [0.2, 0.2, 0.5, 0.9]
    assert merge_sort(xs, by_difference) == builtin_timsort.sort(xs, cmp=by_difference)


# ------------------------- stability ------------------------- #

def test_stability_equal_keys_keep_input_order() -> None:
    xs = [(2, "a"), (1, "b"), (2, "c"), (1, "d"), (2, "e"), (1, "f"), (0, "g")]
    out = merge_sort(xs, by_key(itemgetter(0)))
    assert out == [(0, "g"), (1, "b"), (1, "d"), (1, "f"), (2, "a"), (2, "c"), (2, "e")]


def test_stability_under_reversed_key_order() -> None:
    xs = [(1, "a"), (2, "b"), (1, "c"), (2, "d")]
    out = merge_sort(xs, by_key(itemgetter(0), descending))
    assert out == [(2, "b"), (2, "d"), (1, "a"), (1, "c")]


@settings(deadline=None, max_examples=100)
@given(st.lists(st.integers(min_value=0, max_value=5), max_size=200))
def test_property_stable_on_tagged_values(keys: List[int]) -> None:
    tagged = [(k, i) for i, k in enumerate(keys)]
    out = merge_sort(tagged, by_key(itemgetter(0)))
    # Tags of equal keys must come out ascending.
    for (k1, i1), (k2, i2) in zip(out, out[1:]):
        assert k1 <= k2
        if k1 == k2:
            assert i1 < i2


# ------------------------- no mutation ------------------------- #

def test_does_not_mutate_input_and_returns_new_list() -> None:
    xs = [4, 3, 2, 1]
    before = list(xs)
    out = merge_sort(xs, natural)
    assert xs == before
    assert out is not xs

    one = [7]
    assert merge_sort(one, natural) is not one


# ------------------------- properties ------------------------- #

@settings(deadline=None, max_examples=150)
@given(st.lists(st.integers(min_value=-1000, max_value=1000), max_size=300))
def test_property_permutation_order_idempotence(xs: List[int]) -> None:
    for cmp in (natural, descending):
        out = merge_sort(xs, cmp)
        assert Counter(out) == Counter(xs)
        assert len(out) == len(xs)
        for p, q in zip(out, out[1:]):
            assert Ordering.of(cmp(p, q)) is not Ordering.GREATER_THAN
        assert merge_sort(out, cmp) == out


@settings(deadline=None, max_examples=80)
@given(st.lists(st.tuples(st.integers(0, 3), st.text(max_size=3)), max_size=80))
def test_property_lexicographic_matches_tuple_order(xs: List[Tuple[int, str]]) -> None:
    assert merge_sort(xs, pairs) == sorted(xs)


@settings(deadline=None, max_examples=80)
@given(st.lists(st.integers(), min_size=1, max_size=256))
def test_property_comparison_count_bound(xs: List[int]) -> None:
    counting = CountingComparator(natural)
    merge_sort(xs, counting)
    n = len(xs)
    if n == 1:
        assert counting.calls == 0
        return
    # Top-down merge sort never exceeds n * ceil(log2 n) comparisons.
    assert counting.calls <= n * math.ceil(math.log2(n))


def test_large_input_recursion_is_shallow() -> None:
    xs = list(range(20000, 0, -1))
    assert merge_sort(xs, natural) == list(range(1, 20001))


# ------------------------- errors ------------------------- #

def test_non_callable_comparator_raises_type_error() -> None:
    with pytest.raises(TypeError):
        merge_sort([2, 1], None)  # type: ignore[arg-type]


def test_comparator_returning_non_number_raises_type_error() -> None:
    with pytest.raises(TypeError):
        merge_sort([2, 1], lambda a, b: "less")


def test_invalid_comparator_still_terminates_with_a_permutation() -> None:
    # Not a total order: result order is unspecified, but nothing is lost.
    xs = [5, 1, 4, 2, 3]
    out = merge_sort(xs, lambda a, b: 1)
    assert sorted(out) == sorted(xs)
