"""
Dataset generators for comparator-sort benchmarks and property tests.

Distributions (spec["dist"]):
- "random":
    Integers drawn uniformly from an inclusive range params["range"].

- "nearly_sorted":
    Start from [0, 1, ..., n-1] then perform ceil(swap_frac * n) random
    index swaps using the provided RNG.

- "few_uniques":
    Choose up to k distinct values from an inclusive range, then fill the
    array by sampling among them. Many ties, so it exercises the merge's
    tie-break.

- "reversed":
    Deterministic [n-1, ..., 0].

- "all_equal":
    Deterministic [value] * n (params["value"], default 0).

Element kinds (spec["elements"]):
- "int" (default): the values themselves.
- "tagged": each value wrapped as (value, original_index). Sorting tagged
  elements with a comparator that looks only at the value (registry name
  "first") makes stability observable: equal values must keep ascending
  indices.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list
    tag_with_index(values) -> list[tuple[int, int]]

Conventions:
- Ranges are **inclusive** on both ends.
- Returns plain Python lists of Python ints / tuples (algorithms stay
  NumPy-agnostic).
- The caller supplies the RNG (seeded upstream) for reproducibility.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

SUPPORTED_DISTS = {
    "random",
    "nearly_sorted",
    "few_uniques",
    "reversed",
    "all_equal",
}
SUPPORTED_ELEMENTS = {"int", "tagged"}

__all__ = ["SUPPORTED_DISTS", "SUPPORTED_ELEMENTS", "make_dataset", "tag_with_index"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[Any]:
    """
    Generate a dataset according to `spec`, using the provided RNG.

    Parameters
    ----------
    n : int
        Number of elements to generate. Must be >= 0.
    spec : dict
        {
            "dist": "random" | "nearly_sorted" | "few_uniques" | "reversed" | "all_equal",
            "params": {...},          # per-dist, see module docstring
            "elements": "int" | "tagged"   # optional, default "int"
        }
    rng : numpy.random.Generator
        Random number generator owned by the caller. Unused by the
        deterministic distributions.

    Returns
    -------
    list
        `n` ints, or `n` (value, index) tuples for "tagged".

    Raises
    ------
    ValueError
        If inputs are invalid or the distribution / element kind is unsupported.
    """
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise ValueError("n must be an int")
    if n < 0:
        raise ValueError("n must be nonnegative")
    n = int(n)

    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist", None)
    if dist not in SUPPORTED_DISTS:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    elements = spec.get("elements", "int")
    if elements not in SUPPORTED_ELEMENTS:
        raise ValueError(
            f"Unsupported dataset elements: {elements!r}. Supported: {sorted(SUPPORTED_ELEMENTS)}"
        )

    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError("spec.params must be a dict")

    values = _GENERATORS[dist](n, params, rng)
    if elements == "tagged":
        return tag_with_index(values)
    return values


def tag_with_index(values: Sequence[int]) -> List[Tuple[int, int]]:
    """Pair each value with its position: [7, 3, 7] -> [(7, 0), (3, 1), (7, 2)]."""
    return [(v, i) for i, v in enumerate(values)]


# ------------------------- distributions ------------------------- #


def _random(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    lo, hi = _parse_range(params, required=True)
    if n == 0:
        return []
    # Generator.integers is half-open; +1 makes hi inclusive.
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _nearly_sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    swap_frac = _parse_swap_frac(params)
    arr = list(range(n))
    num_swaps = int(np.ceil(swap_frac * n))
    if n == 0 or num_swaps == 0:
        return arr
    idxs = rng.integers(0, n, size=2 * num_swaps)
    for k in range(num_swaps):
        i, j = int(idxs[2 * k]), int(idxs[2 * k + 1])
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def _few_uniques(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    k = params.get("k")
    if not isinstance(k, int) or isinstance(k, bool) or k < 1:
        raise ValueError(f"few_uniques.params.k must be an integer >= 1; got {k!r}")
    lo, hi = _parse_range(params, required=False, default=(0, 1000))
    if n == 0:
        return []
    actual_k = min(k, n, hi - lo + 1)
    # Draw distinct values with `rng` itself so results depend only on the seed.
    pool = rng.choice(hi - lo + 1, size=actual_k, replace=False) + lo
    picks = rng.integers(0, actual_k, size=n)
    return [int(pool[int(t)]) for t in picks]


def _reversed(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return list(range(n - 1, -1, -1))


def _all_equal(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    value = params.get("value", 0)
    if not isinstance(value, (int, np.integer)) or isinstance(value, bool):
        raise ValueError(f"all_equal.params.value must be an integer; got {value!r}")
    return [int(value)] * n


_GENERATORS = {
    "random": _random,
    "nearly_sorted": _nearly_sorted,
    "few_uniques": _few_uniques,
    "reversed": _reversed,
    "all_equal": _all_equal,
}


# ------------------------- helpers ------------------------- #


def _parse_range(
    params: Dict[str, Any], *, required: bool, default: Tuple[int, int] = (0, 0)
) -> Tuple[int, int]:
    """
    Parse params["range"] == [min_int, max_int] (both inclusive).
    Falls back to `default` when absent and not `required`.
    """
    if "range" not in params:
        if required:
            raise ValueError("params.range must be provided as [min, max] (inclusive)")
        return default

    spec = params["range"]
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _parse_swap_frac(params: Dict[str, Any]) -> float:
    """swap_frac in [0.0, 1.0]; default 0.05."""
    val = params.get("swap_frac", 0.05)
    try:
        x = float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be a float in [0.0, 1.0]; got {val!r}"
        ) from e
    if not (0.0 <= x <= 1.0):
        raise ValueError(
            f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {x}"
        )
    return x


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types, not bools
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
