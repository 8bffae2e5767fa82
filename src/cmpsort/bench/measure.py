"""
Timing and comparison-counting harness for comparator-driven sorts.

We measure exactly one call to an algorithm's `sort(a, cmp=..., config=...)`
per sample, using a monotonic high-resolution clock. The comparator is wrapped
in a `CountingComparator`, so every sample also records how many comparisons
the algorithm made. Copying the input, GC and warmup happen outside the timed
block.

Public API (stable):
    CountingComparator
    time_sort_call(...) -> dict

Returned dict schema:
    {
        "algo": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "comparisons": list[int],           # comparator calls for each successful sample
        "status": "ok" | "timeout" | "error",
        "error": str | None,                # populated if status == "error"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
    }
"""

from __future__ import annotations

import gc
import time
from typing import Any, Callable, Dict, List, Optional

from cmpsort.ordering import Comparator

__all__ = ["CountingComparator", "time_sort_call"]


class CountingComparator:
    """Callable wrapper around a comparator that counts its calls."""

    def __init__(self, cmp: Comparator) -> None:
        if not callable(cmp):
            raise TypeError(f"cmp must be callable; got {type(cmp).__name__}")
        self._cmp = cmp
        self.calls = 0

    def __call__(self, a: Any, b: Any) -> Any:
        self.calls += 1
        return self._cmp(a, b)

    def reset(self) -> None:
        self.calls = 0


def time_sort_call(
    *,
    algo_name: str,
    algo_fn: Callable[..., List[Any]],
    a: List[Any],
    cmp: Comparator,
    config: Optional[Dict[str, Any]],
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
) -> Dict[str, Any]:
    """
    Time repeated calls to `algo_fn(copy_of_a, cmp=counting_cmp, config=config)`.

    Parameters
    ----------
    algo_name : str
        Logical name of the algorithm (for records).
    algo_fn : Callable[..., list]
        Callable implementing sort(a, *, cmp=None, config=None).
    a : list
        Input array. A fresh copy is passed to every call.
    cmp : Comparator
        Ordering under test; wrapped in a CountingComparator.
    config : dict | None
        Algorithm configuration passed through unchanged.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, make one untimed call before timing.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample threshold. A sample slower than this marks status="timeout"
        and stops further sampling.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    counting = CountingComparator(cmp)
    result: Dict[str, Any] = {
        "algo": algo_name,
        "repeats": repeats,
        "samples_ns": [],
        "comparisons": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    if warmup and repeats > 0:
        try:
            algo_fn(list(a), cmp=counting, config=config)
        except Exception as e:
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            arg = list(a)
            counting.reset()
            try:
                t0 = time.perf_counter_ns()
                algo_fn(arg, cmp=counting, config=config)
                t1 = time.perf_counter_ns()
            except Exception as e:
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            result["samples_ns"].append(int(elapsed))
            result["comparisons"].append(counting.calls)

            if elapsed > threshold_ns:
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled.
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result
