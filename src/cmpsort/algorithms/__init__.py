"""
Sorting algorithms.

Each module in this package exposes the same seam used by the bench runner:
    sort(a, *, cmp=None, config=None) -> list

Modules are resolved by name, e.g. importlib.import_module(f"cmpsort.algorithms.{name}").
"""

ALGORITHMS = ("merge_sort", "builtin_timsort")

__all__ = ["ALGORITHMS"]
