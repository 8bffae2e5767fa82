"""
Reference algorithm: Python's built-in `sorted` driven by the same comparator.

`functools.cmp_to_key` adapts a two-argument comparator to the key protocol.
Timsort is stable, so its output must match `merge_sort` exactly, ties
included.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence

from cmpsort.ordering import Comparator, natural

__all__ = ["sort"]


def sort(
    a: Sequence[Any],
    *,
    cmp: Optional[Comparator] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[Any]:
    if config:
        raise ValueError(f"builtin_timsort takes no config keys; got {sorted(config)}")
    return sorted(a, key=cmp_to_key(natural if cmp is None else cmp))
