"""
Opt-in comparator registry.

Callers that want to pick an ordering by name (e.g. from a YAML experiment
config) or fall back to a per-type default register comparators here and look
them up explicitly. The sort itself never consults a registry.

    reg = default_registry()
    merge_sort(xs, reg.get("descending"))
    merge_sort(words, reg.for_type(str))
"""

from __future__ import annotations

from operator import itemgetter
from typing import Dict, List

from .comparators import Comparator, by_key, lexicographic, natural, reverse

__all__ = ["ComparatorRegistry", "default_registry"]


class ComparatorRegistry:
    def __init__(self) -> None:
        self._by_name: Dict[str, Comparator] = {}
        self._by_type: Dict[type, Comparator] = {}

    def register(self, name: str, cmp: Comparator, *, replace: bool = False) -> None:
        if not name or not isinstance(name, str):
            raise ValueError("comparator name must be a non-empty string")
        if not callable(cmp):
            raise TypeError(f"comparator {name!r} must be callable")
        if name in self._by_name and not replace:
            raise ValueError(f"Comparator already registered: {name!r}")
        self._by_name[name] = cmp

    def get(self, name: str) -> Comparator:
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(
                f"Unknown comparator: {name!r}. Known: {self.names()}"
            ) from None

    def names(self) -> List[str]:
        return sorted(self._by_name)

    def register_type(self, tp: type, cmp: Comparator, *, replace: bool = False) -> None:
        if not isinstance(tp, type):
            raise TypeError(f"register_type expects a type; got {tp!r}")
        if not callable(cmp):
            raise TypeError(f"comparator for {tp.__name__} must be callable")
        if tp in self._by_type and not replace:
            raise ValueError(f"Default comparator already registered for type {tp.__name__}")
        self._by_type[tp] = cmp

    def for_type(self, tp: type) -> Comparator:
        """
        Return the default comparator for `tp`, walking its MRO so that a
        subclass (e.g. bool for int) finds its base's entry.
        """
        for base in getattr(tp, "__mro__", (tp,)):
            if base in self._by_type:
                return self._by_type[base]
        known = sorted(t.__name__ for t in self._by_type)
        raise KeyError(f"No default comparator for type {getattr(tp, '__name__', tp)!r}. Known: {known}")

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


def default_registry() -> ComparatorRegistry:
    """Fresh registry with the built-in named orderings and type defaults."""
    reg = ComparatorRegistry()
    reg.register("ascending", natural)
    reg.register("descending", reverse(natural))
    reg.register("lexicographic", lexicographic(natural, natural))
    reg.register("lexicographic_desc_first", lexicographic(reverse(natural), natural))
    # Only the first component: ties keep input order in a stable sort.
    reg.register("first", by_key(itemgetter(0)))

    for tp in (int, float, str, bytes, tuple):
        reg.register_type(tp, natural)
    return reg
