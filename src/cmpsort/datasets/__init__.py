"""
Datasets package public API.

Re-export the dataset generator so callers can write:
    from cmpsort.datasets import make_dataset, SUPPORTED_DISTS
"""

from .generators import SUPPORTED_DISTS, SUPPORTED_ELEMENTS, make_dataset, tag_with_index

__all__ = ["make_dataset", "tag_with_index", "SUPPORTED_DISTS", "SUPPORTED_ELEMENTS"]
