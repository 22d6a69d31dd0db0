"""Diversity-constrained selection of trending and featured content.

This module picks a bounded, category-diverse list from a pool of scored
candidates. Output is fully determined by the candidates, the request and
a 32-bit seed derived from a rotation window, so independently scaled
instances serve identical lists within the same window.
"""

from diverse_select.selection.allocator import (
    RankedDiverseSelector,
    select_featured,
    select_ranked_diverse,
)
from diverse_select.selection.diversify import default_group_key, diversify_ordered
from diverse_select.selection.hashing import polynomial_hash, tie_break_order
from diverse_select.selection.models import (
    Candidate,
    SelectionOutcome,
    SelectionRequest,
    SelectionStats,
)
from diverse_select.selection.seed import daily_seed, derive_seed, short_window_seed


__all__ = [
    "Candidate",
    "RankedDiverseSelector",
    "SelectionOutcome",
    "SelectionRequest",
    "SelectionStats",
    "daily_seed",
    "default_group_key",
    "derive_seed",
    "diversify_ordered",
    "polynomial_hash",
    "select_featured",
    "select_ranked_diverse",
    "short_window_seed",
    "tie_break_order",
]
