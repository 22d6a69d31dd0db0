"""Deterministic, diversity-constrained selection of trending content."""

from diverse_select.selection import (
    Candidate,
    RankedDiverseSelector,
    SelectionOutcome,
    SelectionRequest,
    daily_seed,
    diversify_ordered,
    select_featured,
    select_ranked_diverse,
    short_window_seed,
)


__all__ = [
    "Candidate",
    "RankedDiverseSelector",
    "SelectionOutcome",
    "SelectionRequest",
    "daily_seed",
    "diversify_ordered",
    "select_featured",
    "select_ranked_diverse",
    "short_window_seed",
]
