"""Group label normalization and fine-group bucketing."""

from collections.abc import Iterable

from diverse_select.selection.constants import MISC_GROUP
from diverse_select.selection.hashing import sort_by_rank
from diverse_select.selection.models import Candidate


def normalize_group_key(raw: object) -> str:
    """Trim and case-fold a group label, defaulting to ``miscellaneous``.

    Args:
        raw: Label value. ``None`` and blank strings map to the default.

    Returns:
        Normalized group key.
    """
    if raw is None:
        return MISC_GROUP
    key = str(raw).strip().casefold()
    return key or MISC_GROUP


def fine_group_of(candidate: Candidate) -> str:
    """Normalized fine group of a candidate."""
    return normalize_group_key(candidate.fine_group)


def coarse_group_of(candidate: Candidate) -> str:
    """Normalized coarse group of a candidate."""
    return normalize_group_key(candidate.coarse_group)


def index_by_fine_group(
    candidates: Iterable[Candidate], seed: int
) -> dict[str, list[Candidate]]:
    """Partition candidates into fine-group buckets.

    Each bucket is sorted by score descending with seeded tie-breaks.
    No candidate is dropped.

    Args:
        candidates: Candidate pool.
        seed: Tie-break seed.

    Returns:
        Mapping of fine group key to its ranked candidates.
    """
    buckets: dict[str, list[Candidate]] = {}
    for c in candidates:
        buckets.setdefault(fine_group_of(c), []).append(c)
    return {key: sort_by_rank(members, seed) for key, members in buckets.items()}
