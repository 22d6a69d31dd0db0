"""Seeded polynomial hashing and the deterministic candidate order.

Every ordering decision in this package goes through ``ranking_key`` so
that two processes given the same candidates and seed produce the same
sequence. Nothing here consults a random number generator or relies on
set or dict iteration order.
"""

import math
import struct
from collections.abc import Iterable
from functools import partial

from diverse_select.selection.constants import HASH_MULTIPLIER, UINT32_MASK
from diverse_select.selection.models import Candidate


def polynomial_hash(text: str) -> int:
    """Hash a string with ``h = h * 31 + unit`` truncated to 32 bits.

    Characters are consumed as UTF-16 code units so the value matches the
    hash computed by the web client for the same string.

    Args:
        text: String to hash. The empty string hashes to 0.

    Returns:
        Unsigned 32-bit hash.
    """
    h = 0
    encoded = text.encode("utf-16-le", "surrogatepass")
    for (unit,) in struct.iter_unpack("<H", encoded):
        h = (h * HASH_MULTIPLIER + unit) & UINT32_MASK
    return h


def seeded_hash(candidate_id: str, seed: int) -> int:
    """Hash of ``candidate_id`` followed by the decimal seed."""
    return polynomial_hash(candidate_id + str(seed))


def tie_break_order(a: Candidate, b: Candidate, seed: int) -> int:
    """Compare two candidates for tie-breaking.

    Args:
        a: First candidate.
        b: Second candidate.
        seed: Seed mixed into both hashes.

    Returns:
        Negative if ``a`` goes first, positive if ``b`` goes first, zero
        only when the ids are equal.
    """
    diff = seeded_hash(a.id, seed) - seeded_hash(b.id, seed)
    if diff != 0:
        return diff
    # Hash collision: fall back to the ids themselves
    return (a.id > b.id) - (a.id < b.id)


def _score_key(score: float) -> float:
    # NaN sorts after every real score
    if math.isnan(score):
        return math.inf
    return -score


def ranking_key(candidate: Candidate, seed: int) -> tuple[float, int, str]:
    """Sort key: score descending, then seeded hash, then id.

    Equivalent to ordering by score and resolving ties with
    ``tie_break_order``.

    Args:
        candidate: Candidate to key.
        seed: Tie-break seed.

    Returns:
        Tuple usable as a ``sorted`` key.
    """
    return (
        _score_key(candidate.score),
        seeded_hash(candidate.id, seed),
        candidate.id,
    )


def sort_by_rank(candidates: Iterable[Candidate], seed: int) -> list[Candidate]:
    """Return candidates sorted by ``ranking_key``."""
    return sorted(candidates, key=partial(ranking_key, seed=seed))
