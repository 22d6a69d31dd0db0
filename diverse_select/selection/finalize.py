"""Final deduplication and truncation shared by both strategies."""

from collections.abc import Callable, Hashable, Iterable
from typing import Any, TypeVar


T = TypeVar("T")


def clamp_limit(value: Any) -> int:
    """Coerce a requested limit to a non-negative integer.

    Negative, boolean, non-numeric and NaN values all become 0.
    """
    if isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, number)


def dedupe_and_truncate(
    items: Iterable[T],
    limit: int,
    key: Callable[[T], Hashable],
) -> list[T]:
    """Drop repeated keys, keeping first occurrences, and cap at ``limit``.

    Args:
        items: Ordered items.
        limit: Maximum output length; values below 1 yield ``[]``.
        key: Identity of an item (e.g. its id).

    Returns:
        Ordered list without duplicate keys.
    """
    if limit <= 0:
        return []
    seen: set[Hashable] = set()
    out: list[T] = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        out.append(item)
        if len(out) >= limit:
            break
    return out
