"""Order-preserving diversification for lists without scores."""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from diverse_select.selection.constants import DEFAULT_GROUP_KEY_FIELDS
from diverse_select.selection.finalize import clamp_limit, dedupe_and_truncate
from diverse_select.selection.grouping import normalize_group_key


T = TypeVar("T")


def _field_value(item: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute."""
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def default_group_key(item: Any) -> str:
    """Group key from the first populated field of a known list.

    Consults ``sub_interest_id``, ``subInterestId``, ``category``,
    ``bucket``, ``category_label`` and ``subInterestLabel`` in order and
    takes the first that is not ``None``.

    Args:
        item: Mapping or object.

    Returns:
        Normalized group key, ``miscellaneous`` if nothing is set.
    """
    for name in DEFAULT_GROUP_KEY_FIELDS:
        value = _field_value(item, name)
        if value is not None:
            return normalize_group_key(value)
    return normalize_group_key(None)


def diversify_ordered(
    items: Sequence[T],
    limit: int,
    get_group_key: Callable[[T], object] | None = None,
) -> list[T]:
    """Select up to ``limit`` items, one per group first, keeping input order.

    1. Walk ``items`` in order, taking the first item of each distinct
       group until ``limit`` is reached.
    2. Walk ``items`` again, backfilling items not yet taken.

    When ``items`` fits within ``limit``, or every item is in the same
    group, the result is simply ``items[:limit]``. Callers wanting a
    varied pick can pre-shuffle ``items`` with a seeded order.

    Args:
        items: Items already ordered by desirability.
        limit: Maximum number of items to return.
        get_group_key: Optional key function; its result is normalized.
            Defaults to ``default_group_key``.

    Returns:
        New list of selected items.
    """
    safe_limit = clamp_limit(limit)
    if safe_limit == 0 or not items:
        return []
    if len(items) <= safe_limit:
        return list(items)

    key_of = get_group_key or default_group_key
    keys = [normalize_group_key(key_of(item)) for item in items]
    if len(set(keys)) == 1:
        return list(items[:safe_limit])

    seen_groups: set[str] = set()
    picked: list[int] = []
    for index, key in enumerate(keys):
        if key in seen_groups:
            continue
        seen_groups.add(key)
        picked.append(index)
        if len(picked) >= safe_limit:
            return [items[i] for i in picked]

    # Positions, not values, identify items, so equal items are never merged
    taken = set(picked)
    backfill = picked + [i for i in range(len(items)) if i not in taken]
    return [items[i] for i in dedupe_and_truncate(backfill, safe_limit, key=int)]
