"""Deterministic seeds derived from rotation windows and location."""

from datetime import UTC, datetime

from diverse_select.selection.constants import (
    DEFAULT_ROTATION_MINUTES,
    MS_PER_DAY,
    MS_PER_MINUTE,
    SEED_BUCKET_PRIME,
    UINT32_MASK,
)
from diverse_select.selection.hashing import polynomial_hash


_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def _epoch_ms(now: datetime | None) -> int:
    """Milliseconds since the Unix epoch, exact for any datetime."""
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    delta = now - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def normalize_location_key(location_key: str | None) -> str:
    """Trim and lower-case a location key; ``None`` becomes ``""``."""
    return (location_key or "").strip().lower()


def rotation_bucket(bucket_duration_ms: int, now: datetime | None = None) -> int:
    """Index of the rotation window containing ``now``.

    Args:
        bucket_duration_ms: Window length in milliseconds. Values below 1
            are treated as 1.
        now: Time to quantize (default: current UTC time).

    Returns:
        ``floor(now_ms / bucket_duration_ms)``.
    """
    return _epoch_ms(now) // max(1, int(bucket_duration_ms))


def derive_seed(
    bucket_duration_ms: int,
    location_key: str | None = None,
    now: datetime | None = None,
) -> int:
    """Derive a 32-bit seed from the rotation window and a location.

    The same window and location always produce the same seed, in any
    process, so horizontally scaled instances agree on tie-break order.

    Args:
        bucket_duration_ms: Rotation window length in milliseconds.
        location_key: Optional location string (city, area, geohash...).
        now: Time to use (default: current UTC time).

    Returns:
        ``(bucket * 1000003 + hash(location)) mod 2**32``.
    """
    bucket = rotation_bucket(bucket_duration_ms, now)
    location_hash = polynomial_hash(normalize_location_key(location_key))
    return (bucket * SEED_BUCKET_PRIME + location_hash) & UINT32_MASK


def short_window_seed(
    bucket_minutes: int = DEFAULT_ROTATION_MINUTES,
    location_key: str | None = None,
    now: datetime | None = None,
) -> int:
    """Seed that rotates every ``bucket_minutes`` minutes (trending)."""
    return derive_seed(bucket_minutes * MS_PER_MINUTE, location_key, now)


def daily_seed(location_key: str | None = None, now: datetime | None = None) -> int:
    """Seed that rotates once per UTC day (featured)."""
    return derive_seed(MS_PER_DAY, location_key, now)
