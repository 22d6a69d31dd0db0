"""Shared, deterministic timestamps for tests."""

from datetime import UTC, datetime


# Fixed timestamp so rotation buckets are known in advance.
# 2017-06-13T00:00:00Z is 1_497_312_000_000 ms since the epoch:
# daily bucket 17330, 15-minute bucket 1_663_680.
FIXED_NOW = datetime(2017, 6, 13, 0, 0, 0, tzinfo=UTC)
FIXED_NOW_MS = 1_497_312_000_000
FIXED_DAY_BUCKET = 17_330
FIXED_QUARTER_HOUR_BUCKET = 1_663_680
