"""Constants for the selection module."""

from typing import Final


# Group label used when a fine or coarse group is missing or blank
MISC_GROUP: Final[str] = "miscellaneous"

# Polynomial rolling hash multiplier
HASH_MULTIPLIER: Final[int] = 31

# Multiplier that spreads consecutive rotation buckets across the seed space
SEED_BUCKET_PRIME: Final[int] = 1_000_003

UINT32_MASK: Final[int] = 0xFFFFFFFF

# Coarse-group caps for the trending policy (rounds 1-2, round 3)
DEFAULT_MAX_PER_COARSE_GROUP_STRICT: Final[int] = 2
DEFAULT_MAX_PER_COARSE_GROUP_RELAXED: Final[int] = 3

# Featured uses a single, looser cap for every round
DEFAULT_FEATURED_MAX_PER_COARSE_GROUP: Final[int] = 3

# Rotation windows
DEFAULT_ROTATION_MINUTES: Final[int] = 15
MS_PER_MINUTE: Final[int] = 60 * 1000
MS_PER_DAY: Final[int] = 24 * 60 * MS_PER_MINUTE

# Fields consulted, in order, when diversifying items without an explicit key
DEFAULT_GROUP_KEY_FIELDS: Final[tuple[str, ...]] = (
    "sub_interest_id",
    "subInterestId",
    "category",
    "bucket",
    "category_label",
    "subInterestLabel",
)

# List size used when a policy caller does not pass a limit
DEFAULT_LIST_LIMIT: Final[int] = 20
