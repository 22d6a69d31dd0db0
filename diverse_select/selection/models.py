"""Data models for diversity-constrained selection."""

from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator

from diverse_select.data_model import RecordBaseModel, StrictBaseModel
from diverse_select.selection.constants import (
    DEFAULT_MAX_PER_COARSE_GROUP_RELAXED,
    DEFAULT_MAX_PER_COARSE_GROUP_STRICT,
    UINT32_MASK,
)
from diverse_select.selection.finalize import clamp_limit


class Candidate(RecordBaseModel):
    """A scored item competing for a slot in the selection.

    Attributes:
        id: Opaque identifier, unique within one selection call.
        score: Precomputed quality score (higher is better).
        fine_group: Most specific category label (e.g. subcategory slug).
        coarse_group: Broader category the fine group rolls up into.
        label: Optional display label, carried through untouched.
    """

    id: Annotated[str, Field(min_length=1)]
    score: float = Field(
        validation_alias=AliasChoices("score", "cold_start_score", "featured_score"),
    )
    fine_group: str | None = Field(
        default=None,
        validation_alias=AliasChoices("fine_group", "primary_subcategory_slug"),
    )
    coarse_group: str | None = Field(
        default=None,
        validation_alias=AliasChoices("coarse_group", "primary_category_slug"),
    )
    label: str | None = Field(
        default=None,
        validation_alias=AliasChoices("label", "primary_subcategory_label"),
    )


class SelectionRequest(StrictBaseModel):
    """Parameters for one ranked diverse selection.

    Attributes:
        limit: Maximum number of items to return. Negative or non-numeric
            values are clamped to zero.
        max_per_coarse_group_strict: Coarse-group cap for rounds 1 and 2.
        max_per_coarse_group_relaxed: Coarse-group cap for round 3. Values
            below the strict cap are clamped up to it.
        seed: 32-bit seed for the tie-break hash.
        avoid_adjacent_fine_group: Whether round 3 avoids placing two items
            of the same fine group back to back.
    """

    limit: int = 0
    max_per_coarse_group_strict: Annotated[int, Field(ge=1)] = (
        DEFAULT_MAX_PER_COARSE_GROUP_STRICT
    )
    max_per_coarse_group_relaxed: Annotated[int, Field(ge=1)] = (
        DEFAULT_MAX_PER_COARSE_GROUP_RELAXED
    )
    seed: int = 0
    avoid_adjacent_fine_group: bool = True

    @field_validator("limit", mode="before")
    @classmethod
    def coerce_limit(cls, value: Any) -> int:
        """Clamp negative or non-numeric limits to zero."""
        return clamp_limit(value)

    @field_validator("seed", mode="before")
    @classmethod
    def wrap_seed(cls, value: Any) -> int:
        """Reduce the seed to an unsigned 32-bit integer."""
        if value is None:
            return 0
        return int(value) & UINT32_MASK

    @property
    def strict_cap(self) -> int:
        """Cap applied in rounds 1 and 2."""
        return self.max_per_coarse_group_strict

    @property
    def relaxed_cap(self) -> int:
        """Cap applied in round 3, never below the strict cap."""
        return max(self.max_per_coarse_group_relaxed, self.max_per_coarse_group_strict)


@dataclass
class SelectionStats:
    """Per-call counters describing how a selection was filled.

    Attributes:
        pool_size: Number of input candidates.
        bucket_count: Number of distinct fine groups.
        added_by_round: Items appended in each round (keys 1, 2, 3).
        skipped_by_cap: Candidates rejected by the coarse cap per round.
        adjacency_swaps: Round-3 picks that jumped ahead to avoid repeating
            the previous fine group.
        returned: Length of the final result.
    """

    pool_size: int = 0
    bucket_count: int = 0
    added_by_round: dict[int, int] = field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0}
    )
    skipped_by_cap: dict[int, int] = field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0}
    )
    adjacency_swaps: int = 0
    returned: int = 0

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for logging and serialization.

        Returns:
            Dictionary of stat name to value.
        """
        return {
            "pool_size": self.pool_size,
            "bucket_count": self.bucket_count,
            "added_by_round": dict(self.added_by_round),
            "skipped_by_cap": dict(self.skipped_by_cap),
            "adjacency_swaps": self.adjacency_swaps,
            "returned": self.returned,
        }


class SelectionOutcome(StrictBaseModel):
    """Complete result of one selection call.

    Attributes:
        items: Selected candidates in output order.
        stats: Fill statistics as a plain dictionary.
        output_checksum: SHA-256 of the ordered output ids.
    """

    items: list[Candidate] = Field(default_factory=list)
    stats: dict[str, Any] = Field(default_factory=dict)
    output_checksum: str = ""

    @property
    def ids(self) -> list[str]:
        """Ids of the selected candidates in order."""
        return [c.id for c in self.items]
