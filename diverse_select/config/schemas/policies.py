"""Selection policy configuration schema."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import Field, ValidationInfo, field_validator

from diverse_select.data_model import StrictBaseModel
from diverse_select.selection.constants import (
    DEFAULT_FEATURED_MAX_PER_COARSE_GROUP,
    DEFAULT_LIST_LIMIT,
    DEFAULT_MAX_PER_COARSE_GROUP_RELAXED,
    DEFAULT_MAX_PER_COARSE_GROUP_STRICT,
    DEFAULT_ROTATION_MINUTES,
)
from diverse_select.selection.models import SelectionRequest
from diverse_select.selection.seed import daily_seed, short_window_seed


class RotationWindow(str, Enum):
    """How often a policy's seed rotates."""

    SHORT = "short"
    DAILY = "daily"


class SelectionPolicy(StrictBaseModel):
    """Caps and rotation for one kind of list.

    Attributes:
        max_per_coarse_group_strict: Coarse-group cap for rounds 1-2.
        max_per_coarse_group_relaxed: Coarse-group cap for round 3, raised
            to the strict cap when set lower.
        window: Seed rotation window.
        window_minutes: Length of the short window in minutes.
        avoid_adjacent_fine_group: Round-3 adjacency rule toggle.
        default_limit: Limit used when the caller does not pass one.
    """

    max_per_coarse_group_strict: Annotated[int, Field(ge=1, le=100)] = (
        DEFAULT_MAX_PER_COARSE_GROUP_STRICT
    )
    max_per_coarse_group_relaxed: Annotated[
        int, Field(ge=1, le=100, validate_default=True)
    ] = DEFAULT_MAX_PER_COARSE_GROUP_RELAXED
    window: RotationWindow = RotationWindow.SHORT
    window_minutes: Annotated[int, Field(ge=1, le=1440)] = DEFAULT_ROTATION_MINUTES
    avoid_adjacent_fine_group: bool = True
    default_limit: Annotated[int, Field(ge=0, le=1000)] = DEFAULT_LIST_LIMIT

    @field_validator("max_per_coarse_group_relaxed")
    @classmethod
    def clamp_relaxed_cap(cls, value: int, info: ValidationInfo) -> int:
        """Raise a relaxed cap below the strict cap up to the strict cap."""
        strict = info.data.get("max_per_coarse_group_strict")
        if strict is None:
            return value
        return max(value, strict)

    def seed_for(
        self, location_key: str | None = None, now: datetime | None = None
    ) -> int:
        """Seed for the current rotation window of this policy.

        Args:
            location_key: Optional location string.
            now: Time to use (default: current UTC time).

        Returns:
            32-bit seed.
        """
        if self.window is RotationWindow.DAILY:
            return daily_seed(location_key, now)
        return short_window_seed(self.window_minutes, location_key, now)

    def build_request(self, limit: int | None = None, seed: int = 0) -> SelectionRequest:
        """Build a SelectionRequest from this policy.

        Args:
            limit: Requested size, ``default_limit`` when None.
            seed: Tie-break seed.

        Returns:
            SelectionRequest carrying this policy's caps.
        """
        return SelectionRequest(
            limit=self.default_limit if limit is None else limit,
            max_per_coarse_group_strict=self.max_per_coarse_group_strict,
            max_per_coarse_group_relaxed=self.max_per_coarse_group_relaxed,
            seed=seed,
            avoid_adjacent_fine_group=self.avoid_adjacent_fine_group,
        )


def _default_featured() -> SelectionPolicy:
    return SelectionPolicy(
        max_per_coarse_group_strict=DEFAULT_FEATURED_MAX_PER_COARSE_GROUP,
        max_per_coarse_group_relaxed=DEFAULT_FEATURED_MAX_PER_COARSE_GROUP,
        window=RotationWindow.DAILY,
        avoid_adjacent_fine_group=False,
    )


class PoliciesConfig(StrictBaseModel):
    """Root configuration for policies.yaml.

    Attributes:
        version: Schema version.
        trending: Policy for the rotating trending list.
        featured: Policy for the daily featured list.
    """

    version: Annotated[str, Field(pattern=r"^\d+\.\d+$")] = "1.0"
    trending: SelectionPolicy = Field(default_factory=SelectionPolicy)
    featured: SelectionPolicy = Field(default_factory=_default_featured)

    def policy(self, name: str) -> SelectionPolicy:
        """Look up a policy by name.

        Args:
            name: ``trending`` or ``featured``.

        Returns:
            The named policy.

        Raises:
            KeyError: If the name is unknown.
        """
        policies = {"trending": self.trending, "featured": self.featured}
        if name not in policies:
            raise KeyError(name)
        return policies[name]
