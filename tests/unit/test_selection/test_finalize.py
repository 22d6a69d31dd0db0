"""Unit tests for deduplication, truncation and limit clamping."""

import math

import pytest

from diverse_select.selection.finalize import clamp_limit, dedupe_and_truncate


class TestDedupeAndTruncate:
    """Tests for dedupe_and_truncate."""

    @pytest.mark.unit
    def test_keeps_first_occurrence(self) -> None:
        """Later duplicates are dropped, order preserved."""
        items = ["a", "b", "a", "c", "b"]
        assert dedupe_and_truncate(items, 10, key=str) == ["a", "b", "c"]

    @pytest.mark.unit
    def test_truncates_to_limit(self) -> None:
        """Output never exceeds the limit."""
        assert dedupe_and_truncate(range(10), 3, key=int) == [0, 1, 2]

    @pytest.mark.unit
    def test_limit_counts_unique_items(self) -> None:
        """Duplicates do not use up slots."""
        items = ["a", "a", "a", "b", "c"]
        assert dedupe_and_truncate(items, 2, key=str) == ["a", "b"]

    @pytest.mark.unit
    @pytest.mark.parametrize("limit", [0, -1])
    def test_non_positive_limit(self, limit: int) -> None:
        """A limit below 1 yields an empty list."""
        assert dedupe_and_truncate(["a"], limit, key=str) == []

    @pytest.mark.unit
    def test_custom_key(self) -> None:
        """Identity comes from the key function."""
        items = [("x", 1), ("x", 2), ("y", 3)]
        result = dedupe_and_truncate(items, 5, key=lambda pair: pair[0])
        assert result == [("x", 1), ("y", 3)]


class TestClampLimit:
    """Tests for clamp_limit."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5, 5),
            (0, 0),
            (-3, 0),
            (4.9, 4),
            ("7", 7),
            ("abc", 0),
            (None, 0),
            (True, 0),
            (math.nan, 0),
            (math.inf, 0),
        ],
    )
    def test_clamping(self, value: object, expected: int) -> None:
        """Limits are coerced to non-negative integers."""
        assert clamp_limit(value) == expected
