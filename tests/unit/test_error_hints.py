"""Unit tests for error hints system."""

import pytest

from diverse_select.config.error_hints import (
    ERROR_HINTS,
    FIELD_HINTS,
    format_validation_error,
    get_error_hint,
)


class TestGetErrorHint:
    """Tests for get_error_hint function."""

    @pytest.mark.unit
    def test_returns_hint_for_known_error_type(self) -> None:
        """Test that known error types return their hints."""
        hint = get_error_hint("missing")
        assert hint == ERROR_HINTS["missing"]
        assert "required" in hint.lower()

    @pytest.mark.unit
    def test_returns_default_for_unknown_error_type(self) -> None:
        """Test that unknown error types return default hint."""
        hint = get_error_hint("some_unknown_error_type")
        assert "documentation" in hint.lower()

    @pytest.mark.unit
    def test_field_specific_hint_takes_precedence(self) -> None:
        """Test that field-specific hints override error type hints."""
        hint = get_error_hint("enum", field_name="trending.window")
        assert hint == FIELD_HINTS["window"]
        assert "daily" in hint

    @pytest.mark.unit
    def test_unlisted_field_falls_back_to_error_type(self) -> None:
        """Test that fields without hints use the error type hint."""
        hint = get_error_hint("bool_type", field_name="featured.avoid_adjacent_fine_group")
        assert hint == ERROR_HINTS["bool_type"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("field_name", "expected_substring"),
        [
            ("max_per_coarse_group_strict", "1-100"),
            ("max_per_coarse_group_relaxed", "strict"),
            ("window", "short"),
            ("window_minutes", "1440"),
            ("default_limit", "1000"),
            ("version", "1.0"),
        ],
    )
    def test_field_hints_contain_expected_info(
        self, field_name: str, expected_substring: str
    ) -> None:
        """Test that field hints contain relevant information."""
        hint = get_error_hint("missing", field_name=f"trending.{field_name}")
        assert expected_substring in hint


class TestFormatValidationError:
    """Tests for format_validation_error function."""

    @pytest.mark.unit
    def test_formats_error_with_hint(self) -> None:
        """Test error formatting with hint included."""
        formatted = format_validation_error(
            location="trending.window_minutes",
            message="Input should be greater than or equal to 1",
            error_type="greater_than_equal",
            include_hint=True,
        )
        assert formatted.startswith(
            "trending.window_minutes: Input should be greater than or equal to 1"
        )
        assert "\n    Hint: " in formatted
        assert FIELD_HINTS["window_minutes"] in formatted

    @pytest.mark.unit
    def test_formats_error_without_hint(self) -> None:
        """Test error formatting without hint."""
        formatted = format_validation_error(
            location="featured.cap",
            message="Extra inputs are not permitted",
            error_type="extra_forbidden",
            include_hint=False,
        )
        assert formatted == "featured.cap: Extra inputs are not permitted"


class TestErrorHintsCompleteness:
    """Tests to ensure error hints are comprehensive."""

    @pytest.mark.unit
    def test_common_pydantic_error_types_have_hints(self) -> None:
        """Test that common Pydantic error types have hints."""
        common_types = [
            "missing",
            "enum",
            "int_type",
            "greater_than_equal",
            "less_than_equal",
            "value_error",
            "extra_forbidden",
        ]
        for error_type in common_types:
            assert error_type in ERROR_HINTS, f"Missing hint for {error_type}"

    @pytest.mark.unit
    def test_policy_fields_have_specific_hints(self) -> None:
        """Test that every bounded policy field has a specific hint."""
        key_fields = [
            "max_per_coarse_group_strict",
            "max_per_coarse_group_relaxed",
            "window_minutes",
            "default_limit",
        ]
        for field in key_fields:
            assert field in FIELD_HINTS, f"Missing hint for field {field}"
