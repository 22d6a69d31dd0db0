"""Error hints for policy validation errors.

Provides user-friendly hints with actionable remediation steps
for common validation errors.
"""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your policy file.",
    "enum": "Check the allowed values in the documentation.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "bool_type": "This field must be true or false.",
    "bool_parsing": "This field must be true or false.",
    "dict_type": "This field must be an object/mapping.",
    "model_type": "This section must be an object/mapping.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "string_pattern_mismatch": "The format is invalid. Use MAJOR.MINOR, e.g. '1.0'.",
    "value_error": "The value is not accepted. Check the documented constraints.",
    "extra_forbidden": "Unknown field. Check the spelling against the documentation.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "max_per_coarse_group_strict": "Cap per coarse group in rounds 1-2 (1-100).",
    "max_per_coarse_group_relaxed": (
        "Cap per coarse group in round 3 (1-100). Raised to the strict cap if lower."
    ),
    "window": "Must be 'short' (rotates every window_minutes) or 'daily'.",
    "window_minutes": "Must be between 1 and 1440.",
    "default_limit": "Must be between 0 and 1000.",
    "version": "Schema version such as '1.0'.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'enum').
        field_name: Optional field path for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        # 'trending.window_minutes' -> 'window_minutes'
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(error_type, "Check the policy documentation for valid values.")


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'trending.window_minutes').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
