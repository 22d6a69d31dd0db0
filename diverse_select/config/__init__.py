"""Selection policy configuration."""

from diverse_select.config.error_hints import format_validation_error
from diverse_select.config.loader import PolicyValidationError, load_policies
from diverse_select.config.schemas.policies import (
    PoliciesConfig,
    RotationWindow,
    SelectionPolicy,
)


__all__ = [
    "PoliciesConfig",
    "PolicyValidationError",
    "RotationWindow",
    "SelectionPolicy",
    "format_validation_error",
    "load_policies",
]
