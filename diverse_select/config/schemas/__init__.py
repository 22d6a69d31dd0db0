"""Configuration schemas."""

from diverse_select.config.schemas.policies import (
    PoliciesConfig,
    RotationWindow,
    SelectionPolicy,
)


__all__ = ["PoliciesConfig", "RotationWindow", "SelectionPolicy"]
