"""Shared data model primitives."""

from diverse_select.data_model.base import RecordBaseModel, StrictBaseModel


__all__ = ["RecordBaseModel", "StrictBaseModel"]
