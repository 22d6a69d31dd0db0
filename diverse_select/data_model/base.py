"""Shared Pydantic base models for requests, policies and input records."""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Immutable model that rejects unknown fields.

    Used for anything the caller writes by hand (requests, policy files),
    where an unknown key is almost always a typo.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")


class RecordBaseModel(BaseModel):
    """Immutable model that drops unknown fields.

    Used for rows loaded from upstream tables, which carry columns the
    selector does not read.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")
