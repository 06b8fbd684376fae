"""Base models and shared configuration.

Example:
    >>> from frcpm.models.base import FrcpmModel
    >>> class Point(FrcpmModel):
    ...     x: int
    >>> Point(x=1).x
    1
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class FrcpmModel(BaseModel):
    """Base model with standard configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )


class ApiModel(BaseModel):
    """Base for payloads from external APIs.

    Unknown fields are ignored so upstream additions never break parsing.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )
