"""
Common response models and utilities.

Error schema and a camelCase base model shared by the wire-facing DTOs.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str = Field(description="Error message")
    kind: str | None = Field(default=None, description="Error discriminant, e.g. 'payment'")
    details: str | dict | list | None = Field(default=None, description="Additional error context")


class UsageResponse(BaseModel):
    """Usage document returned by informational GET endpoints."""

    message: str
    usage: str
