"""
Common response models and utilities.

Generic list wrapper and the error envelope returned by every handler.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ListResponse(BaseModel, Generic[T]):
    """Generic list wrapper."""

    items: list[T]
    total: int


class ErrorBody(BaseModel):
    """Stable error code plus user-facing message."""

    code: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional error context")


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: ErrorBody
