"""
Space schemas.

Dependencies: pydantic
System role: Space API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SpaceCreateRequest(BaseModel):
    """Request schema for creating a space."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=2000)


class SpaceResponse(BaseModel):
    """Space as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: str
    name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime
