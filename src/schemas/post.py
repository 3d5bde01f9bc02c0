"""Post schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Create a new post."""

    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)


class PostUpdate(BaseModel):
    """Update a post. Omitted or empty fields keep their current value."""

    title: str | None = Field(None, max_length=255)
    body: str | None = None


class PostResponse(BaseModel):
    """Post response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    body: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    msg: str
