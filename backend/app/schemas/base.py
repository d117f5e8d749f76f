"""Shared configuration for schemas read straight from ORM rows."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Response schema populated from SQLAlchemy attributes."""

    # Note and turn text is returned exactly as stored
    model_config = ConfigDict(from_attributes=True)


class IDMixin(BaseModel):
    """UUID primary key."""

    id: UUID


class CreatedAtMixin(BaseModel):
    """Creation time, the ordering key for notes, turns and study sets."""

    created_at: datetime
