"""Note schemas."""

from uuid import UUID

from pydantic import BaseModel

from app.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class NoteRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Note metadata (content is only ever used as model context)."""

    subject_id: UUID
    filename: str
    mime_type: str


class NoteUploadResponse(BaseModel):
    """Result of ingesting one file."""

    note_id: UUID
    subject_id: UUID
    filename: str
    characters: int
