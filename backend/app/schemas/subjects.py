"""Subject schemas."""

from pydantic import BaseModel, EmailStr, Field

from app.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class SubjectInitRequest(BaseModel):
    """One-time subject setup."""

    subjects: list[str] = Field(..., max_length=20)
    email: EmailStr | None = None


class SubjectRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Schema for reading subject data."""

    user_id: str
    name: str
    conversation_title: str | None = None


class SubjectWithCount(SubjectRead):
    """Subject with the number of uploaded notes."""

    note_count: int = 0


class SubjectListResponse(BaseModel):
    """List of subjects."""

    subjects: list[SubjectWithCount]
