"""User schemas."""

from pydantic import BaseModel, EmailStr

from app.schemas.base import BaseSchema, CreatedAtMixin


class UserSyncRequest(BaseModel):
    """Profile details forwarded from the identity provider."""

    email: EmailStr | None = None


class UserRead(BaseSchema, CreatedAtMixin):
    """Schema for reading user data."""

    id: str
    email: str | None


class UserSyncResponse(BaseModel):
    """Synced user and whether subject setup is complete."""

    user: UserRead
    has_subjects: bool
