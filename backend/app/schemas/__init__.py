"""Pydantic schemas for API request/response validation."""

from app.schemas.user import UserRead, UserSyncRequest, UserSyncResponse
from app.schemas.subjects import SubjectInitRequest, SubjectListResponse, SubjectRead, SubjectWithCount
from app.schemas.notes import NoteRead, NoteUploadResponse
from app.schemas.ai import (
    AskRequest,
    AskResponse,
    ConversationTurnResponse,
    HistoryResponse,
    StudySetListResponse,
    StudySetPayload,
    StudySetRequest,
    StudySetResponse,
)

__all__ = [
    # User
    "UserRead",
    "UserSyncRequest",
    "UserSyncResponse",
    # Subjects
    "SubjectInitRequest",
    "SubjectListResponse",
    "SubjectRead",
    "SubjectWithCount",
    # Notes
    "NoteRead",
    "NoteUploadResponse",
    # AI
    "AskRequest",
    "AskResponse",
    "ConversationTurnResponse",
    "HistoryResponse",
    "StudySetListResponse",
    "StudySetPayload",
    "StudySetRequest",
    "StudySetResponse",
]
