"""Pydantic schemas for grounded Q&A and study sets."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


# Request schemas
class AskRequest(BaseModel):
    """Request to ask a question about a subject's notes."""

    subject_name: str = Field(..., min_length=1, max_length=255)
    question: str = Field(..., min_length=1, max_length=10000)


class StudySetRequest(BaseModel):
    """Request to generate a study set."""

    subject_name: str = Field(..., min_length=1, max_length=255)


# Response schemas
class AskResponse(BaseModel):
    """Answer text."""

    answer: str


class ConversationTurnResponse(BaseSchema, CreatedAtMixin):
    """One turn of the conversation log."""

    role: str
    content: str


class HistoryResponse(BaseModel):
    """Chronological conversation for a subject."""

    history: list[ConversationTurnResponse]


# Study set payload (field names match the JSON the model is asked to produce)
class MultipleChoiceQuestion(BaseModel):
    """MCQ with four options and the index of the correct one."""

    model_config = ConfigDict(extra="allow")

    q: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=4, max_length=4)
    answer: int = Field(..., ge=0, le=3, strict=True)
    explanation: str | None = None


class ShortAnswerQuestion(BaseModel):
    """Open question with a model answer citing its source."""

    model_config = ConfigDict(extra="allow")

    q: str = Field(..., min_length=1)
    model: str


class StudySetPayload(BaseModel):
    """Structured output of study-set generation."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    mcqs: list[MultipleChoiceQuestion]
    short_answers: list[ShortAnswerQuestion] = Field(..., alias="shortAnswers")


class StudySetResponse(BaseSchema, IDMixin, CreatedAtMixin):
    """Persisted study set."""

    subject_id: UUID
    data: dict[str, Any]


class StudySetListResponse(BaseModel):
    """Persisted study sets, newest first."""

    study_sets: list[StudySetResponse]
    total: int
