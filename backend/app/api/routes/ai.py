"""API routes for grounded answers, history and study sets."""

from typing import Any

from fastapi import APIRouter

from app.api.deps import CurrentUserId, DbSession, Engine, StudySets
from app.schemas.ai import (
    AskRequest,
    AskResponse,
    ConversationTurnResponse,
    HistoryResponse,
    StudySetListResponse,
    StudySetRequest,
    StudySetResponse,
)

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    user_id: CurrentUserId,
    db: DbSession,
    engine: Engine,
) -> AskResponse:
    """
    Answer a question using only the subject's notes.

    Returns a fixed message (not an error) when nothing has been uploaded.
    Model failures surface as 429 (rate limited) or 502.
    """
    result = await engine.ask(db, user_id, request.subject_name, request.question)
    return AskResponse(answer=result.answer)


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    subject_name: str,
    user_id: CurrentUserId,
    db: DbSession,
    engine: Engine,
) -> HistoryResponse:
    """Get the subject's conversation, oldest first."""
    turns = await engine.history(db, user_id, subject_name)
    return HistoryResponse(history=[ConversationTurnResponse.model_validate(t) for t in turns])


@router.post("/study-tasks")
async def generate_study_tasks(
    request: StudySetRequest,
    user_id: CurrentUserId,
    db: DbSession,
    generator: StudySets,
) -> dict[str, Any]:
    """
    Generate MCQs and short-answer questions from the subject's notes.

    Responds 400 when the subject has no notes and 502 when the model output
    cannot be parsed.
    """
    return await generator.generate(db, user_id, request.subject_name)


@router.get("/study-sets", response_model=StudySetListResponse)
async def list_study_sets(
    subject_name: str,
    user_id: CurrentUserId,
    db: DbSession,
    generator: StudySets,
) -> StudySetListResponse:
    """List previously generated study sets, newest first."""
    study_sets = await generator.list_study_sets(db, user_id, subject_name)
    return StudySetListResponse(
        study_sets=[StudySetResponse.model_validate(s) for s in study_sets],
        total=len(study_sets),
    )
