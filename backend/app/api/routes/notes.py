"""Note upload and listing routes."""

import logging

from fastapi import APIRouter, File, Form, UploadFile, status

from app.api.deps import CurrentUserId, DbSession, Ingestor, Resolver
from app.schemas.notes import NoteRead, NoteUploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/upload", response_model=NoteUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_note(
    user_id: CurrentUserId,
    db: DbSession,
    ingestor: Ingestor,
    subject_name: str = Form(...),
    file: UploadFile = File(...),
) -> NoteUploadResponse:
    """
    Upload a PDF or text file into a subject.

    The text is extracted immediately; the original file is not kept.
    """
    data = await file.read()
    note = await ingestor.ingest(
        db,
        user_id=user_id,
        subject_name=subject_name,
        filename=file.filename or "",
        data=data,
        mime_type=file.content_type or "",
    )
    return NoteUploadResponse(
        note_id=note.id,
        subject_id=note.subject_id,
        filename=note.filename,
        characters=len(note.content),
    )


@router.get("/", response_model=list[NoteRead])
async def list_notes(
    subject_name: str,
    user_id: CurrentUserId,
    db: DbSession,
    resolver: Resolver,
) -> list[NoteRead]:
    """List the notes uploaded to a subject, oldest first."""
    subject = await resolver.find(db, user_id, subject_name)
    if subject is None:
        return []
    notes = await resolver.list_notes(db, subject)
    return [NoteRead.model_validate(n) for n in notes]
