"""Tests for document ingestion."""

import pytest
from sqlalchemy import func, select

from app.db.models import Note
from app.services.corpus_resolver import CorpusResolver
from app.services.errors import NotFoundError, ValidationError
from app.services.ingestion import DocumentIngestor


async def _note_count(db) -> int:
    result = await db.execute(select(func.count()).select_from(Note))
    return result.scalar()


async def test_ingest_creates_one_note(db, make_subject, settings):
    subject = await make_subject()

    note = await DocumentIngestor(CorpusResolver("upsert"), settings=settings).ingest(
        db, "user_1", "Algorithms", "sorting.txt", b"Merge sort is stable.", "text/plain"
    )

    assert note.subject_id == subject.id
    assert note.filename == "sorting.txt"
    assert note.mime_type == "text/plain"
    assert note.content == "Merge sort is stable."
    assert await _note_count(db) == 1


async def test_ingest_creates_subject_on_first_use(db, settings):
    note = await DocumentIngestor(CorpusResolver("upsert"), settings=settings).ingest(
        db, "user_1", "Physics", "waves.md", b"# Waves", "text/markdown; charset=utf-8"
    )

    subject = await CorpusResolver("strict").resolve(db, "user_1", "Physics")
    notes = await CorpusResolver().list_notes(db, subject)
    assert [n.id for n in notes] == [note.id]
    assert note.mime_type == "text/markdown"


async def test_strict_policy_rejects_unknown_subject(db, settings):
    with pytest.raises(NotFoundError):
        await DocumentIngestor(CorpusResolver("strict"), settings=settings).ingest(
            db, "user_1", "Nope", "a.txt", b"text", "text/plain"
        )


@pytest.mark.parametrize(
    "filename,data,mime_type",
    [
        ("", b"text", "text/plain"),
        ("empty.txt", b"", "text/plain"),
        ("image.png", b"\x89PNG", "image/png"),
        ("blank.txt", b"   \n", "text/plain"),
    ],
)
async def test_bad_uploads_create_nothing(db, make_subject, settings, filename, data, mime_type):
    await make_subject()

    with pytest.raises(ValidationError):
        await DocumentIngestor(CorpusResolver("upsert"), settings=settings).ingest(
            db, "user_1", "Algorithms", filename, data, mime_type
        )

    assert await _note_count(db) == 0


async def test_oversized_upload_is_rejected(db, make_subject, settings):
    settings.max_upload_size_bytes = 10
    await make_subject()

    with pytest.raises(ValidationError):
        await DocumentIngestor(CorpusResolver("upsert"), settings=settings).ingest(
            db, "user_1", "Algorithms", "big.txt", b"x" * 11, "text/plain"
        )

    assert await _note_count(db) == 0
