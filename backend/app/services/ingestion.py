"""Document ingestion: the only write path that creates notes."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.db.models import Note
from app.services.corpus_resolver import CorpusResolver
from app.services.errors import ValidationError
from app.services.text_extractor import TextExtractor

logger = logging.getLogger(__name__)


class DocumentIngestor:
    """Extracts text from an upload and stores it as a note on a subject."""

    def __init__(
        self,
        resolver: CorpusResolver,
        extractor: TextExtractor | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.resolver = resolver
        self.extractor = extractor or TextExtractor()

    async def ingest(
        self,
        db: AsyncSession,
        user_id: str,
        subject_name: str,
        filename: str,
        data: bytes,
        mime_type: str,
    ) -> Note:
        """
        Create exactly one note from an uploaded file.

        Raises:
            ValidationError: Missing filename, empty or oversized file,
                unsupported type, or no extractable text
            NotFoundError: Unknown subject under the strict policy
        """
        filename = (filename or "").strip()
        if not filename:
            raise ValidationError("filename is required")
        if not data:
            raise ValidationError("File is empty", details={"filename": filename})
        if len(data) > self.settings.max_upload_size_bytes:
            raise ValidationError(
                "File is too large",
                details={"filename": filename, "max_bytes": self.settings.max_upload_size_bytes},
            )

        # Extract before touching the database so a bad file creates nothing
        content = self.extractor.extract_text(data, mime_type, filename)
        subject = await self.resolver.resolve(db, user_id, subject_name)

        note = Note(
            subject_id=subject.id,
            filename=filename,
            mime_type=(mime_type or "application/octet-stream").split(";")[0].strip(),
            content=content,
        )
        db.add(note)
        await db.commit()
        await db.refresh(note)

        logger.info(
            'Ingested "%s" into subject "%s" (%s): %d bytes, %d chars',
            filename, subject.name, subject.id, len(data), len(content),
        )
        return note
