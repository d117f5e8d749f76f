"""Practice study-set generation from a subject's notes."""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.db.models import StudySet
from app.schemas.ai import StudySetPayload
from app.services.context_assembler import ContextAssembler
from app.services.corpus_resolver import CorpusResolver
from app.services.errors import InsufficientMaterialError, MalformedGenerationError
from app.services.llm import TextGenerator
from app.services.prompts import build_study_set_prompt

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[ \t]*(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\r?\n?```$")


def strip_code_fences(text: str) -> str:
    """Remove an optional ```json / ``` wrapper around model output."""
    text = text.strip()
    text = _OPENING_FENCE.sub("", text, count=1)
    text = _CLOSING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_study_set(text: str) -> dict[str, Any]:
    """
    Decode and validate the model's study-set JSON.

    Returns the decoded object exactly as the model produced it.

    Raises:
        MalformedGenerationError: Not JSON, not an object, or wrong shape
    """
    raw = strip_code_fences(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedGenerationError(
            "Model response is not valid JSON", details={"error": str(e)}
        ) from e

    if not isinstance(data, dict):
        raise MalformedGenerationError("Model response is not a JSON object")

    try:
        StudySetPayload.model_validate(data)
    except PydanticValidationError as e:
        raise MalformedGenerationError(
            "Model response does not match the study set format",
            details={"errors": e.errors(include_url=False, include_context=False, include_input=False)},
        ) from e
    return data


class StudySetGenerator:
    """Generates, validates and stores MCQ/short-answer sets."""

    def __init__(self, resolver: CorpusResolver, generator: TextGenerator, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.resolver = resolver
        self.generator = generator
        self.assembler = ContextAssembler(
            self.settings.study_set_context_max_chars, self.settings.context_truncation
        )

    async def generate(self, db: AsyncSession, user_id: str, subject_name: str) -> dict[str, Any]:
        """
        Generate a study set for a subject and persist it.

        Args:
            db: Database session
            user_id: Identity provider user id
            subject_name: Subject to draw questions from

        Returns:
            The study set payload ({"mcqs": [...], "shortAnswers": [...]})

        Raises:
            InsufficientMaterialError: The subject has no notes
            MalformedGenerationError: The model output could not be parsed
            UpstreamRateLimitError, UpstreamFailureError: Model call failed
        """
        subject = await self.resolver.resolve(db, user_id, subject_name)
        notes = await self.resolver.list_notes(db, subject)
        if not notes:
            raise InsufficientMaterialError(
                "No notes found. Upload files first.",
                details={"subject_name": subject.name},
            )

        context = self.assembler.assemble(notes)
        text = await self.generator.generate(build_study_set_prompt(context, subject.name))

        try:
            payload = parse_study_set(text)
        except MalformedGenerationError:
            logger.error('Unparseable study set for subject "%s" (%s): %.200r', subject.name, subject.id, text)
            raise

        study_set = StudySet(subject_id=subject.id, data=payload)
        db.add(study_set)
        await db.commit()

        logger.info(
            'Stored study set %s for subject "%s": %d MCQs, %d short answers',
            study_set.id, subject.name, len(payload["mcqs"]), len(payload["shortAnswers"]),
        )
        return payload

    async def list_study_sets(self, db: AsyncSession, user_id: str, subject_name: str) -> list[StudySet]:
        """Previously generated sets for a subject, newest first."""
        subject = await self.resolver.find(db, user_id, subject_name)
        if subject is None:
            return []
        stmt = (
            select(StudySet)
            .where(StudySet.subject_id == subject.id)
            .order_by(StudySet.created_at.desc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())
