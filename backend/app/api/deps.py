"""
FastAPI dependencies.

Key patterns:
1. get_current_user_id: the identity provider's user id, taken from the
   X-User-Id header. Verifying it is the job of the gateway in front of
   this service.
2. Pipeline services are built once per process and injected, so tests
   can swap the model client through app.dependency_overrides.
3. All subject lookups are scoped by user_id at the SQL level.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.session import get_db
from app.services import (
    AnsweringEngine,
    AnthropicGenerator,
    CorpusResolver,
    DocumentIngestor,
    StudySetGenerator,
    TextGenerator,
)


# =============================================================================
# IDENTITY
# =============================================================================


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the caller's user id, raising 401 when it is missing."""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return x_user_id.strip()


# =============================================================================
# SERVICES
# =============================================================================


@lru_cache
def get_text_generator() -> TextGenerator:
    """Process-wide model client."""
    return AnthropicGenerator(get_settings())


@lru_cache
def get_corpus_resolver() -> CorpusResolver:
    return CorpusResolver(get_settings().corpus_resolution)


def get_answering_engine(
    resolver: Annotated[CorpusResolver, Depends(get_corpus_resolver)],
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
) -> AnsweringEngine:
    return AnsweringEngine(resolver, generator, get_settings())


def get_study_set_generator(
    resolver: Annotated[CorpusResolver, Depends(get_corpus_resolver)],
    generator: Annotated[TextGenerator, Depends(get_text_generator)],
) -> StudySetGenerator:
    return StudySetGenerator(resolver, generator, get_settings())


def get_document_ingestor(
    resolver: Annotated[CorpusResolver, Depends(get_corpus_resolver)],
) -> DocumentIngestor:
    return DocumentIngestor(resolver, settings=get_settings())


# Type aliases for dependency injection
CurrentUserId = Annotated[str, Depends(get_current_user_id)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
Engine = Annotated[AnsweringEngine, Depends(get_answering_engine)]
StudySets = Annotated[StudySetGenerator, Depends(get_study_set_generator)]
Ingestor = Annotated[DocumentIngestor, Depends(get_document_ingestor)]
Resolver = Annotated[CorpusResolver, Depends(get_corpus_resolver)]
