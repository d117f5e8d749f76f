"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("ANTHROPIC_API_KEY", "test-key")
os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.deps import get_corpus_resolver, get_text_generator
from app.config import Settings
from app.db.base import Base
from app.db.models import Note, Subject, User
from app.db.session import get_db
from app.main import app
from app.services.corpus_resolver import CorpusResolver
from tests.fakes import FakeGenerator


@pytest.fixture
def settings() -> Settings:
    return Settings(anthropic_api_key="test-key")


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def make_subject(db: AsyncSession) -> Callable:
    """Create a user (if needed), a subject, and optional notes."""

    async def _make(name: str = "Algorithms", user_id: str = "user_1", notes: dict[str, str] | None = None) -> Subject:
        if await db.get(User, user_id) is None:
            db.add(User(id=user_id, email=f"{user_id}@example.com"))
            await db.flush()
        subject = Subject(user_id=user_id, name=name)
        db.add(subject)
        await db.flush()
        for filename, content in (notes or {}).items():
            db.add(Note(subject_id=subject.id, filename=filename, content=content))
            await db.flush()
        await db.commit()
        return subject

    return _make


@pytest.fixture
async def client(session_factory, fake_generator) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_text_generator] = lambda: fake_generator
    app.dependency_overrides[get_corpus_resolver] = lambda: CorpusResolver("upsert")

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-User-Id": "user_1"},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
