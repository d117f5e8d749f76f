"""Async engine and per-request sessions."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import Settings, get_settings


def engine_options(settings: Settings) -> dict[str, Any]:
    """Engine keyword arguments for the configured database."""
    options: dict[str, Any] = {"echo": settings.debug, "pool_pre_ping": True}
    # Pool sizing only applies to Postgres; SQLite keeps SQLAlchemy's default pool
    if settings.database_url.startswith("postgresql"):
        options.update(pool_size=5, max_overflow=10)
    if settings.database_requires_ssl:
        options["connect_args"] = {"ssl": "require"}
    return options


settings = get_settings()
engine = create_async_engine(settings.database_url, **engine_options(settings))

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own units of work; anything left pending is
    committed when the request succeeds and rolled back when it fails.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
