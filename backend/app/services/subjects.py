"""User sync and one-time subject setup."""

import logging
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Note, Subject, User
from app.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


async def sync_user(db: AsyncSession, user_id: str, email: str | None = None) -> User:
    """Create the user on first sign-in, or refresh their email."""
    user = await db.get(User, user_id)
    if user is None:
        db.add(User(id=user_id, email=email))
        try:
            await db.commit()
            logger.info("Created user %s", user_id)
        except IntegrityError:
            await db.rollback()
            logger.warning("User %s was created concurrently, reusing it", user_id)
        user = await db.get(User, user_id, populate_existing=True)
        if user is None:
            raise NotFoundError(f"User {user_id} could not be created")
    if email is not None and user.email != email:
        user.email = email
    await db.commit()
    await db.refresh(user)
    return user


async def count_subjects(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(select(func.count()).select_from(Subject).where(Subject.user_id == user_id))
    return result.scalar() or 0


async def init_subjects(
    db: AsyncSession,
    user_id: str,
    names: Sequence[str],
    required: int,
    email: str | None = None,
) -> list[Subject]:
    """
    Create the user's subjects in one go.

    Raises:
        ValidationError: Wrong number of names, blank or duplicate names,
            or subjects already set up for this user
    """
    cleaned = [name.strip() for name in names]
    if len(cleaned) != required:
        raise ValidationError(f"Exactly {required} subjects required", details={"received": len(cleaned)})
    if any(not name for name in cleaned):
        raise ValidationError("Subject names cannot be blank")
    if len(set(cleaned)) != len(cleaned):
        raise ValidationError("Subject names must be distinct")

    await sync_user(db, user_id, email)
    if await count_subjects(db, user_id) > 0:
        raise ValidationError("Subjects already initialized for this user")

    subjects = [Subject(user_id=user_id, name=name) for name in cleaned]
    db.add_all(subjects)
    await db.commit()
    for subject in subjects:
        await db.refresh(subject)

    logger.info("Initialized %d subjects for user %s", len(subjects), user_id)
    return subjects


async def list_subjects_with_counts(db: AsyncSession, user_id: str) -> list[tuple[Subject, int]]:
    """All subjects of a user with the number of notes in each."""
    stmt = (
        select(Subject, func.count(Note.id))
        .outerjoin(Note, Note.subject_id == Subject.id)
        .where(Subject.user_id == user_id)
        .group_by(Subject.id)
        .order_by(Subject.created_at.asc(), Subject.name.asc())
    )
    result = await db.execute(stmt)
    return [(subject, count) for subject, count in result.all()]
