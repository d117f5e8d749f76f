"""Resolves the subject whose notes ground a request."""

import logging
from typing import Literal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import Note, Subject, User
from app.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ResolutionPolicy = Literal["strict", "upsert"]


class CorpusResolver:
    """
    Looks up a subject by (user_id, name).

    With the "strict" policy a missing subject is an error. With "upsert"
    the user and subject are created on first reference. The unique
    constraint on (user_id, name) is what prevents duplicates; losing a
    creation race is handled by re-reading the winner's row.
    """

    def __init__(self, policy: ResolutionPolicy = "upsert"):
        if policy not in ("strict", "upsert"):
            raise ValueError(f"Unknown resolution policy: {policy}")
        self.policy = policy

    async def resolve(self, db: AsyncSession, user_id: str, subject_name: str) -> Subject:
        """
        Get the subject for a user, creating it in upsert mode.

        Only write paths (ask, upload, study-set generation) should call this.

        Args:
            db: Database session
            user_id: Identity provider user id
            subject_name: Display name of the subject

        Returns:
            Subject instance

        Raises:
            ValidationError: Blank user id or subject name
            NotFoundError: Subject missing under the strict policy
        """
        user_id, subject_name = self._clean(user_id, subject_name)

        subject = await self._find_subject(db, user_id, subject_name)
        if subject is not None:
            return subject

        if self.policy == "strict":
            raise self._not_found(subject_name)

        await self._ensure_user(db, user_id)
        return await self._create_subject(db, user_id, subject_name)

    async def find(self, db: AsyncSession, user_id: str, subject_name: str) -> Subject | None:
        """
        Look up a subject without ever creating one.

        Returns None for an unknown subject under the upsert policy, since
        it would be created empty on first write.

        Raises:
            ValidationError: Blank user id or subject name
            NotFoundError: Subject missing under the strict policy
        """
        user_id, subject_name = self._clean(user_id, subject_name)
        subject = await self._find_subject(db, user_id, subject_name)
        if subject is None and self.policy == "strict":
            raise self._not_found(subject_name)
        return subject

    async def list_notes(self, db: AsyncSession, subject: Subject) -> list[Note]:
        """Return the subject's notes in upload order."""
        stmt = (
            select(Note)
            .where(Note.subject_id == subject.id)
            .order_by(Note.created_at.asc(), Note.filename.asc())
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _clean(user_id: str, subject_name: str) -> tuple[str, str]:
        user_id = (user_id or "").strip()
        subject_name = (subject_name or "").strip()
        if not user_id:
            raise ValidationError("user id is required")
        if not subject_name:
            raise ValidationError("subject name is required")
        return user_id, subject_name

    @staticmethod
    def _not_found(subject_name: str) -> NotFoundError:
        return NotFoundError(
            f'Subject "{subject_name}" not found',
            details={"subject_name": subject_name},
        )

    @staticmethod
    async def _find_subject(db: AsyncSession, user_id: str, subject_name: str) -> Subject | None:
        stmt = select(Subject).where(Subject.user_id == user_id, Subject.name == subject_name)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def _ensure_user(self, db: AsyncSession, user_id: str) -> None:
        if await db.get(User, user_id) is not None:
            return
        db.add(User(id=user_id))
        try:
            await db.commit()
            logger.info("Created placeholder user %s", user_id)
        except IntegrityError:
            await db.rollback()
            logger.warning("User %s was created concurrently, reusing it", user_id)

    async def _create_subject(self, db: AsyncSession, user_id: str, subject_name: str) -> Subject:
        subject = Subject(user_id=user_id, name=subject_name)
        db.add(subject)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning('Subject "%s" for user %s was created concurrently, re-fetching', subject_name, user_id)
            existing = await self._find_subject(db, user_id, subject_name)
            if existing is None:
                raise
            return existing

        await db.refresh(subject)
        logger.info('Created subject "%s" (%s) for user %s', subject_name, subject.id, user_id)
        return subject
