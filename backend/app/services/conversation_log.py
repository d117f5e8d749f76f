"""Append-only question/answer log per subject."""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import ConversationTurn, TurnRole

logger = logging.getLogger(__name__)


def make_turn_pair(subject_id: UUID, question: str, answer: str) -> list[ConversationTurn]:
    """Build a user/assistant pair whose timestamps are strictly increasing."""
    asked_at = datetime.now(timezone.utc)
    return [
        ConversationTurn(subject_id=subject_id, role=TurnRole.USER.value, content=question, created_at=asked_at),
        ConversationTurn(
            subject_id=subject_id,
            role=TurnRole.ASSISTANT.value,
            content=answer,
            created_at=asked_at + timedelta(microseconds=1),
        ),
    ]


class ConversationLog:
    """Reads and appends conversation turns for a subject."""

    async def append(self, db: AsyncSession, turns: Sequence[ConversationTurn]) -> None:
        """Persist a batch of turns in a single commit, or none of them."""
        try:
            db.add_all(list(turns))
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Failed to append %d conversation turns", len(turns))
            raise

    async def recent_history(self, db: AsyncSession, subject_id: UUID, limit: int) -> list[ConversationTurn]:
        """
        Return the `limit` most recent turns, oldest first.

        The newest turns are selected in descending order and then reversed
        so prompts always see chronological history.
        """
        if limit <= 0:
            return []
        stmt = (
            select(ConversationTurn)
            .where(ConversationTurn.subject_id == subject_id)
            .order_by(ConversationTurn.created_at.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        turns = list(result.scalars().all())
        turns.reverse()
        return turns

    async def full_history(self, db: AsyncSession, subject_id: UUID, limit: int) -> list[ConversationTurn]:
        """Return up to `limit` turns from the start of the conversation."""
        stmt = (
            select(ConversationTurn)
            .where(ConversationTurn.subject_id == subject_id)
            .order_by(ConversationTurn.created_at.asc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return list(result.scalars().all())


# Singleton instance
conversation_log = ConversationLog()
