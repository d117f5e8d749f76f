"""Tests for the append-only conversation log."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.db.models import ConversationTurn
from app.services.conversation_log import ConversationLog, make_turn_pair


async def _seed_turns(db, subject, count: int) -> None:
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    # Insert newest first so insertion order differs from time order
    for i in reversed(range(count)):
        db.add(
            ConversationTurn(
                subject_id=subject.id,
                role="user" if i % 2 == 0 else "assistant",
                content=f"turn {i}",
                created_at=start + timedelta(minutes=i),
            )
        )
    await db.commit()


async def test_recent_history_returns_latest_turns_oldest_first(db, make_subject):
    subject = await make_subject()
    await _seed_turns(db, subject, 15)

    history = await ConversationLog().recent_history(db, subject.id, 10)

    assert [t.content for t in history] == [f"turn {i}" for i in range(5, 15)]
    times = [t.created_at for t in history]
    assert times == sorted(times)
    assert len(set(times)) == len(times)


@pytest.mark.parametrize("limit", [0, 1, 3, 20])
async def test_recent_history_never_exceeds_limit(db, make_subject, limit):
    subject = await make_subject()
    await _seed_turns(db, subject, 6)

    history = await ConversationLog().recent_history(db, subject.id, limit)

    assert len(history) == min(limit, 6)


async def test_history_is_scoped_to_subject(db, make_subject):
    algorithms = await make_subject("Algorithms")
    physics = await make_subject("Physics")
    await _seed_turns(db, algorithms, 4)

    assert await ConversationLog().recent_history(db, physics.id, 10) == []


async def test_full_history_is_chronological(db, make_subject):
    subject = await make_subject()
    await _seed_turns(db, subject, 5)

    history = await ConversationLog().full_history(db, subject.id, 3)

    assert [t.content for t in history] == ["turn 0", "turn 1", "turn 2"]


async def test_turn_pair_is_strictly_ordered(make_subject):
    subject = await make_subject()

    user_turn, assistant_turn = make_turn_pair(subject.id, "q", "a")

    assert (user_turn.role, assistant_turn.role) == ("user", "assistant")
    assert assistant_turn.created_at > user_turn.created_at


async def test_append_is_all_or_nothing(db, make_subject):
    subject = await make_subject()
    good, _ = make_turn_pair(subject.id, "question", "answer")
    bad = ConversationTurn(subject_id=subject.id, role="assistant", content=None)

    with pytest.raises(Exception):
        await ConversationLog().append(db, [good, bad])

    result = await db.execute(select(func.count()).select_from(ConversationTurn))
    assert result.scalar() == 0
