"""
SQLAlchemy 2.0 Models for AskMyNotes.

Uses modern declarative syntax with Mapped[] type annotations.
A Subject is the scope for grounding: it owns its notes, its conversation
turns and its generated study sets.
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    TIMESTAMP,
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class TurnRole(str, PyEnum):
    """Role of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# MODELS
# =============================================================================


class User(Base):
    """
    Student account.

    The primary key is the opaque id issued by the identity provider, so
    every other table can be keyed by it without a lookup.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    # Relationships
    subjects: Mapped[list["Subject"]] = relationship(
        "Subject", back_populates="user", cascade="all, delete-orphan"
    )


class Subject(Base):
    """
    Course subject owned by one user.

    Names are unique per user at the database level; the corpus resolver
    relies on that constraint to make upsert-on-first-use race safe.
    """

    __tablename__ = "subjects"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="unique_user_subject_name"),
        Index("idx_subjects_user_id", "user_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    conversation_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="subjects")
    notes: Mapped[list["Note"]] = relationship(
        "Note", back_populates="subject", cascade="all, delete-orphan", passive_deletes=True
    )
    turns: Mapped[list["ConversationTurn"]] = relationship(
        "ConversationTurn", back_populates="subject", cascade="all, delete-orphan", passive_deletes=True
    )
    study_sets: Mapped[list["StudySet"]] = relationship(
        "StudySet", back_populates="subject", cascade="all, delete-orphan", passive_deletes=True
    )


class Note(Base):
    """
    Uploaded course material with its extracted plain text.

    Notes are append-only: created once by ingestion and never updated.
    """

    __tablename__ = "notes"
    __table_args__ = (Index("idx_notes_subject_created_at", "subject_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    subject_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False, server_default="text/plain")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    subject: Mapped["Subject"] = relationship("Subject", back_populates="notes")


class ConversationTurn(Base):
    """
    One question or answer in a subject's conversation.

    created_at is assigned by the application so the assistant turn of a
    pair is always strictly later than the user turn.
    """

    __tablename__ = "conversation_turns"
    __table_args__ = (
        Index("idx_conversation_turns_subject_created_at", "subject_id", "created_at"),
        CheckConstraint("role IN ('user', 'assistant')", name="valid_turn_role"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    subject_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # 'user' or 'assistant'
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    subject: Mapped["Subject"] = relationship("Subject", back_populates="turns")


class StudySet(Base):
    """Generated practice set (MCQs and short answers), stored as returned by the model."""

    __tablename__ = "study_sets"
    __table_args__ = (Index("idx_study_sets_subject_created_at", "subject_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    subject_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False
    )
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    subject: Mapped["Subject"] = relationship("Subject", back_populates="study_sets")
