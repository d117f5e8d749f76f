"""Initial schema: users, subjects, notes, conversation turns, study sets.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # USERS TABLE
    # ==========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.String(255), primary_key=True),  # identity provider id
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.Column("updated_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )

    # ==========================================================================
    # SUBJECTS TABLE
    # ==========================================================================
    op.create_table(
        "subjects",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("user_id", sa.String(255), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("conversation_title", sa.String(255), nullable=True),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
        sa.UniqueConstraint("user_id", "name", name="unique_user_subject_name"),
    )
    op.create_index("idx_subjects_user_id", "subjects", ["user_id"])

    # ==========================================================================
    # NOTES TABLE
    # ==========================================================================
    op.create_table(
        "notes",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("subject_id", UUID(as_uuid=True), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False, server_default="text/plain"),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("idx_notes_subject_created_at", "notes", ["subject_id", "created_at"])

    # ==========================================================================
    # CONVERSATION TURNS TABLE
    # ==========================================================================
    op.create_table(
        "conversation_turns",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("subject_id", UUID(as_uuid=True), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),  # 'user' or 'assistant'
        sa.Column("content", sa.Text(), nullable=False),
        # Set by the application so a pair is strictly ordered
        sa.Column("created_at", TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("role IN ('user', 'assistant')", name="valid_turn_role"),
    )
    op.create_index(
        "idx_conversation_turns_subject_created_at", "conversation_turns", ["subject_id", "created_at"]
    )

    # ==========================================================================
    # STUDY SETS TABLE
    # ==========================================================================
    op.create_table(
        "study_sets",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("subject_id", UUID(as_uuid=True), sa.ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("data", JSONB(), nullable=False),
        sa.Column("created_at", TIMESTAMP(timezone=True), server_default=sa.text("NOW()"), nullable=False),
    )
    op.create_index("idx_study_sets_subject_created_at", "study_sets", ["subject_id", "created_at"])


def downgrade() -> None:
    op.drop_index("idx_study_sets_subject_created_at", table_name="study_sets")
    op.drop_table("study_sets")

    op.drop_index("idx_conversation_turns_subject_created_at", table_name="conversation_turns")
    op.drop_table("conversation_turns")

    op.drop_index("idx_notes_subject_created_at", table_name="notes")
    op.drop_table("notes")

    op.drop_index("idx_subjects_user_id", table_name="subjects")
    op.drop_table("subjects")

    op.drop_table("users")
