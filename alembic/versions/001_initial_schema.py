"""Initial schema.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18

Creates:
- subjects, notes, chats, chat_messages, quizzes
- Indexes backing the owner/subject filters and created_at ordering

No foreign keys between entity tables except chat_messages -> chats:
ownership is the user_id column, compared against the verified caller.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==========================================================================
    # SUBJECTS TABLE
    # ==========================================================================
    op.create_table(
        "subjects",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_subjects_user_created_at", "subjects", ["user_id", "created_at"])

    # ==========================================================================
    # NOTES TABLE
    # ==========================================================================
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_notes_subject_user_created_at", "notes", ["subject_id", "user_id", "created_at"]
    )

    # ==========================================================================
    # CHATS TABLE
    # ==========================================================================
    # (subject_id, user_id) is intentionally NOT unique; see Chat model docstring
    op.create_table(
        "chats",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_chats_subject_user", "chats", ["subject_id", "user_id"])

    # ==========================================================================
    # CHAT MESSAGES TABLE
    # ==========================================================================
    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("chat_id", sa.Uuid(), sa.ForeignKey("chats.id"), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),  # 'user' or 'assistant'
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_chat_messages_chat_created_at", "chat_messages", ["chat_id", "created_at"]
    )

    # ==========================================================================
    # QUIZZES TABLE
    # ==========================================================================
    op.create_table(
        "quizzes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("subject_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("questions", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_quizzes_subject_user_created_at", "quizzes", ["subject_id", "user_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("idx_quizzes_subject_user_created_at", table_name="quizzes")
    op.drop_table("quizzes")
    op.drop_index("idx_chat_messages_chat_created_at", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("idx_chats_subject_user", table_name="chats")
    op.drop_table("chats")
    op.drop_index("idx_notes_subject_user_created_at", table_name="notes")
    op.drop_table("notes")
    op.drop_index("idx_subjects_user_created_at", table_name="subjects")
    op.drop_table("subjects")
