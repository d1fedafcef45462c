"""
SQLAlchemy 2.0 Models for NoteTutor.

Uses modern declarative syntax with Mapped[] type annotations.
Entity ids are UUIDs; owner ids are the opaque strings issued by the
identity provider. There are deliberately no foreign keys between the
entity tables: ownership is a plain `user_id` column that every query
filters on, and a chat or note only references its subject by id.

Column types are dialect-neutral so the same models run on Postgres
(production) and SQLite (tests).
"""

from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notetutor.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class ChatRole(str, PyEnum):
    """Role in chat conversation."""

    USER = "user"
    ASSISTANT = "assistant"


# =============================================================================
# MODELS
# =============================================================================


class Subject(Base):
    """
    User-defined topic grouping notes, chats, and quizzes.

    `user_id` is set once from the verified caller and never updated.
    """

    __tablename__ = "subjects"
    __table_args__ = (Index("idx_subjects_user_created_at", "user_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Note(Base):
    """
    Study note belonging to one subject.

    Content is plain text (typed, or extracted from an uploaded PDF/Word file).
    """

    __tablename__ = "notes"
    __table_args__ = (
        Index("idx_notes_subject_user_created_at", "subject_id", "user_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    subject_id: Mapped[UUID] = mapped_column(Uuid(), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class Chat(Base):
    """
    Tutor conversation for a (subject, user) pair.

    The pair is unique only by convention: chats are resolved with a
    lookup followed by an insert, so two concurrent first messages can
    create two rows. Readers pick the oldest.
    """

    __tablename__ = "chats"
    __table_args__ = (Index("idx_chats_subject_user", "subject_id", "user_id"),)

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    subject_id: Mapped[UUID] = mapped_column(Uuid(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage", back_populates="chat", order_by="ChatMessage.created_at"
    )


class ChatMessage(Base):
    """
    Individual message in a chat. Append-only.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (Index("idx_chat_messages_chat_created_at", "chat_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    chat_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("chats.id"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)  # 'user' or 'assistant'
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    # Relationships
    chat: Mapped["Chat"] = relationship("Chat", back_populates="messages")


class Quiz(Base):
    """
    Generated multiple-choice quiz. Immutable once created.

    `questions` holds exactly ten validated question objects in wire shape:
    {"q", "options", "answerIndex", "explanation"}.
    """

    __tablename__ = "quizzes"
    __table_args__ = (
        Index("idx_quizzes_subject_user_created_at", "subject_id", "user_id", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    subject_id: Mapped[UUID] = mapped_column(Uuid(), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
