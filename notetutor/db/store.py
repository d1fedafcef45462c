"""
Content store: persistence helpers over one database session.

Every query is scoped by owner (`user_id`) where the entity has one.
Writes commit immediately, so each append is durable on its own and a
later failure in the same request does not undo it.
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notetutor.db.models import Chat, ChatMessage, ChatRole, Note, Quiz, Subject


class ContentStore:
    """Keyed collections of subjects, notes, chats, chat messages and quizzes."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _add(self, obj):
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def _get_owned(self, model: type, resource_id: UUID, user_id: str):
        result = await self.db.execute(
            select(model).where(model.id == resource_id, model.user_id == user_id)
        )
        return result.scalar_one_or_none()

    # =========================================================================
    # SUBJECTS
    # =========================================================================

    async def list_subjects(self, user_id: str) -> Sequence[Subject]:
        result = await self.db.execute(
            select(Subject)
            .where(Subject.user_id == user_id)
            .order_by(Subject.created_at.desc())
        )
        return result.scalars().all()

    async def get_subject(self, subject_id: UUID, user_id: str) -> Subject | None:
        return await self._get_owned(Subject, subject_id, user_id)

    async def create_subject(self, user_id: str, title: str) -> Subject:
        return await self._add(Subject(user_id=user_id, title=title))

    async def delete_subject(self, subject: Subject) -> None:
        """Delete the subject row only; its notes, chats and quizzes stay."""
        await self.db.delete(subject)
        await self.db.commit()

    # =========================================================================
    # NOTES
    # =========================================================================

    async def list_notes(self, subject_id: UUID, user_id: str) -> Sequence[Note]:
        result = await self.db.execute(
            select(Note)
            .where(Note.subject_id == subject_id, Note.user_id == user_id)
            .order_by(Note.created_at.desc())
        )
        return result.scalars().all()

    async def latest_notes(self, subject_id: UUID, user_id: str, count: int) -> Sequence[Note]:
        """Up to `count` most recently created notes, newest first."""
        result = await self.db.execute(
            select(Note)
            .where(Note.subject_id == subject_id, Note.user_id == user_id)
            .order_by(Note.created_at.desc())
            .limit(count)
        )
        return result.scalars().all()

    async def get_note(self, note_id: UUID, user_id: str) -> Note | None:
        return await self._get_owned(Note, note_id, user_id)

    async def create_note(self, user_id: str, subject_id: UUID, title: str, content: str) -> Note:
        return await self._add(
            Note(user_id=user_id, subject_id=subject_id, title=title, content=content)
        )

    async def delete_note(self, note: Note) -> None:
        await self.db.delete(note)
        await self.db.commit()

    # =========================================================================
    # CHATS
    # =========================================================================

    async def find_chat(self, subject_id: UUID, user_id: str) -> Chat | None:
        """Oldest chat for the pair, if any."""
        result = await self.db.execute(
            select(Chat)
            .where(Chat.subject_id == subject_id, Chat.user_id == user_id)
            .order_by(Chat.created_at.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create_chat(self, subject_id: UUID, user_id: str) -> Chat:
        return await self._add(Chat(subject_id=subject_id, user_id=user_id))

    async def get_or_create_chat(self, subject_id: UUID, user_id: str) -> Chat:
        """
        Resolve the chat for (subject, user), creating it when absent.

        Not atomic: two concurrent callers can both miss the lookup and
        each insert a chat. Upgrading this needs an insert-if-absent on a
        unique (subject_id, user_id) key.
        """
        chat = await self.find_chat(subject_id, user_id)
        if chat is not None:
            return chat
        return await self.create_chat(subject_id, user_id)

    # =========================================================================
    # CHAT MESSAGES
    # =========================================================================

    async def add_chat_message(self, chat_id: UUID, role: ChatRole, content: str) -> ChatMessage:
        return await self._add(ChatMessage(chat_id=chat_id, role=role.value, content=content))

    async def recent_chat_messages(self, chat_id: UUID, count: int) -> list[ChatMessage]:
        """Up to `count` most recent messages, oldest first."""
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id)
            .order_by(ChatMessage.created_at.desc())
            .limit(count)
        )
        messages = list(result.scalars().all())
        messages.reverse()
        return messages

    # =========================================================================
    # QUIZZES
    # =========================================================================

    async def create_quiz(
        self,
        user_id: str,
        subject_id: UUID,
        title: str,
        questions: list[dict[str, Any]],
    ) -> Quiz:
        return await self._add(
            Quiz(user_id=user_id, subject_id=subject_id, title=title, questions=questions)
        )

    async def list_quizzes(self, subject_id: UUID, user_id: str) -> Sequence[Quiz]:
        result = await self.db.execute(
            select(Quiz)
            .where(Quiz.subject_id == subject_id, Quiz.user_id == user_id)
            .order_by(Quiz.created_at.desc())
        )
        return result.scalars().all()

    async def get_quiz(self, quiz_id: UUID, user_id: str) -> Quiz | None:
        return await self._get_owned(Quiz, quiz_id, user_id)
