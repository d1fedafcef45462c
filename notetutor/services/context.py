"""Grounding context assembly from stored notes and chat history."""

from collections.abc import Sequence
from uuid import UUID

from notetutor.db.models import ChatMessage, Note
from notetutor.db.store import ContentStore

NO_NOTES_PLACEHOLDER = "No notes available yet."
NO_HISTORY_PLACEHOLDER = "No previous conversation."

CHAT_NOTE_SEPARATOR = "\n\n"
QUIZ_NOTE_SEPARATOR = "\n\n---\n\n"

HISTORY_WINDOW = 10


def render_notes(notes: Sequence[Note], separator: str = CHAT_NOTE_SEPARATOR) -> str:
    """Render notes as "Title/Content" blocks; never returns an empty string."""
    blocks = [f"Title: {note.title}\nContent: {note.content}" for note in notes]
    return separator.join(blocks) if blocks else NO_NOTES_PLACEHOLDER


def render_history(messages: Sequence[ChatMessage]) -> str:
    """Render messages as "<role>: <content>" lines in the order given."""
    lines = [f"{message.role}: {message.content}" for message in messages]
    return "\n".join(lines) if lines else NO_HISTORY_PLACEHOLDER


class ContextAssembler:
    """Fetches the notes and messages a prompt is grounded in. No caching."""

    def __init__(self, store: ContentStore):
        self.store = store

    async def latest_notes(self, subject_id: UUID, user_id: str, count: int) -> list[Note]:
        """Up to `count` most recent notes for (subject, user), newest first."""
        notes = await self.store.latest_notes(subject_id, user_id, count)
        return list(notes)[:count]

    async def recent_messages(self, chat_id: UUID, count: int = HISTORY_WINDOW) -> list[ChatMessage]:
        """Up to `count` most recent messages of the chat, oldest first."""
        messages = await self.store.recent_chat_messages(chat_id, count)
        return messages[-count:]

    async def chat_context(
        self,
        subject_id: UUID,
        user_id: str,
        chat_id: UUID,
        *,
        note_count: int,
        history_count: int = HISTORY_WINDOW,
    ) -> tuple[str, str]:
        """Return (rendered notes, rendered history) for a tutor prompt."""
        notes = await self.latest_notes(subject_id, user_id, note_count)
        messages = await self.recent_messages(chat_id, history_count)
        return render_notes(notes), render_history(messages)
