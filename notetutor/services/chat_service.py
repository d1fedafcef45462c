"""Tutor chat: persist the turn, ground it in the subject's notes, ask the model."""

import logging
from pathlib import Path
from uuid import UUID

from notetutor.config import Settings
from notetutor.db.models import ChatRole
from notetutor.db.store import ContentStore
from notetutor.errors import NoteTutorError, UpstreamFailure
from notetutor.services.context import ContextAssembler
from notetutor.services.llm import CompletionClient

logger = logging.getLogger(__name__)

EMPTY_REPLY_FALLBACK = "Sorry, I could not generate a response."


def _load_persona() -> str:
    """Load the TUTOR.md persona file for the system prompt."""
    persona_path = Path(__file__).parent.parent / "TUTOR.md"
    try:
        return persona_path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        logger.warning("TUTOR.md not found at %s, using fallback persona", persona_path)
        return "You are a helpful study tutor. Be clear, concise, and encouraging."


# Load once at module import
_PERSONA_PROMPT = _load_persona()


def build_system_prompt(notes_context: str, conversation_history: str) -> str:
    return f"""{_PERSONA_PROMPT}

Relevant Notes:
{notes_context}

Previous Conversation:
{conversation_history}

Respond as a helpful tutor. Keep responses clear and educational."""


class ChatService:
    """
    Handles one tutor message end to end.

    Order per request: resolve chat, persist user turn, build context,
    request completion, persist assistant turn. The user turn is committed
    before the model is called, so it survives a provider failure; the
    assistant turn is written only after a successful completion.
    """

    def __init__(self, store: ContentStore, completion_client: CompletionClient, settings: Settings):
        self.store = store
        self.context = ContextAssembler(store)
        self.completion_client = completion_client
        self.settings = settings

    async def send_message(self, user_id: str, subject_id: UUID, message: str) -> str:
        """Return the assistant's reply to `message`."""
        try:
            chat = await self.store.get_or_create_chat(subject_id, user_id)
            await self.store.add_chat_message(chat.id, ChatRole.USER, message)

            notes_context, history = await self.context.chat_context(
                subject_id,
                user_id,
                chat.id,
                note_count=self.settings.chat_note_count,
                history_count=self.settings.chat_history_count,
            )

            reply = await self.completion_client.complete(
                [
                    {"role": "system", "content": build_system_prompt(notes_context, history)},
                    {"role": "user", "content": message},
                ],
                max_tokens=self.settings.chat_max_tokens,
                temperature=self.settings.llm_temperature,
            )
            if not reply.strip():
                logger.warning("Empty completion for chat %s, using fallback reply", chat.id)
                reply = EMPTY_REPLY_FALLBACK

            await self.store.add_chat_message(chat.id, ChatRole.ASSISTANT, reply)
            return reply

        except NoteTutorError:
            raise
        except Exception as e:
            logger.exception("Chat request failed for subject %s", subject_id)
            raise UpstreamFailure(detail=f"{type(e).__name__}: {e}") from e
