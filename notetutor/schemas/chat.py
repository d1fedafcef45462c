"""Pydantic schemas for chat operations."""

from uuid import UUID

from notetutor.schemas.base import BaseSchema, CreatedAtMixin, IDMixin, WireModel


# Request schemas
class ChatRequest(WireModel):
    """
    Request to send a chat message.

    Both fields are optional at the schema level so that a missing field is
    reported with the route's own 400 message. The message is stored
    exactly as sent, so it is not stripped.
    """

    subject_id: UUID | None = None
    message: str | None = None


# Response schemas
class ChatReply(BaseSchema):
    """Assistant reply."""

    message: str


class ChatMessageRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Chat message response."""

    role: str
    content: str


class ChatTranscript(BaseSchema):
    """Most recent messages of a subject's chat, oldest first."""

    chat_id: UUID | None = None
    messages: list[ChatMessageRead]
