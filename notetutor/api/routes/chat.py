"""API routes for the AI tutor chat."""

import logging
from uuid import UUID

from fastapi import APIRouter

from notetutor.api.deps import AppSettings, ChatServiceDep, CurrentUid, Store
from notetutor.errors import InvalidRequest
from notetutor.schemas.chat import ChatMessageRead, ChatReply, ChatRequest, ChatTranscript

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])


@router.post("/chat", response_model=ChatReply)
async def send_chat_message(
    uid: CurrentUid,
    request: ChatRequest,
    chat_service: ChatServiceDep,
) -> ChatReply:
    """
    Send a message to the tutor for a subject and return its reply.

    The chat for (subject, user) is created on the first message. The
    user's message is stored before the model is called; the reply is
    stored only if the model call succeeds.
    """
    if request.subject_id is None or not (request.message and request.message.strip()):
        raise InvalidRequest("Missing subjectId or message")

    reply = await chat_service.send_message(uid, request.subject_id, request.message)
    return ChatReply(message=reply)


@router.get("/subjects/{subject_id}/chat", response_model=ChatTranscript)
async def get_chat_transcript(
    subject_id: UUID,
    uid: CurrentUid,
    store: Store,
    settings: AppSettings,
) -> ChatTranscript:
    """
    Get the most recent messages of the subject's chat, oldest first.

    Reading never creates a chat; a subject without one returns an empty
    transcript.
    """
    chat = await store.find_chat(subject_id, uid)
    if chat is None:
        return ChatTranscript(chat_id=None, messages=[])

    messages = await store.recent_chat_messages(chat.id, settings.transcript_message_limit)
    return ChatTranscript(
        chat_id=chat.id,
        messages=[ChatMessageRead.model_validate(m) for m in messages],
    )
