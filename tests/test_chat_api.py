"""Tests for the tutor chat endpoint and transcript."""

from uuid import uuid4

from sqlalchemy import select

from notetutor.db.models import Chat, ChatMessage
from notetutor.db.store import ContentStore
from notetutor.errors import UpstreamFailure
from notetutor.main import app
from notetutor.services.chat_service import EMPTY_REPLY_FALLBACK
from notetutor.services.llm import CompletionClient
from tests.conftest import OTHER_USER_ID, USER_ID


async def _messages(session_factory):
    async with session_factory() as session:
        result = await session.execute(select(ChatMessage).order_by(ChatMessage.created_at))
        return [(m.role, m.content) for m in result.scalars()]


async def test_first_message_creates_chat_and_persists_both_turns(
    client, auth_headers, completions, seed_subject, session_factory, count_rows
):
    subject_id = await seed_subject(notes=2)
    completions.queue("Photosynthesis turns light into chemical energy.")

    response = await client.post(
        "/chat",
        json={"subjectId": str(subject_id), "message": "What is photosynthesis?"},
        headers=auth_headers(),
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Photosynthesis turns light into chemical energy."}
    assert await count_rows(Chat, Chat.subject_id == subject_id, Chat.user_id == USER_ID) == 1
    assert await _messages(session_factory) == [
        ("user", "What is photosynthesis?"),
        ("assistant", "Photosynthesis turns light into chemical energy."),
    ]


async def test_prompt_is_grounded_in_notes_and_history(client, auth_headers, completions, seed_subject):
    subject_id = await seed_subject(notes=7)
    completions.queue("First answer", "Second answer")
    body = {"subjectId": str(subject_id), "message": "Explain note 6"}

    await client.post("/chat", json=body, headers=auth_headers())
    await client.post("/chat", json={**body, "message": "And note 5?"}, headers=auth_headers())

    assert len(completions.calls) == 2
    call = completions.calls[1]
    assert [m["role"] for m in call["messages"]] == ["system", "user"]
    assert call["messages"][1]["content"] == "And note 5?"
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 1000

    system_prompt = call["messages"][0]["content"]
    # Five most recent notes only
    assert "Title: Note 6" in system_prompt
    assert "Title: Note 2" in system_prompt
    assert "Title: Note 1" not in system_prompt
    assert "user: Explain note 6\nassistant: First answer\nuser: And note 5?" in system_prompt
    assert "No notes available yet." not in system_prompt


async def test_placeholder_when_subject_has_no_notes(client, auth_headers, completions, seed_subject):
    subject_id = await seed_subject()

    await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Hello"}, headers=auth_headers()
    )

    assert "No notes available yet." in completions.calls[0]["messages"][0]["content"]


async def test_existing_chat_is_reused(client, auth_headers, seed_subject, count_rows):
    subject_id = await seed_subject()
    body = {"subjectId": str(subject_id), "message": "Hi"}

    for _ in range(3):
        assert (await client.post("/chat", json=body, headers=auth_headers())).status_code == 200

    assert await count_rows(Chat) == 1
    assert await count_rows(ChatMessage) == 6


async def test_provider_failure_keeps_user_turn_only(
    client, auth_headers, completions, seed_subject, session_factory
):
    subject_id = await seed_subject(notes=1)
    completions.error = UpstreamFailure(detail="provider exploded")

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Are you there?"}, headers=auth_headers()
    )

    assert response.status_code == 500
    assert response.json() == {"error": UpstreamFailure.message}
    assert "provider exploded" not in response.text
    assert await _messages(session_factory) == [("user", "Are you there?")]


async def test_unexpected_provider_error_is_mapped_to_500(
    client, auth_headers, completions, seed_subject, count_rows
):
    subject_id = await seed_subject()
    completions.error = RuntimeError("socket closed")

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Hi"}, headers=auth_headers()
    )

    assert response.status_code == 500
    assert set(response.json()) == {"error"}
    assert await count_rows(ChatMessage, ChatMessage.role == "assistant") == 0


async def test_empty_completion_uses_fallback(
    client, auth_headers, completions, seed_subject, session_factory
):
    subject_id = await seed_subject()
    completions.queue("   ")

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Hi"}, headers=auth_headers()
    )

    assert response.json() == {"message": EMPTY_REPLY_FALLBACK}
    assert (await _messages(session_factory))[-1] == ("assistant", EMPTY_REPLY_FALLBACK)


async def test_missing_fields_return_400(client, auth_headers, completions, seed_subject):
    subject_id = await seed_subject()

    for body in ({}, {"subjectId": str(subject_id)}, {"message": "Hi"}, {"subjectId": str(subject_id), "message": ""}):
        response = await client.post("/chat", json=body, headers=auth_headers())
        assert response.status_code == 400
        assert response.json() == {"error": "Missing subjectId or message"}

    assert completions.calls == []


async def test_malformed_subject_id_returns_400(client, auth_headers):
    response = await client.post(
        "/chat", json={"subjectId": "not-a-uuid", "message": "Hi"}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert "error" in response.json()


async def test_unauthenticated_requests_touch_nothing(client, completions, auth_headers):
    def no_store_access():
        raise AssertionError("store accessed before authentication")

    app.state.session_factory = no_store_access
    body = {"subjectId": str(uuid4()), "message": "Hi"}

    missing = await client.post("/chat", json=body)
    malformed = await client.post("/chat", json=body, headers={"Authorization": "Token abc"})
    invalid = await client.post("/chat", json=body, headers={"Authorization": "Bearer not-a-jwt"})

    assert missing.status_code == 401
    assert missing.json() == {"error": "Unauthorized"}
    assert malformed.status_code == 401
    assert invalid.status_code == 401
    assert invalid.json() == {"error": "Unauthorized. Token verification failed."}
    assert completions.calls == []


async def test_concurrent_first_messages_may_create_duplicate_chats(
    client, auth_headers, seed_subject, session_factory, count_rows
):
    subject_id = await seed_subject()

    # Two requests racing through lookup-then-create: both miss, both insert.
    async with session_factory() as first, session_factory() as second:
        store_a, store_b = ContentStore(first), ContentStore(second)
        assert await store_a.find_chat(subject_id, USER_ID) is None
        assert await store_b.find_chat(subject_id, USER_ID) is None
        chat_a = await store_a.create_chat(subject_id, USER_ID)
        chat_b = await store_b.create_chat(subject_id, USER_ID)

    assert chat_a.id != chat_b.id
    assert await count_rows(Chat, Chat.subject_id == subject_id) == 2

    # The duplicate is tolerated: later messages succeed and go to the oldest chat.
    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Still works?"}, headers=auth_headers()
    )
    assert response.status_code == 200

    transcript = await client.get(f"/subjects/{subject_id}/chat", headers=auth_headers())
    assert transcript.json()["chatId"] == str(chat_a.id)
    assert len(transcript.json()["messages"]) == 2


async def test_transcript_without_chat_is_empty_and_creates_nothing(
    client, auth_headers, seed_subject, count_rows
):
    subject_id = await seed_subject()

    response = await client.get(f"/subjects/{subject_id}/chat", headers=auth_headers())

    assert response.status_code == 200
    assert response.json() == {"chatId": None, "messages": []}
    assert await count_rows(Chat) == 0


async def test_transcript_is_chronological_and_per_user(client, auth_headers, completions, seed_subject):
    subject_id = await seed_subject()
    completions.queue("Answer one", "Answer two")
    for text in ("One", "Two"):
        await client.post(
            "/chat", json={"subjectId": str(subject_id), "message": text}, headers=auth_headers()
        )

    mine = await client.get(f"/subjects/{subject_id}/chat", headers=auth_headers())
    theirs = await client.get(f"/subjects/{subject_id}/chat", headers=auth_headers(OTHER_USER_ID))

    messages = mine.json()["messages"]
    assert [(m["role"], m["content"]) for m in messages] == [
        ("user", "One"),
        ("assistant", "Answer one"),
        ("user", "Two"),
        ("assistant", "Answer two"),
    ]
    assert {"id", "role", "content", "createdAt"} <= set(messages[0])
    assert theirs.json() == {"chatId": None, "messages": []}


async def test_unconfigured_provider_returns_500(client, auth_headers, seed_subject, count_rows):
    app.state.completion_client = CompletionClient(None, "unused-model")
    subject_id = await seed_subject()

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Hi"}, headers=auth_headers()
    )

    assert response.status_code == 500
    assert set(response.json()) == {"error"}
    assert await count_rows(ChatMessage, ChatMessage.role == "user") == 1


async def test_provider_error_detail_stays_server_side(client, auth_headers, completions, seed_subject):
    subject_id = await seed_subject()
    completions.error = RuntimeError("secret-internal-host:5432 refused")

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": "Hi"}, headers=auth_headers()
    )

    assert response.status_code == 500
    assert response.json() == {"error": UpstreamFailure.message}


async def test_message_is_stored_exactly_as_sent(
    client, auth_headers, completions, seed_subject, session_factory
):
    subject_id = await seed_subject()
    message = "  indented code\n"

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": message}, headers=auth_headers()
    )

    assert response.status_code == 200
    assert (await _messages(session_factory))[0] == ("user", message)
    assert completions.calls[0]["messages"][1]["content"] == message


async def test_blank_message_returns_400(client, auth_headers, completions, seed_subject, count_rows):
    subject_id = await seed_subject()

    response = await client.post(
        "/chat", json={"subjectId": str(subject_id), "message": " \n\t"}, headers=auth_headers()
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing subjectId or message"}
    assert completions.calls == []
    assert await count_rows(Chat) == 0
