"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from uuid import UUID

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from notetutor.config import Settings, get_settings
from notetutor.db.base import Base
from notetutor.db.session import build_engine, build_sessionmaker
from notetutor.db.store import ContentStore
from notetutor.main import app
from notetutor.services.identity import JWTVerifier, create_access_token

TEST_SECRET = "test-secret-key"
USER_ID = "user-alice"
OTHER_USER_ID = "user-bob"


class FakeCompletionClient:
    """In-memory stand-in for CompletionClient that records every request."""

    def __init__(self):
        self.replies: list[str] = []
        self.calls: list[dict] = []
        self.error: Exception | None = None

    def queue(self, *replies: str) -> None:
        self.replies.extend(replies)

    async def complete(self, messages, *, max_tokens, temperature) -> str:
        self.calls.append(
            {"messages": messages, "max_tokens": max_tokens, "temperature": temperature}
        )
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return "Happy to help!"


def make_question(index: int = 0, **overrides) -> dict:
    question = {
        "q": f"Question {index}?",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "answerIndex": index % 4,
        "explanation": f"Because of reason {index}.",
    }
    question.update(overrides)
    return question


def make_questions(count: int = 10) -> list[dict]:
    return [make_question(i) for i in range(count)]


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        database_url_override=f"sqlite+aiosqlite:///{tmp_path / 'notetutor-test.db'}",
        auth_provider="jwt",
        jwt_secret_key=TEST_SECRET,
    )


@pytest.fixture
async def engine(test_settings):
    engine = build_engine(test_settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
async def store(session_factory) -> AsyncGenerator[ContentStore, None]:
    """Store on its own session, for seeding and inspecting data."""
    async with session_factory() as session:
        yield ContentStore(session)


@pytest.fixture
def completions() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
async def client(test_settings, session_factory, completions) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    app.state.session_factory = session_factory
    app.state.identity_verifier = JWTVerifier(TEST_SECRET)
    app.state.completion_client = completions
    app.dependency_overrides[get_settings] = lambda: test_settings
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(test_settings) -> Callable[..., dict[str, str]]:
    def make(user_id: str = USER_ID) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id, test_settings)}"}

    return make


@pytest.fixture
def count_rows(session_factory) -> Callable:
    """Count rows of a model in a fresh session, optionally filtered."""

    async def count(model, *criteria) -> int:
        stmt = select(func.count()).select_from(model)
        if criteria:
            stmt = stmt.where(*criteria)
        async with session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    return count


@pytest.fixture
def seed_subject(store) -> Callable:
    async def seed(user_id: str = USER_ID, title: str = "Biology", notes: int = 0) -> UUID:
        subject = await store.create_subject(user_id, title)
        for i in range(notes):
            await store.create_note(user_id, subject.id, f"Note {i}", f"Content of note {i}")
        return subject.id

    return seed
