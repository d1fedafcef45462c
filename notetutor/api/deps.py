"""
FastAPI Dependencies for Authentication and Service Wiring.

Key patterns:
1. get_current_uid: Extracts the bearer token, verifies it, returns the user id
2. User-scoped queries: All store functions accept user_id to enforce ownership
3. No global "current user" state - always pass user explicitly
4. External clients (session factory, identity verifier, completion client)
   are built once at startup and read from `app.state`; nothing here
   constructs them.

Authentication is resolved before any other dependency touches the
database, so a rejected request performs no store reads or writes.
"""

from typing import Annotated, TypeVar

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notetutor.config import Settings, get_settings
from notetutor.db.session import get_db
from notetutor.db.store import ContentStore
from notetutor.errors import NotFound, Unauthenticated
from notetutor.services.chat_service import ChatService
from notetutor.services.identity import IdentityVerifier
from notetutor.services.llm import CompletionClient
from notetutor.services.quiz_service import QuizService

T = TypeVar("T")


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Extract the token from an `Authorization: Bearer <token>` header."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
    raise Unauthenticated()


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.identity_verifier


async def get_current_uid(
    token: Annotated[str, Depends(get_token_from_request)],
    verifier: Annotated[IdentityVerifier, Depends(get_identity_verifier)],
) -> str:
    """
    Verify the bearer token and return the caller's user id.

    This is the primary authentication dependency. Use it first in route
    signatures:

        @router.get("/subjects")
        async def list_subjects(uid: CurrentUid, store: Store):
            ...

    Raises 401 if the token is missing, malformed, invalid, or expired.
    """
    uid = await verifier.verify(token)
    if uid is None:
        raise Unauthenticated("Unauthorized. Token verification failed.")
    return uid


# Type aliases for dependency injection
CurrentUid = Annotated[str, Depends(get_current_uid)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================


def get_store(db: DbSession) -> ContentStore:
    return ContentStore(db)


Store = Annotated[ContentStore, Depends(get_store)]


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


Completions = Annotated[CompletionClient, Depends(get_completion_client)]


def get_chat_service(store: Store, completions: Completions, settings: AppSettings) -> ChatService:
    return ChatService(store, completions, settings)


def get_quiz_service(store: Store, completions: Completions, settings: AppSettings) -> QuizService:
    return QuizService(store, completions, settings)


ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
QuizServiceDep = Annotated[QuizService, Depends(get_quiz_service)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


def found_or_404(resource: T | None, label: str = "Resource") -> T:
    """
    Resource exists and is owned by the caller, or 404.

    Store lookups are already scoped by user_id, so a resource owned by
    someone else comes back as None and is reported the same as a missing
    one (privacy-preserving):

        subject = found_or_404(await store.get_subject(subject_id, uid), "Subject")
    """
    if resource is None:
        raise NotFound(f"{label} not found")
    return resource
