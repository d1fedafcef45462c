"""
Authentication Routes

Endpoints:
- GET /auth/me - Identity of the bearer token's owner

Tokens are issued by the identity provider (Firebase in production); this
service only verifies them. There is no login or logout endpoint.
"""

from fastapi import APIRouter

from notetutor.api.deps import CurrentUid
from notetutor.schemas.user import UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=UserRead)
async def get_me(uid: CurrentUid) -> UserRead:
    """
    Get the verified identity of the caller.

    Useful for checking that a token is accepted before calling the
    other endpoints.
    """
    return UserRead(uid=uid)
