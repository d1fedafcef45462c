"""
Identity verification: exchange a bearer token for a stable user id.

Two verifiers are available, selected by `Settings.auth_provider`:
- FirebaseVerifier: Firebase ID tokens, checked against Google's public
  certificates for the configured project (google-auth).
- JWTVerifier: HS256 tokens signed with `jwt_secret_key` (python-jose).
  `create_access_token` mints these for local development and tests.

Verifiers never raise. Any failure is logged and reported as None so the
caller can answer 401 uniformly.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token
from jose import jwt

from notetutor.config import Settings

logger = logging.getLogger(__name__)


class IdentityVerifier:
    """Base verifier. Subclasses implement `_verify`."""

    async def verify(self, token: str) -> str | None:
        """Return the user id for `token`, or None if it cannot be verified."""
        if not token:
            return None
        try:
            return await self._verify(token)
        except Exception as e:
            logger.warning("Token verification failed: %s", e)
            return None

    async def _verify(self, token: str) -> str | None:
        raise NotImplementedError


class JWTVerifier(IdentityVerifier):
    """Verify locally signed JWTs; the `sub` claim is the user id."""

    def __init__(self, secret_key: str | None, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    async def _verify(self, token: str) -> str | None:
        if not self.secret_key:
            logger.error("JWT verification requested but JWT_SECRET_KEY is not set")
            return None
        payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        return payload.get("sub") or None


class FirebaseVerifier(IdentityVerifier):
    """Verify Firebase ID tokens issued for `project_id`."""

    def __init__(self, project_id: str | None):
        self.project_id = project_id

    async def _verify(self, token: str) -> str | None:
        if not self.project_id:
            logger.error("Firebase verification requested but FIREBASE_PROJECT_ID is not set")
            return None
        # Certificate fetch is blocking I/O
        claims = await asyncio.to_thread(
            google_id_token.verify_firebase_token,
            token,
            google_requests.Request(),
            audience=self.project_id,
        )
        if not claims:
            return None
        return claims.get("sub") or None


def build_identity_verifier(settings: Settings) -> IdentityVerifier:
    if settings.auth_provider == "firebase":
        return FirebaseVerifier(settings.firebase_project_id)
    return JWTVerifier(settings.jwt_secret_key, settings.jwt_algorithm)


def create_access_token(user_id: str, settings: Settings) -> str:
    """
    Mint a JWT for `user_id` (jwt provider only).

    Token payload contains:
    - sub: the user id (standard JWT subject claim)
    - exp: expiration timestamp
    """
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY must be set to mint access tokens")
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
