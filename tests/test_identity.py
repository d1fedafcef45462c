"""Tests for bearer token verification."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from jose import jwt

from notetutor.config import Settings
from notetutor.services.identity import (
    FirebaseVerifier,
    JWTVerifier,
    build_identity_verifier,
    create_access_token,
)
from tests.conftest import TEST_SECRET


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, jwt_secret_key=TEST_SECRET)


class TestJWTVerifier:
    async def test_round_trip(self, settings):
        token = create_access_token("uid-123", settings)
        assert await JWTVerifier(TEST_SECRET).verify(token) == "uid-123"

    async def test_wrong_secret(self, settings):
        token = create_access_token("uid-123", settings)
        assert await JWTVerifier("another-secret").verify(token) is None

    async def test_expired(self):
        token = jwt.encode(
            {"sub": "uid-123", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            TEST_SECRET,
            algorithm="HS256",
        )
        assert await JWTVerifier(TEST_SECRET).verify(token) is None

    async def test_missing_subject(self):
        token = jwt.encode({"name": "nobody"}, TEST_SECRET, algorithm="HS256")
        assert await JWTVerifier(TEST_SECRET).verify(token) is None

    async def test_garbage_and_empty(self):
        verifier = JWTVerifier(TEST_SECRET)
        assert await verifier.verify("garbage") is None
        assert await verifier.verify("") is None

    async def test_unconfigured_secret_fails_closed(self, settings):
        token = create_access_token("uid-123", settings)
        assert await JWTVerifier(None).verify(token) is None

    def test_minting_requires_secret(self):
        with pytest.raises(RuntimeError):
            create_access_token("uid-123", Settings(_env_file=None, jwt_secret_key=None))


class TestFirebaseVerifier:
    async def test_returns_firebase_uid(self):
        with patch(
            "notetutor.services.identity.google_id_token.verify_firebase_token",
            return_value={"sub": "firebase-uid", "aud": "my-project"},
        ) as verify:
            assert await FirebaseVerifier("my-project").verify("id-token") == "firebase-uid"

        assert verify.call_args.args[0] == "id-token"
        assert verify.call_args.kwargs["audience"] == "my-project"

    async def test_verifier_exception_becomes_none(self):
        with patch(
            "notetutor.services.identity.google_id_token.verify_firebase_token",
            side_effect=ValueError("Token expired"),
        ):
            assert await FirebaseVerifier("my-project").verify("id-token") is None

    async def test_unexpected_exception_becomes_none(self):
        with patch(
            "notetutor.services.identity.google_id_token.verify_firebase_token",
            side_effect=ConnectionError("cert fetch failed"),
        ):
            assert await FirebaseVerifier("my-project").verify("id-token") is None

    async def test_missing_project_fails_closed(self):
        with patch(
            "notetutor.services.identity.google_id_token.verify_firebase_token"
        ) as verify:
            assert await FirebaseVerifier(None).verify("id-token") is None
        verify.assert_not_called()


def test_build_identity_verifier_selects_provider():
    firebase = build_identity_verifier(
        Settings(_env_file=None, auth_provider="firebase", firebase_project_id="p")
    )
    local = build_identity_verifier(Settings(_env_file=None, auth_provider="jwt", jwt_secret_key="s"))

    assert isinstance(firebase, FirebaseVerifier)
    assert firebase.project_id == "p"
    assert isinstance(local, JWTVerifier)
