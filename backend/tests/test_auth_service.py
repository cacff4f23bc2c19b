"""
DevFlow Backend — Credential Auth Tests

What we test:
    ✅ Sign-up creates user + credentials account atomically, returns a token
    ✅ Duplicate email/username abort sign-up with no partial rows
    ✅ Password strength rules reported per field
    ✅ Sign-in: unknown user, wrong password, success
    ✅ Session tokens round-trip and tampering is rejected
"""

import uuid

import jwt
import pytest

from conftest import count_rows
from devflow.exceptions import ErrorKind
from devflow.models import Account, User
from devflow.security import issue_session_token, resolve_session
from devflow.services.auth_service import AuthService

SIGN_UP = {
    "name": "Ada Lovelace",
    "username": "ada_l",
    "email": "ada@example.com",
    "password": "Analytical1!",
}


class TestSignUp:
    @pytest.mark.asyncio
    async def test_sign_up_creates_user_and_account(self, store):
        result = await AuthService(store).sign_up_with_credentials(SIGN_UP)

        assert result.success is True
        assert result.status == 201
        session = resolve_session(result.data.access_token)
        assert session.user_id == result.data.user_id
        assert session.name == "Ada Lovelace"
        assert await count_rows(store, User) == 1
        assert await count_rows(store, Account) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email(self, store):
        service = AuthService(store)
        await service.sign_up_with_credentials(SIGN_UP)

        result = await service.sign_up_with_credentials({**SIGN_UP, "username": "someone"})

        assert result.error.kind == ErrorKind.CONFLICT
        assert result.error.message == "User already exists"
        assert await count_rows(store, User) == 1
        assert await count_rows(store, Account) == 1

    @pytest.mark.asyncio
    async def test_duplicate_username(self, store):
        service = AuthService(store)
        await service.sign_up_with_credentials(SIGN_UP)

        result = await service.sign_up_with_credentials({**SIGN_UP, "email": "b@example.com"})

        assert result.error.message == "Username already exists"

    @pytest.mark.asyncio
    async def test_weak_password(self, store):
        result = await AuthService(store).sign_up_with_credentials(
            {**SIGN_UP, "password": "alllowercase"}
        )

        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.details["password"] == [
            "Password must contain at least one uppercase letter."
        ]
        assert await count_rows(store, User) == 0


class TestSignIn:
    @pytest.mark.asyncio
    async def test_sign_in_success(self, store):
        service = AuthService(store)
        signed_up = await service.sign_up_with_credentials(SIGN_UP)

        result = await service.sign_in_with_credentials(
            {"email": SIGN_UP["email"], "password": SIGN_UP["password"]}
        )

        assert result.success is True
        assert result.data.user_id == signed_up.data.user_id

    @pytest.mark.asyncio
    async def test_wrong_password(self, store):
        service = AuthService(store)
        await service.sign_up_with_credentials(SIGN_UP)

        result = await service.sign_in_with_credentials(
            {"email": SIGN_UP["email"], "password": "Wrong-password1"}
        )

        assert result.error.kind == ErrorKind.UNAUTHORIZED
        assert result.error.message == "Password is incorrect"

    @pytest.mark.asyncio
    async def test_unknown_user(self, store):
        result = await AuthService(store).sign_in_with_credentials(
            {"email": "nobody@example.com", "password": "whatever"}
        )

        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.message == "User not found"


class TestSessionTokens:
    def test_token_round_trip(self):
        user_id = uuid.uuid4()
        session = resolve_session(issue_session_token(user_id, "Ada", "https://img/ada.png"))

        assert session.user_id == user_id
        assert session.image == "https://img/ada.png"

    def test_foreign_signature_rejected(self):
        forged = jwt.encode({"sub": str(uuid.uuid4()), "name": "Mallory"}, "another-secret")
        assert resolve_session(forged) is None

    def test_missing_or_malformed_token(self):
        assert resolve_session(None) is None
        assert resolve_session("not.a.jwt") is None
