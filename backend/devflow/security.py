"""
DevFlow Backend — Session Tokens & Password Hashing
=====================================================

What:  Issue and resolve signed session tokens; hash and verify passwords.
Why:   Actions take the caller's session as an explicit argument. HTTP
       routes need a way to turn a bearer token into that argument, and
       credential sign-up/in need a password hash that is safe to store.
How:   HS256 JWTs via PyJWT, bcrypt for password hashes.
Who:   `auth_service` (issue, hash, verify), `account_service` (hash), and
       every route that runs an authorized action (`get_auth_session`).

Token claims:
    sub    user id (string UUID)
    name   display name at sign-in time
    image  avatar URL, may be null
    exp    expiry, `settings.session_ttl_minutes` after issue
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Header

from devflow.config import settings
from devflow.services.guard import AuthSession

logger = logging.getLogger(__name__)


# ── Passwords ─────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """False for a missing hash (OAuth accounts have none)."""
    if not hashed:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


# ── Session tokens ────────────────────────────────────────────────────────

def issue_session_token(
    user_id: uuid.UUID,
    name: str,
    image: Optional[str] = None,
) -> str:
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.session_ttl_minutes)
    claims = {"sub": str(user_id), "name": name, "image": image, "exp": expires}
    return jwt.encode(claims, settings.auth_secret, algorithm=settings.auth_algorithm)


def resolve_session(token: Optional[str]) -> Optional[AuthSession]:
    """
    Resolve a token to the caller's session.

    Returns None for a missing, malformed, tampered or expired token. The
    Action Guard decides whether that is an error.
    """
    if not token:
        return None
    try:
        claims = jwt.decode(
            token, settings.auth_secret, algorithms=[settings.auth_algorithm]
        )
        return AuthSession(
            user_id=uuid.UUID(claims["sub"]),
            name=claims.get("name"),
            image=claims.get("image"),
        )
    except (jwt.PyJWTError, KeyError, ValueError) as e:
        logger.info("Rejected session token: %s", type(e).__name__)
        return None


async def get_auth_session(
    authorization: Optional[str] = Header(default=None),
) -> Optional[AuthSession]:
    """FastAPI dependency: `Authorization: Bearer <token>` → session or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return resolve_session(token.strip())
