"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT (access and refresh tokens use distinct secrets)
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from flask import current_app

from utils.result import Err, Ok, Result, TokenError

ACCESS_SUBJECT = "accessApi"
REFRESH_SUBJECT = "refreshToken"

ph = PasswordHasher()


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    exp: int


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return ph.hash(uuid.uuid4().hex)


def verify_password_or_dummy(password: str, password_hash: str | None) -> bool:
    """
    Same as verify_password, but still pays the hashing cost when there is no
    stored hash, so a missing account answers as slowly as a wrong password.
    """
    if password_hash is None:
        verify_password(password, _dummy_hash())
        return False
    return verify_password(password, password_hash)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _create_token(user_id: str, subject: str, secret: str, expires) -> str:
    now = _now()
    payload = {
        "sub": subject,
        "userId": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int((now + expires).timestamp()),
        "jti": generate_jti(),
    }
    return jwt.encode(payload, secret, algorithm=current_app.config["JWT_ALGORITHM"])


def create_access_token(user_id: str) -> str:
    return _create_token(
        user_id,
        ACCESS_SUBJECT,
        current_app.config["ACCESS_TOKEN_SECRET"],
        current_app.config["ACCESS_TOKEN_EXPIRES"],
    )


def create_refresh_token(user_id: str) -> str:
    return _create_token(
        user_id,
        REFRESH_SUBJECT,
        current_app.config["REFRESH_TOKEN_SECRET"],
        current_app.config["REFRESH_TOKEN_EXPIRES"],
    )


def verify_token(token: str, secret: str, subject: str) -> Result[TokenClaims]:
    """
    Decode and validate a JWT signed with ``secret``.
    Returns Ok(TokenClaims) or Err(TokenError.EXPIRED / TokenError.MALFORMED).
    A token minted for another purpose (wrong ``sub``) counts as malformed.
    """
    try:
        decoded: Dict[str, Any] = jwt.decode(
            token,
            secret,
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        return Err(TokenError.EXPIRED, "Token expired")
    except jwt.InvalidTokenError as exc:
        return Err(TokenError.MALFORMED, f"Invalid token: {exc}")

    if decoded.get("sub") != subject or not decoded.get("userId"):
        return Err(TokenError.MALFORMED, "Wrong token type")
    return Ok(TokenClaims(user_id=str(decoded["userId"]), exp=int(decoded["exp"])))


def decode_access_token(token: str) -> Result[TokenClaims]:
    return verify_token(token, current_app.config["ACCESS_TOKEN_SECRET"], ACCESS_SUBJECT)


def decode_refresh_token(token: str) -> Result[TokenClaims]:
    return verify_token(token, current_app.config["REFRESH_TOKEN_SECRET"], REFRESH_SUBJECT)
