"""
Auth gate for protected routes.

    Unauthenticated -> token present? -> not blacklisted? -> signature valid and
    not expired? -> Authenticated -> role permitted? -> Authorized

Any negative branch ends the request with the error envelope; the view is
never called.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Iterable

from flask import request, g

from api.deps import get_storage
from models.db_storage import DBStorage
from models.user import User
from services.token_ledger import TokenLedger
from utils.responds import from_err
from utils.result import Err, ErrorKind, Ok, Result, TokenError
from utils.security import decode_access_token

ACCESS_TOKEN_EXPIRED = "AccessTokenExpired"
ACCESS_TOKEN_INVALID = "AccessTokenInvalid"


@dataclass(frozen=True)
class AccessContext:
    token: str
    expires_at: int
    user_id: str


def extract_bearer_token(header: str | None) -> str | None:
    """Accept both 'Bearer <token>' and a bare token."""
    header = (header or "").strip()
    if not header:
        return None
    scheme, _, rest = header.partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip() or None
    return header


def authenticate(header: str | None, ledger: TokenLedger) -> Result[AccessContext]:
    token = extract_bearer_token(header)
    if not token:
        return Err(ErrorKind.UNAUTHORIZED, "Access token not found")

    if ledger.is_blacklisted(token):
        return Err(ErrorKind.UNAUTHORIZED, "Access token invalid", ACCESS_TOKEN_INVALID)

    decoded = decode_access_token(token)
    if isinstance(decoded, Err):
        if decoded.kind is TokenError.EXPIRED:
            return Err(ErrorKind.UNAUTHORIZED, "Access token expired", ACCESS_TOKEN_EXPIRED)
        return Err(ErrorKind.UNAUTHORIZED, "Access token invalid", ACCESS_TOKEN_INVALID)

    claims = decoded.value
    return Ok(AccessContext(token=token, expires_at=claims.exp, user_id=claims.user_id))


def check_role(storage: DBStorage, user_id: str, roles: Iterable[str]) -> Result[User]:
    user = storage.get(User, user_id)
    if user is None or user.role not in set(roles):
        return Err(ErrorKind.FORBIDDEN, "Access denied")
    return Ok(user)


def ensure_authenticated():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            result = authenticate(request.headers.get("Authorization"), TokenLedger(get_storage()))
            if isinstance(result, Err):
                return from_err(result)
            g.auth = result.value
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def authorize(roles: Iterable[str]):
    """
    Allow access only if the authenticated user's role is one of ``roles``.
    Plain set membership; there is no role hierarchy.
    """
    allowed = frozenset(roles or [])

    def decorator(fn):
        @wraps(fn)
        @ensure_authenticated()
        def wrapper(*args, **kwargs):
            result = check_role(get_storage(), g.auth.user_id, allowed)
            if isinstance(result, Err):
                return from_err(result)
            g.current_user = result.value
            return fn(*args, **kwargs)

        return wrapper

    return decorator
