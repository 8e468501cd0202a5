"""
Account workflows: register, login, refresh, logout, change password.

Each function takes the injected DBStorage plus plain request data and
returns Ok(body, status) or Err(kind, message); the blueprints in api/auth.py
only translate the result into the response envelope.
"""
from __future__ import annotations

import logging

from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from models.db_storage import DBStorage
from models.schemas.user import (
    ChangePasswordSchema,
    UserLoginSchema,
    UserOutSchema,
    UserRegisterSchema,
    first_error,
)
from models.user import User
from services.token_ledger import TokenLedger
from utils.result import Err, ErrorKind, Ok, Result
from utils.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
    verify_password_or_dummy,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email or password is invalid"
INVALID_REFRESH = "Refresh token invalid or expired"

register_schema = UserRegisterSchema()
login_schema = UserLoginSchema()
change_password_schema = ChangePasswordSchema()
out_schema = UserOutSchema()


def _issue_pair(ledger: TokenLedger, user_id: str) -> tuple[str, str]:
    access_token = create_access_token(user_id)
    refresh_token = create_refresh_token(user_id)
    ledger.record_refresh_token(refresh_token, user_id)
    return access_token, refresh_token


def register(storage: DBStorage, payload: dict) -> Result[dict]:
    try:
        data = register_schema.load(payload or {})
    except ValidationError as err:
        return Err(ErrorKind.VALIDATION_FAILED, first_error(err))

    if storage.find_one(User, email=data["email"]):
        return Err(ErrorKind.CONFLICT, "Email already in use")

    user = User(
        name=data["name"],
        email=data["email"],
        role=data["role"],
        password_hash=hash_password(data["password"]),
    )
    storage.new(user)
    try:
        storage.save()
    except IntegrityError:
        # lost the race against a concurrent registration with the same email
        return Err(ErrorKind.CONFLICT, "Email already in use")

    logger.info("registered user %s with role %s", user.id, user.role)
    return Ok({"message": "User registered successfully", "data": out_schema.dump(user)}, 201)


def login(storage: DBStorage, payload: dict) -> Result[dict]:
    try:
        data = login_schema.load(payload or {})
    except ValidationError as err:
        return Err(ErrorKind.VALIDATION_FAILED, first_error(err))

    user = storage.find_one(User, email=data["email"])
    password_ok = verify_password_or_dummy(data["password"], user.password_hash if user else None)
    if user is None or not password_ok:
        logger.info("failed login attempt")
        return Err(ErrorKind.UNAUTHORIZED, INVALID_CREDENTIALS)

    access_token, refresh_token = _issue_pair(TokenLedger(storage), user.id)
    body = dict(out_schema.dump(user), accessToken=access_token, refreshToken=refresh_token)
    return Ok({"message": "Logged in successfully", "data": body})


def refresh(storage: DBStorage, payload: dict) -> Result[dict]:
    token = payload.get("refreshToken") if isinstance(payload, dict) else None
    if not token or not isinstance(token, str):
        return Err(ErrorKind.UNAUTHORIZED, "Refresh token not found")

    decoded = decode_refresh_token(token)
    if isinstance(decoded, Err):
        return Err(ErrorKind.UNAUTHORIZED, INVALID_REFRESH)
    user_id = decoded.value.user_id

    ledger = TokenLedger(storage)
    if not ledger.consume_refresh_token(token, user_id):
        # already rotated or logged out: a replayed token
        logger.warning("refresh token reuse or unknown token for user %s", user_id)
        return Err(ErrorKind.UNAUTHORIZED, INVALID_REFRESH)

    access_token, refresh_token = _issue_pair(ledger, user_id)
    return Ok({"accessToken": access_token, "refreshToken": refresh_token})


def logout(storage: DBStorage, access) -> Result[None]:
    """``access`` is the AccessContext the auth gate attached to the request."""
    ledger = TokenLedger(storage)
    ledger.revoke_all_refresh_tokens(access.user_id)
    ledger.blacklist_access_token(access.token, access.user_id, access.expires_at)
    logger.info("user %s logged out", access.user_id)
    return Ok(None, 204)


def change_password(storage: DBStorage, user_id: str, payload: dict) -> Result[dict]:
    try:
        data = change_password_schema.load(payload or {})
    except ValidationError as err:
        return Err(ErrorKind.VALIDATION_FAILED, first_error(err))

    user = storage.get(User, user_id)
    if user is None:
        return Err(ErrorKind.NOT_FOUND, "User not found")

    if not verify_password(data["current_password"], user.password_hash):
        return Err(ErrorKind.CONFLICT, "Current password is incorrect")

    storage.update(User, user.id, password_hash=hash_password(data["new_password"]))
    logger.info("password changed for user %s", user.id)
    return Ok({"message": "Password updated successfully"})
