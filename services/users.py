"""User lookups and admin-only management."""
from __future__ import annotations

import logging

from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError

from models.db_storage import DBStorage
from models.schemas.user import UserEditSchema, UserOutSchema, first_error
from models.user import User
from services.token_ledger import TokenLedger
from utils.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)

MAX_LIMIT = 100

edit_schema = UserEditSchema()
out_schema = UserOutSchema()
out_list_schema = UserOutSchema(many=True)


def current_user(storage: DBStorage, user_id: str) -> Result[dict]:
    user = storage.get(User, user_id)
    if user is None:
        return Err(ErrorKind.UNAUTHORIZED, "User not found")
    return Ok({"data": out_schema.dump(user)})


def list_users(storage: DBStorage, page: int = 1, limit: int = 20) -> Result[dict]:
    page = max(page, 1)
    limit = max(1, min(limit, MAX_LIMIT))
    rows = storage.find_all(User, offset=(page - 1) * limit, limit=limit, order_by=User.name.asc())
    return Ok({
        "data": out_list_schema.dump(rows),
        "meta": {"page": page, "limit": limit, "total": storage.count(User)},
    })


def get_user(storage: DBStorage, user_id: str) -> Result[dict]:
    user = storage.get(User, user_id)
    if user is None:
        return Err(ErrorKind.NOT_FOUND, "User not found")
    return Ok({"data": out_schema.dump(user)})


def edit_user(storage: DBStorage, user_id: str, payload: dict) -> Result[dict]:
    user = storage.get(User, user_id)
    if user is None:
        return Err(ErrorKind.NOT_FOUND, "User not found")

    try:
        data = edit_schema.load(payload or {})
    except ValidationError as err:
        return Err(ErrorKind.VALIDATION_FAILED, first_error(err))

    if "email" in data:
        other = storage.find_one(User, email=data["email"])
        if other is not None and other.id != user.id:
            return Err(ErrorKind.CONFLICT, "Email already in use")

    try:
        user = storage.update(User, user.id, **data)
    except IntegrityError:
        return Err(ErrorKind.CONFLICT, "Email already in use")
    return Ok({"data": out_schema.dump(user), "message": "User updated successfully"})


def delete_user(storage: DBStorage, actor_id: str, user_id: str) -> Result[dict]:
    user = storage.get(User, user_id)
    if user is None:
        return Err(ErrorKind.NOT_FOUND, "User not found")
    if actor_id == user_id:
        return Err(ErrorKind.FORBIDDEN, "You cannot delete your own user")

    TokenLedger(storage).purge_user(user_id)
    storage.delete(user)
    storage.save()
    logger.info("user %s deleted by %s", user_id, actor_id)
    return Ok({"message": "User deleted successfully"})
