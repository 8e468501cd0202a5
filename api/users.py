from __future__ import annotations

from typing import Tuple

from flask import Blueprint, request, g, abort

from api.deps import get_storage
from services import users
from utils.decorators import authorize, ensure_authenticated
from utils.responds import from_result, success

bp = Blueprint("users", __name__)


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "20"))
        return page, limit
    except ValueError:
        abort(400, description="page and limit must be integers")


@bp.get("/users/current")
@ensure_authenticated()
def current():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return from_result(users.current_user(get_storage(), g.auth.user_id))


@bp.get("/users", strict_slashes=False)
@authorize(["admin", "moderator"])
def list_users():
    """
    List all users - admin, moderator
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
    responses:
      200: { description: OK }
      403: { description: Access denied }
    """
    page, limit = parse_pagination()
    return from_result(users.list_users(get_storage(), page, limit))


@bp.get("/users/<user_id>")
@authorize(["admin", "moderator"])
def get_user(user_id: str):
    """
    Get one user - admin, moderator
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      403: { description: Access denied }
      404: { description: Not found }
    """
    return from_result(users.get_user(get_storage(), user_id))


@bp.patch("/users/<user_id>")
@authorize(["admin"])
def edit_user(user_id: str):
    """
    Edit a user's name, email or role - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
            role: { type: string, enum: [admin, moderator, user] }
    responses:
      200: { description: OK }
      403: { description: Access denied }
      404: { description: Not found }
      409: { description: Email already in use }
    """
    return from_result(users.edit_user(get_storage(), user_id, request.get_json(silent=True)))


@bp.delete("/users/<user_id>")
@authorize(["admin"])
def delete_user(user_id: str):
    """
    Delete a user and all of their tokens - admin (not yourself)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      403: { description: Access denied or self-deletion }
      404: { description: Not found }
    """
    return from_result(users.delete_user(get_storage(), g.auth.user_id, user_id))


@bp.get("/admin")
@authorize(["admin"])
def only_admin():
    """
    Role gate check - admin
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Access denied }
    """
    return success({"message": "Hello admin"}, 200)


@bp.get("/moderator")
@authorize(["admin", "moderator"])
def only_admin_moderator():
    """
    Role gate check - admin, moderator
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      403: { description: Access denied }
    """
    return success({"message": "Hello admin or moderator"}, 200)
