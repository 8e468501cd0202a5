"""
Authentication blueprint:
- POST  /api/auth/register
- POST  /api/auth/login
- GET   /api/auth/verify-token
- POST  /api/auth/refresh-token
- GET   /api/auth/logout
- PATCH /api/auth/changePassword

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs signed with HS256,
  each kind with its own secret)
- Stores refresh tokens in DB (RefreshToken model) so they can be rotated (single use) and revoked
- Blacklists access tokens at logout (InvalidToken model)
"""
from __future__ import annotations

from flask import Blueprint, request, g

from api.deps import get_storage
from services import accounts
from utils.decorators import ensure_authenticated
from utils.responds import from_result, success

bp = Blueprint("auth", __name__)


@bp.post("/register")
def register():
    """
    register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            email: { type: string }
            role: { type: string, enum: [admin, moderator, user] }
            password: { type: string }
    responses:
      201:
        description: Created
      409:
        description: Email already in use
      422:
        description: Validation error
    """
    return from_result(accounts.register(get_storage(), request.get_json(silent=True)))


@bp.post("/login")
def login():
    """
    Login: returns the user profile with accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Email or password is invalid
    """
    return from_result(accounts.login(get_storage(), request.get_json(silent=True)))


@bp.get("/verify-token")
@ensure_authenticated()
def verify_token():
    """
    Check that the presented access token is still accepted
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Token is valid
      401:
        description: Missing, invalid, expired or revoked token
    """
    return success({"message": "Token is valid"}, 200)


@bp.post("/refresh-token")
def refresh_token():
    """
    Use a refresh token to obtain new access and refresh tokens (rotation)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New token pair
      401:
        description: Refresh token invalid or expired
    """
    return from_result(accounts.refresh(get_storage(), request.get_json(silent=True)))


@bp.get("/logout")
@ensure_authenticated()
def logout():
    """
    logout: revokes all refresh tokens and blacklists the presented access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Unauthorized
    """
    return from_result(accounts.logout(get_storage(), g.auth))


@bp.patch("/changePassword")
@ensure_authenticated()
def change_password():
    """
    Change the current user's password
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             currentPassword: { type: string }
             newPassword: { type: string }
             confirmPassword: { type: string }
    responses:
      200:
        description: Password updated
      409:
        description: Current password is incorrect
      422:
        description: Validation error
    """
    return from_result(
        accounts.change_password(get_storage(), g.auth.user_id, request.get_json(silent=True))
    )
