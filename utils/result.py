"""
Explicit result values passed between the token service, the auth gate and
the account workflows.

A workflow returns either Ok(value) or Err(kind, message, code). The HTTP
layer switches on ``kind`` to pick the status code; nothing in between needs
to know about PyJWT, argon2 or marshmallow exception classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(Enum):
    VALIDATION_FAILED = 422
    CONFLICT = 409
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404

    @property
    def status(self) -> int:
        return self.value


class TokenError(Enum):
    """Why a signed token was rejected."""
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    status: int = 200


@dataclass(frozen=True)
class Err:
    kind: ErrorKind | TokenError
    message: str = ""
    code: str | None = None

    @property
    def status(self) -> int:
        if isinstance(self.kind, ErrorKind):
            return self.kind.status
        return ErrorKind.UNAUTHORIZED.status


Result = Union[Ok[T], Err]
