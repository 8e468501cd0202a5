"""
Token ledger: the stateful half of the token lifecycle.

- refresh tokens are recorded on issue and deleted on use (single-use rotation)
- access tokens revoked at logout are kept in a blacklist until they would
  have expired anyway
"""
from __future__ import annotations

import logging

from models.db_storage import DBStorage
from models.invalid_token import InvalidToken
from models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


class TokenLedger:
    def __init__(self, storage: DBStorage):
        self.storage = storage

    def record_refresh_token(self, token: str, user_id: str) -> RefreshToken:
        row = RefreshToken(token=token, user_id=user_id)
        self.storage.new(row)
        self.storage.save()
        return row

    def consume_refresh_token(self, token: str, user_id: str) -> bool:
        """Delete the matching row; True only for the caller that removed it."""
        removed = self.storage.delete_where(RefreshToken, token=token, user_id=user_id)
        return removed == 1

    def revoke_all_refresh_tokens(self, user_id: str) -> int:
        removed = self.storage.delete_where(RefreshToken, user_id=user_id)
        logger.debug("revoked %d refresh token(s) for user %s", removed, user_id)
        return removed

    def blacklist_access_token(self, token: str, user_id: str, expiration_time: int) -> InvalidToken:
        row = InvalidToken(access_token=token, user_id=user_id, expiration_time=int(expiration_time))
        self.storage.new(row)
        self.storage.save()
        return row

    def is_blacklisted(self, token: str) -> bool:
        return self.storage.find_one(InvalidToken, access_token=token) is not None

    def purge_user(self, user_id: str) -> None:
        self.storage.delete_where(InvalidToken, user_id=user_id)
        self.storage.delete_where(RefreshToken, user_id=user_id)
