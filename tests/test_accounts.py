"""Workflow-level tests, called without going through HTTP."""
from types import SimpleNamespace

from models.invalid_token import InvalidToken
from models.user import User
from services import accounts
from utils.result import Err, ErrorKind, Ok

PAYLOAD = {"name": "Alice", "email": "a@x.com", "role": "user", "password": "Passw0rd!"}


def test_register_returns_created(app_ctx, storage):
    result = accounts.register(storage, dict(PAYLOAD))
    assert isinstance(result, Ok)
    assert result.status == 201
    assert storage.count(User) == 1


def test_register_unique_constraint_is_final_word(app_ctx, storage, monkeypatch):
    assert isinstance(accounts.register(storage, dict(PAYLOAD)), Ok)
    # simulate losing the check-then-insert race: the pre-check sees nothing
    monkeypatch.setattr(storage, "find_one", lambda cls, **conditions: None)
    result = accounts.register(storage, dict(PAYLOAD))
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.CONFLICT


def test_login_unknown_user_still_hashes(app_ctx, storage, monkeypatch):
    calls = []
    real = accounts.verify_password_or_dummy

    def spy(password, password_hash):
        calls.append(password_hash)
        return real(password, password_hash)

    monkeypatch.setattr(accounts, "verify_password_or_dummy", spy)
    result = accounts.login(storage, {"email": "ghost@x.com", "password": "Passw0rd!"})
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.UNAUTHORIZED
    assert calls == [None]


def test_refresh_rotation(app_ctx, storage):
    accounts.register(storage, dict(PAYLOAD))
    tokens = accounts.login(storage, {"email": "a@x.com", "password": "Passw0rd!"}).value["data"]
    rotated = accounts.refresh(storage, {"refreshToken": tokens["refreshToken"]})
    assert isinstance(rotated, Ok)
    replay = accounts.refresh(storage, {"refreshToken": tokens["refreshToken"]})
    assert isinstance(replay, Err)
    assert replay.message == accounts.INVALID_REFRESH


def test_logout_blacklists(app_ctx, storage):
    accounts.register(storage, dict(PAYLOAD))
    data = accounts.login(storage, {"email": "a@x.com", "password": "Passw0rd!"}).value["data"]
    access = SimpleNamespace(token=data["accessToken"], user_id=data["id"], expires_at=1900000000)
    result = accounts.logout(storage, access)
    assert isinstance(result, Ok)
    assert result.status == 204
    assert storage.find_one(InvalidToken, access_token=data["accessToken"]).expiration_time == 1900000000


def test_change_password_unknown_user(app_ctx, storage):
    result = accounts.change_password(
        storage,
        "missing",
        {"currentPassword": "x", "newPassword": "N3wPassword!", "confirmPassword": "N3wPassword!"},
    )
    assert isinstance(result, Err)
    assert result.kind is ErrorKind.NOT_FOUND
