import pytest

from api import create_app
from models.db_storage import DBStorage

PASSWORD = "Passw0rd!"


@pytest.fixture
def storage():
    s = DBStorage("sqlite://")
    s.reload()
    yield s
    s.dispose()


@pytest.fixture
def app(storage):
    return create_app("testing", storage=storage)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register(client, email="a@x.com", role="user", name="Alice", password=PASSWORD):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "role": role, "password": password},
    )


def login(client, email="a@x.com", password=PASSWORD) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["body"]["data"]


@pytest.fixture
def user_session(client):
    register(client)
    return login(client)


@pytest.fixture
def admin_session(client):
    register(client, email="admin@x.com", role="admin", name="Admin")
    return login(client, email="admin@x.com")
