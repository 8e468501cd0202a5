"""HTTP tests for the users blueprint and its role gates."""
import pytest

from conftest import bearer, login, register
from models.refresh_token import RefreshToken
from models.user import User


@pytest.fixture
def people(client):
    register(client, email="admin@x.com", role="admin", name="Admin")
    register(client, email="mod@x.com", role="moderator", name="Moderator")
    register(client, email="u@x.com", role="user", name="Regular")
    return {
        "admin": login(client, email="admin@x.com"),
        "moderator": login(client, email="mod@x.com"),
        "user": login(client, email="u@x.com"),
    }


class TestCurrentUser:
    def test_idempotent(self, client, user_session):
        headers = bearer(user_session["accessToken"])
        first = client.get("/api/users/current", headers=headers).get_json()["body"]["data"]
        second = client.get("/api/users/current", headers=headers).get_json()["body"]["data"]
        assert first == second
        assert first == {
            "id": user_session["id"],
            "name": "Alice",
            "email": "a@x.com",
            "role": "user",
        }


class TestListUsers:
    @pytest.mark.parametrize("who,status", [("admin", 200), ("moderator", 200), ("user", 403)])
    def test_gate(self, client, people, who, status):
        resp = client.get("/api/users", headers=bearer(people[who]["accessToken"]))
        assert resp.status_code == status

    def test_pagination(self, client, people):
        resp = client.get("/api/users?page=1&limit=2", headers=bearer(people["admin"]["accessToken"]))
        body = resp.get_json()["body"]
        assert len(body["data"]) == 2
        assert body["meta"] == {"page": 1, "limit": 2, "total": 3}

    def test_trailing_slash(self, client, people):
        resp = client.get("/api/users/", headers=bearer(people["admin"]["accessToken"]))
        assert resp.status_code == 200
        assert resp.get_json()["body"]["meta"]["total"] == 3

    def test_bad_pagination(self, client, people):
        resp = client.get("/api/users?page=abc", headers=bearer(people["admin"]["accessToken"]))
        assert resp.status_code == 400
        assert resp.get_json()["error"] is True


class TestGetUser:
    def test_not_found(self, client, people):
        resp = client.get("/api/users/does-not-exist", headers=bearer(people["admin"]["accessToken"]))
        assert resp.status_code == 404


class TestEditUser:
    def test_admin_can_promote(self, client, people):
        target = people["user"]["id"]
        resp = client.patch(
            f"/api/users/{target}",
            headers=bearer(people["admin"]["accessToken"]),
            json={"role": "moderator"},
        )
        assert resp.status_code == 200
        assert resp.get_json()["body"]["data"]["role"] == "moderator"

        # role is read from the store on each request, so the gate follows the change
        listed = client.get("/api/users", headers=bearer(people["user"]["accessToken"]))
        assert listed.status_code == 200

    def test_moderator_cannot_edit(self, client, people):
        resp = client.patch(
            f"/api/users/{people['user']['id']}",
            headers=bearer(people["moderator"]["accessToken"]),
            json={"role": "admin"},
        )
        assert resp.status_code == 403

    def test_duplicate_email(self, client, people):
        resp = client.patch(
            f"/api/users/{people['user']['id']}",
            headers=bearer(people["admin"]["accessToken"]),
            json={"email": "MOD@x.com"},
        )
        assert resp.status_code == 409

    def test_invalid_role(self, client, people):
        resp = client.patch(
            f"/api/users/{people['user']['id']}",
            headers=bearer(people["admin"]["accessToken"]),
            json={"role": "root"},
        )
        assert resp.status_code == 422


class TestDeleteUser:
    def test_admin_deletes_user_and_tokens(self, client, storage, people):
        target = people["user"]
        resp = client.delete(f"/api/users/{target['id']}", headers=bearer(people["admin"]["accessToken"]))
        assert resp.status_code == 200
        assert storage.get(User, target["id"]) is None
        assert storage.count(RefreshToken, user_id=target["id"]) == 0

        # the deleted user's token still verifies but the role gate finds nobody
        listed = client.get("/api/users", headers=bearer(target["accessToken"]))
        assert listed.status_code == 403

    def test_self_delete_forbidden(self, client, people):
        admin = people["admin"]
        resp = client.delete(f"/api/users/{admin['id']}", headers=bearer(admin["accessToken"]))
        assert resp.status_code == 403
        assert resp.get_json()["body"]["message"] == "You cannot delete your own user"

    def test_user_cannot_delete(self, client, people):
        resp = client.delete(
            f"/api/users/{people['moderator']['id']}", headers=bearer(people["user"]["accessToken"])
        )
        assert resp.status_code == 403

    def test_missing(self, client, people):
        resp = client.delete("/api/users/nope", headers=bearer(people["admin"]["accessToken"]))
        assert resp.status_code == 404


class TestRoleGateRoutes:
    @pytest.mark.parametrize("who,status", [("admin", 200), ("moderator", 403), ("user", 403)])
    def test_admin_only(self, client, people, who, status):
        resp = client.get("/api/admin", headers=bearer(people[who]["accessToken"]))
        assert resp.status_code == status

    @pytest.mark.parametrize("who,status", [("admin", 200), ("moderator", 200), ("user", 403)])
    def test_admin_or_moderator(self, client, people, who, status):
        resp = client.get("/api/moderator", headers=bearer(people[who]["accessToken"]))
        assert resp.status_code == status

    def test_message(self, client, people):
        resp = client.get("/api/admin", headers=bearer(people["admin"]["accessToken"]))
        assert resp.get_json()["body"]["message"] == "Hello admin"
