"""Sign-up / sign-in / current-user endpoints."""

from datetime import timedelta

from backend_api.security import token_service
from conftest import auth_header


class TestSignup:

    def test_signup_returns_sanitized_user(self, client):
        response = client.post(
            "/auth/signup",
            json={"username": "alice", "email": "a@x.com", "password": "secret123"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "User registered successfully!"
        user = body["user"]
        assert user["username"] == "alice"
        assert user["email"] == "a@x.com"
        assert user["role"] == "USER"
        assert user["isActive"] is True
        assert "password" not in user
        assert "passwordHash" not in user
        assert "token" not in body

    def test_signup_accepts_names(self, client):
        response = client.post(
            "/auth/signup",
            json={
                "username": "carol",
                "email": "carol@mail.com",
                "password": "secret123",
                "firstName": "Carol",
                "lastName": "King",
            },
        )
        user = response.json()["user"]
        assert user["firstName"] == "Carol"
        assert user["lastName"] == "King"

    def test_duplicate_username_is_conflict(self, client, users):
        users.signup("alice", email="a@x.com")
        response = client.post(
            "/auth/signup",
            json={"username": "alice", "email": "other@x.com", "password": "secret123"},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_username_uniqueness_is_case_sensitive(self, client, users):
        users.signup("alice", email="a@x.com")
        response = client.post(
            "/auth/signup",
            json={"username": "Alice", "email": "b@x.com", "password": "secret123"},
        )
        assert response.status_code == 200

    def test_duplicate_email_is_conflict(self, client, users):
        users.signup("alice", email="a@x.com")
        response = client.post(
            "/auth/signup",
            json={"username": "alice2", "email": "a@x.com", "password": "secret123"},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_invalid_email_is_invalid_input(self, client):
        response = client.post(
            "/auth/signup",
            json={"username": "alice", "email": "not-an-email", "password": "secret123"},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "INVALID_INPUT"
        assert "email" in body["fields"]

    def test_short_password_is_invalid_input(self, client):
        response = client.post(
            "/auth/signup",
            json={"username": "alice", "email": "a@x.com", "password": "123"},
        )
        assert response.status_code == 400
        assert "password" in response.json()["fields"]


class TestSignin:

    def test_signin_returns_bearer_token(self, client, users):
        users.signup("alice", password="secret123", email="a@x.com")
        response = client.post("/auth/signin", json={"username": "alice", "password": "secret123"})
        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "Bearer"
        assert isinstance(body["token"], str) and body["token"]
        assert body["user"]["username"] == "alice"
        assert "password" not in body["user"]
        assert token_service.parse_subject(body["token"]) == "alice"

    def test_wrong_password_and_unknown_user_look_the_same(self, client, users):
        users.signup("alice")
        wrong = client.post("/auth/signin", json={"username": "alice", "password": "nope-nope"})
        unknown = client.post("/auth/signin", json={"username": "ghost", "password": "nope-nope"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json()
        assert wrong.json()["error"] == "INVALID_CREDENTIALS"

    def test_inactive_user_cannot_sign_in(self, client, users):
        user = users.signup("alice")
        _, admin_headers = users.admin()
        client.put(f"/users/{user['id']}/deactivate", headers=admin_headers)
        response = client.post("/auth/signin", json={"username": "alice", "password": "secret123"})
        assert response.status_code == 401
        assert response.json()["error"] == "INVALID_CREDENTIALS"


class TestMe:

    def test_me_returns_current_user(self, client, users):
        _, headers = users.register("alice")
        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["username"] == "alice"

    def test_me_requires_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_me_rejects_garbage_token(self, client):
        response = client.get("/auth/me", headers=auth_header("garbage"))
        assert response.status_code == 401

    def test_me_rejects_expired_token(self, client, users):
        users.signup("alice")
        expired = token_service.issue("alice", ttl=timedelta(seconds=-1))
        response = client.get("/auth/me", headers=auth_header(expired))
        assert response.status_code == 401
        assert response.json()["error"] == "UNAUTHORIZED"

    def test_token_of_deleted_user_is_rejected(self, client, users):
        user, headers = users.register("alice")
        client.delete(f"/users/{user['id']}", headers=headers)
        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 401

    def test_deactivated_user_token_keeps_working_until_expiry(self, client, users):
        user, headers = users.register("alice")
        _, admin_headers = users.admin()
        client.put(f"/users/{user['id']}/deactivate", headers=admin_headers)
        response = client.get("/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["isActive"] is False
