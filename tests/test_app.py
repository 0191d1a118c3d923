"""Application-level behaviour: error shape for framework errors and admin seeding."""

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from backend_api.config import Settings, settings
from backend_api.main import app, seed_admin
from backend_api.services.posts import PostService


class TestErrorShape:

    def test_unknown_route_is_flat_not_found(self, client):
        response = client.get("/nope")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "NOT_FOUND"
        assert "message" in body
        assert "detail" not in body

    def test_wrong_method_is_flat_method_not_allowed(self, client):
        response = client.patch("/posts")
        assert response.status_code == 405
        assert response.json()["error"] == "METHOD_NOT_ALLOWED"
        assert "message" in response.json()

    def test_unexpected_exception_is_internal_error(self, monkeypatch, caplog):
        def explode(self, paging):
            raise RuntimeError("boom")

        monkeypatch.setattr(PostService, "list_published", explode)
        client = TestClient(app, raise_server_exceptions=False)

        response = client.get("/posts")

        assert response.status_code == 500
        assert response.json() == {"error": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
        assert "Error no controlado" in caplog.text
        assert "boom" not in response.text


class TestAdminSeeding:

    @pytest.fixture
    def admin_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_USERNAME", "root")
        monkeypatch.setattr(settings, "ADMIN_EMAIL", "root@example.com")
        monkeypatch.setattr(settings, "ADMIN_PASSWORD", "rootpass")

    def test_seeded_admin_can_sign_in(self, client, admin_settings):
        seed_admin()
        response = client.post("/auth/signin", json={"username": "root", "password": "rootpass"})
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "ADMIN"
        assert user["email"] == "root@example.com"

    def test_seeding_twice_keeps_one_admin(self, client, admin_settings):
        seed_admin()
        seed_admin()
        token = client.post("/auth/signin", json={"username": "root", "password": "rootpass"}).json()["token"]
        body = client.get("/users/role/ADMIN", headers={"Authorization": f"Bearer {token}"}).json()
        assert [u["username"] for u in body] == ["root"]

    def test_without_admin_settings_nothing_is_seeded(self, client):
        seed_admin()
        response = client.post("/auth/signin", json={"username": "root", "password": "rootpass"})
        assert response.status_code == 401

    def test_invalid_admin_email_is_rejected_at_startup(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ADMIN_EMAIL="root@localhost")
