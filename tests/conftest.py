import logging
import os

# La configuración se lee al importar backend_api: va antes de cualquier import del paquete
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-key-" * 5
os.environ.pop("ADMIN_USERNAME", None)
os.environ.pop("ADMIN_EMAIL", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from backend_api.db import Base, SessionLocal, engine  # noqa: E402
from backend_api.main import app  # noqa: E402
from backend_api.models.user import Role  # noqa: E402
from backend_api.services.users import UserService  # noqa: E402


@pytest.fixture(autouse=True)
def configure_logging_for_tests(caplog):
    """Make backend_api loggers propagate so caplog can capture them."""
    caplog.set_level(logging.DEBUG)
    backend_logger = logging.getLogger("backend_api")
    original_propagate = backend_logger.propagate
    backend_logger.propagate = True
    yield
    backend_logger.propagate = original_propagate


@pytest.fixture(autouse=True)
def database():
    """Fresh schema for every test (in-memory SQLite shared through StaticPool)."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    # Sin `with`: no se dispara el evento de startup
    return TestClient(app)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class ApiUsers:
    """Helper to register users and obtain their tokens through the API."""

    def __init__(self, client: TestClient, db):
        self.client = client
        self.db = db

    def signup(self, username: str, password: str = "secret123", email: str = None, **extra) -> dict:
        body = {"username": username, "email": email or f"{username}@mail.com", "password": password}
        body.update(extra)
        response = self.client.post("/auth/signup", json=body)
        assert response.status_code == 200, response.text
        return response.json()["user"]

    def token(self, username: str, password: str = "secret123") -> str:
        response = self.client.post("/auth/signin", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    def register(self, username: str, password: str = "secret123") -> tuple:
        """Sign up and sign in; returns (user json, auth headers)."""
        user = self.signup(username, password)
        return user, auth_header(self.token(username, password))

    def admin(self, username: str = "admin", password: str = "admin123") -> tuple:
        user = UserService(self.db).create(
            username=username,
            email=f"{username}@mail.com",
            password=password,
            role=Role.ADMIN,
        )
        return user, auth_header(self.token(username, password))


@pytest.fixture
def users(client, db):
    return ApiUsers(client, db)
