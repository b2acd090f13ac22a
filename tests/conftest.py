import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.db import Database
from main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'pagewatch.db'}",
        jwt_secret="test-secret",
        password_iterations=1_000,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def register(client):
    """Sign a user up and return ready-to-use auth headers."""

    def _register(email="alice@example.com", full_name="Alice Doe", password="secret123"):
        r = client.post("/user/signup", json={"fullName": full_name, "email": email, "password": password})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['token']}"}

    return _register
