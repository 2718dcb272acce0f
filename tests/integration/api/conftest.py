import pytest
from fastapi.testclient import TestClient

from biolink.api.deps import Settings, get_settings
from biolink.api.main import app


@pytest.fixture
def client(db_path, tmp_path):
    def _settings():
        s = Settings()
        s.data_dir = tmp_path
        s.db_path = db_path
        return s

    app.dependency_overrides[get_settings] = _settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Register + log in a user; returns bearer headers."""

    def _login(email: str, password: str = "correct-horse") -> dict[str, str]:
        resp = client.post("/api/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/auth/login", data={"username": email, "password": password})
        assert resp.status_code == 200, resp.text
        # Use the header only, so several users can share one client
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


@pytest.fixture
def with_profile(client, login):
    """Log in a user and create their profile."""

    def _make(username: str) -> dict[str, str]:
        headers = login(f"{username}@example.com")
        resp = client.post("/api/profiles", json={"username": username}, headers=headers)
        assert resp.status_code == 201, resp.text
        return headers

    return _make
