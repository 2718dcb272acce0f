"""Integration tests for /api/auth."""


def test_register_login_me(client):
    resp = client.post(
        "/api/auth/register", json={"email": "Alice@Example.com", "password": "long-enough"}
    )
    assert resp.status_code == 201
    assert resp.json()["email"] == "alice@example.com"

    resp = client.post(
        "/api/auth/login", data={"username": "alice@example.com", "password": "long-enough"}
    )
    assert resp.status_code == 200
    assert resp.json()["token_type"] == "bearer"
    assert "access_token" in resp.cookies

    # Cookie alone authenticates
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["email"] == "alice@example.com"


def test_logout_clears_cookie(client):
    client.post("/api/auth/register", json={"email": "a@example.com", "password": "long-enough"})
    client.post("/api/auth/login", data={"username": "a@example.com", "password": "long-enough"})

    client.post("/api/auth/logout")

    assert client.get("/api/auth/me").status_code == 401


def test_wrong_password(client):
    client.post("/api/auth/register", json={"email": "a@example.com", "password": "long-enough"})

    resp = client.post("/api/auth/login", data={"username": "a@example.com", "password": "nope"})

    assert resp.status_code == 401


def test_duplicate_email(client):
    client.post("/api/auth/register", json={"email": "a@example.com", "password": "long-enough"})

    resp = client.post(
        "/api/auth/register", json={"email": "a@example.com", "password": "long-enough"}
    )

    assert resp.status_code == 400
    assert resp.json()["field"] == "email"


def test_short_password(client):
    resp = client.post("/api/auth/register", json={"email": "a@example.com", "password": "short"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "password_too_short"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "service": "api"}
