from conftest import register


def test_register_returns_tokens_and_user(client):
    r = client.post(
        "/api/auth/register",
        json={"email": "New@Quiz.Local ", "password": "password123", "display_name": "Newbie"},
    )
    assert r.status_code == 201
    body = r.get_json()
    assert body["access_token"] and body["refresh_token"]
    assert body["user"]["email"] == "new@quiz.local"
    assert body["user"]["display_name"] == "Newbie"


def test_register_validation(client):
    assert client.post("/api/auth/register", json={"email": "a@b.c"}).status_code == 400
    r = client.post("/api/auth/register", json={"email": "a@b.c", "password": "short"})
    assert r.status_code == 400
    assert "8 characters" in r.get_json()["error"]
    r = client.post("/api/auth/register", json={"email": "nope", "password": "password123"})
    assert r.status_code == 400


def test_duplicate_email_conflicts(client):
    register(client, "dup@quiz.local")
    r = client.post("/api/auth/register", json={"email": "dup@quiz.local", "password": "password123"})
    assert r.status_code == 409


def test_login_and_me(client):
    register(client, "login@quiz.local")
    r = client.post("/api/auth/login", json={"email": "login@quiz.local", "password": "password123"})
    assert r.status_code == 200
    token = r.get_json()["access_token"]

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.get_json()["user"]["email"] == "login@quiz.local"
    # no display name given: falls back to the email's local part
    assert r.get_json()["user"]["display_name"] == "login"


def test_login_wrong_password(client):
    register(client, "login@quiz.local")
    r = client.post("/api/auth/login", json={"email": "login@quiz.local", "password": "wrong-password"})
    assert r.status_code == 401


def test_refresh(client):
    r = client.post("/api/auth/register", json={"email": "r@quiz.local", "password": "password123"})
    refresh_token = r.get_json()["refresh_token"]
    r = client.post("/api/auth/refresh", headers={"Authorization": f"Bearer {refresh_token}"})
    assert r.status_code == 200
    assert r.get_json()["access_token"]


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
