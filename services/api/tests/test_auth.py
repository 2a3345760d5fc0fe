from app.models import TaskTemplate, User
from app.settings import settings


def test_register_creates_user_with_default_templates(client, db_session):
    resp = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "secret1", "name": "Alice"},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()["user"]
    assert data["username"] == "alice"
    assert data["name"] == "Alice"
    # Challenge starts on the (overridden) day of registration
    assert data["challenge_start_date"] == "2025-12-10"
    assert settings.session_cookie_name in resp.headers.get("set-cookie", "")

    templates = (
        db_session.query(TaskTemplate)
        .filter(TaskTemplate.user_id == data["id"])
        .order_by(TaskTemplate.sort_order)
        .all()
    )
    assert len(templates) == 6
    assert [t.sort_order for t in templates] == [1, 2, 3, 4, 5, 6]
    assert all(t.is_active for t in templates)


def test_register_never_stores_plain_password(client, db_session):
    client.post("/api/auth/register", json={"username": "alice", "password": "secret1", "name": "Alice"})
    user = db_session.query(User).filter_by(username="alice").one()
    assert user.password_hash != "secret1"
    assert user.password_hash.startswith("$2")


def test_register_duplicate_username(client, user):
    resp = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "another1", "name": "Alice 2"},
    )
    assert resp.status_code == 409


def test_register_validation(client):
    short_user = client.post("/api/auth/register", json={"username": "al", "password": "secret1", "name": "A"})
    assert short_user.status_code == 400

    short_pass = client.post("/api/auth/register", json={"username": "alice", "password": "123", "name": "A"})
    assert short_pass.status_code == 400

    missing_name = client.post("/api/auth/register", json={"username": "alice", "password": "secret1"})
    assert missing_name.status_code == 400


def test_login(client, user):
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == user.id
    assert settings.session_cookie_name in resp.headers.get("set-cookie", "")


def test_login_wrong_password(client, user):
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    assert resp.status_code == 401

    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "secret1"})
    assert unknown.status_code == 401


def test_me(client, user, auth_headers):
    anonymous = client.get("/api/auth/me")
    assert anonymous.status_code == 200
    assert anonymous.json() == {"user": None}

    resp = client.get("/api/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "alice"


def test_me_with_tampered_cookie(client, user):
    resp = client.get("/api/auth/me", headers={"Cookie": f"{settings.session_cookie_name}=not-a-token"})
    assert resp.status_code == 200
    assert resp.json() == {"user": None}


def test_protected_endpoint_requires_session(client):
    assert client.get("/api/task-templates").status_code == 401
    assert client.get("/api/tasks/today").status_code == 401
    assert client.get("/api/calendar").status_code == 401


def test_session_for_deleted_user(client, user, auth_headers, db_session):
    db_session.delete(user)
    db_session.commit()

    assert client.get("/api/calendar/challenge", headers=auth_headers).status_code == 401


def test_update_challenge_start(client, user, auth_headers):
    resp = client.patch(
        "/api/auth/me/challenge-start",
        json={"challenge_start_date": "2025-11-20"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["challenge_start_date"] == "2025-11-20"


def test_logout_clears_cookie(client):
    resp = client.post("/api/auth/logout")
    assert resp.status_code == 200
    assert settings.session_cookie_name in resp.headers.get("set-cookie", "")
