"""Registration, login, token refresh and bearer authentication."""

from datetime import datetime, timedelta, timezone

from jose import jwt

from ideaboard.config import settings
from ideaboard.services.auth_service import ALGORITHM, create_refresh_token, hash_password, verify_password
from tests.conftest import auth_headers, DEFAULT_PASSWORD


def test_register_creates_employee_with_tokens(client):
    resp = client.post(
        "/api/auth/register",
        json={"username": "dora", "email": "Dora@Example.com", "password": "secret-pass", "first_name": "Dora"},
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["user"]["username"] == "dora"
    assert data["user"]["email"] == "dora@example.com"
    assert data["user"]["role"] == "EMPLOYEE"
    assert data["user"]["xp_points"] == 0
    assert data["user"]["level"] == 1
    assert "password_hash" not in data["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["username"] == "dora"


def test_register_duplicate_username_and_email_conflict(client, seed_users):
    dup_name = client.post(
        "/api/auth/register",
        json={"username": "alice", "email": "other@example.com", "password": "secret-pass"},
    )
    assert dup_name.status_code == 409

    dup_email = client.post(
        "/api/auth/register",
        json={"username": "alice2", "email": "alice@example.com", "password": "secret-pass"},
    )
    assert dup_email.status_code == 409


def test_register_short_password_is_bad_request(client):
    resp = client.post(
        "/api/auth/register",
        json={"username": "erin", "email": "erin@example.com", "password": "short"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["status"] == 400
    assert body["error"] == "Bad Request"
    assert "password" in body["message"]
    assert "timestamp" in body


def test_login_wrong_password(client, seed_users):
    resp = client.post("/api/auth/login", json={"username": "alice", "password": "nope-nope"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid username or password"


def test_login_unknown_user(client, seed_users):
    resp = client.post("/api/auth/login", json={"username": "nobody", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid username or password"


def test_login_deactivated_account(client, seed_users):
    resp = client.post("/api/auth/login", json={"username": "ghost", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Account is deactivated"


def test_login_sets_last_login(client, seed_users):
    resp = client.post("/api/auth/login", json={"username": "bob", "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    assert resp.json()["user"]["last_login"] is not None


def test_refresh_issues_new_pair(client, seed_users):
    login = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD}).json()
    resp = client.post("/api/auth/refresh", json={"refresh_token": login["refresh_token"]})
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "alice"


def test_access_token_cannot_refresh(client, seed_users):
    login = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD}).json()
    resp = client.post("/api/auth/refresh", json={"refresh_token": login["access_token"]})
    assert resp.status_code == 401


def test_refresh_token_rejected_as_bearer(client, seed_users):
    login = client.post("/api/auth/login", json={"username": "alice", "password": DEFAULT_PASSWORD}).json()
    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {login['refresh_token']}"})
    assert resp.status_code == 401


def test_refresh_for_deactivated_user_rejected(client, seed_users):
    token = create_refresh_token(seed_users["ghost"])
    resp = client.post("/api/auth/refresh", json={"refresh_token": token})
    assert resp.status_code == 401


def test_missing_or_invalid_bearer(client, seed_users):
    assert client.get("/api/ideas").status_code == 401
    assert client.get("/api/ideas", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401
    assert client.get("/api/ideas", headers={"Authorization": "Basic abc"}).status_code == 401


def test_me_with_valid_token(client, seed_users):
    resp = client.get("/api/auth/me", headers=auth_headers(client, "pm"))
    assert resp.status_code == 200
    assert resp.json()["role"] == "PROJECT_MANAGER"


def test_password_hashing_round_trip():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_register_password_longer_than_bcrypt_limit(client):
    too_long = client.post(
        "/api/auth/register",
        json={"username": "fred", "email": "fred@example.com", "password": "p" * 100},
    )
    assert too_long.status_code == 400
    assert "72 bytes" in too_long.json()["message"]

    # 40 characters, 80 bytes
    multibyte = client.post(
        "/api/auth/register",
        json={"username": "fred", "email": "fred@example.com", "password": "é" * 40},
    )
    assert multibyte.status_code == 400

    at_limit = client.post(
        "/api/auth/register",
        json={"username": "fred", "email": "fred@example.com", "password": "p" * 72},
    )
    assert at_limit.status_code == 201


def test_expired_access_token_rejected(client, seed_users):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {
            "sub": str(seed_users["alice"].user_id),
            "username": "alice",
            "role": "EMPLOYEE",
            "type": "access",
            "iat": now - timedelta(minutes=61),
            "exp": now - timedelta(minutes=1),
        },
        settings.SECRET_KEY,
        algorithm=ALGORITHM,
    )
    resp = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
