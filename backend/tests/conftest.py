import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ideaboard.config import settings
from ideaboard.database import Base, get_db
from ideaboard.main import app
from ideaboard.models.user import User
from ideaboard.services.auth_service import hash_password

TEST_DB_URL = "sqlite:///./test_ideaboard.db"
DEFAULT_PASSWORD = "password123"

# cheap hashes keep the suite fast; verification reads the cost from the hash
settings.BCRYPT_ROUNDS = 4

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    password_hash = hash_password(DEFAULT_PASSWORD)
    users = {
        "alice": User(username="alice", email="alice@example.com", first_name="Alice", last_name="Ahn",
                      role="EMPLOYEE", password_hash=password_hash),
        "bob": User(username="bob", email="bob@example.com", first_name="Bob", last_name="Baek",
                    role="EMPLOYEE", password_hash=password_hash),
        "carol": User(username="carol", email="carol@example.com", role="EMPLOYEE", password_hash=password_hash),
        "pm": User(username="pm", email="pm@example.com", role="PROJECT_MANAGER", password_hash=password_hash),
        "admin": User(username="admin", email="admin@example.com", role="ADMIN", password_hash=password_hash),
        "ghost": User(username="ghost", email="ghost@example.com", role="EMPLOYEE", password_hash=password_hash,
                      is_active=False),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


def get_token(client, username: str, password: str = DEFAULT_PASSWORD) -> str:
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, username: str, password: str = DEFAULT_PASSWORD) -> dict:
    return {"Authorization": f"Bearer {get_token(client, username, password)}"}


def create_idea(client, headers: dict, **overrides) -> dict:
    payload = {
        "title": "Shared parking calendar",
        "description": "Let teams book visitor parking spots online",
        "category": "Facilities",
        "tags": ["parking", "booking"],
    }
    payload.update(overrides)
    resp = client.post("/api/ideas", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def alice_idea(client, seed_users):
    return create_idea(client, auth_headers(client, "alice"))
