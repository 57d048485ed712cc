import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_register_returns_public_fields_only():
    client = TestClient(app)
    response = client.post(
        "/auth/register",
        json={"email": "freelancer@example.com", "password": "secret", "first_name": "Ada", "last_name": "Lovelace"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "freelancer@example.com"
    assert body["first_name"] == "Ada"
    assert body["last_name"] == "Lovelace"
    assert isinstance(body["id"], int)
    assert "password" not in body
    assert "hashed_password" not in body


def test_register_rejects_taken_email():
    client = TestClient(app)
    payload = {"email": "taken@example.com", "password": "secret"}
    assert client.post("/auth/register", json=payload).status_code == 200
    second = client.post("/auth/register", json=payload)
    assert second.status_code == 400
    assert second.json()["detail"] == "Email already registered"


def test_register_validates_email_and_password():
    client = TestClient(app)
    assert client.post("/auth/register", json={"email": "not-an-email", "password": "secret"}).status_code == 422
    assert client.post("/auth/register", json={"email": "empty@example.com", "password": ""}).status_code == 422


def test_registered_user_is_stored_hashed_and_active():
    client = TestClient(app)
    client.post("/auth/register", json={"email": "stored@example.com", "password": "secret"})

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "stored@example.com").first()
        assert user is not None
        assert user.is_active is True
        assert user.hashed_password and user.hashed_password != "secret"
        assert user.created_at > 0
