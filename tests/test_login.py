import pytest
from fastapi.testclient import TestClient

from backend.app.core.security import decode_access_token
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


def register_user(client: TestClient, email: str, password: str = "secret"):
    return client.post("/auth/register", json={"email": email, "password": password})


def login(client: TestClient, email: str, password: str = "secret"):
    return client.post("/auth/login", json={"email": email, "password": password})


def _update_user(email: str, **fields):
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == email).first()
        for name, value in fields.items():
            setattr(user, name, value)
        db.commit()


def test_login_returns_bearer_token_for_user():
    client = TestClient(app)
    user_id = register_user(client, "login@example.com").json()["id"]
    response = login(client, "login@example.com")
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert decode_access_token(body["access_token"])["sub"] == str(user_id)


@pytest.mark.parametrize(
    "email,password",
    [("wrongpw@example.com", "bad"), ("nosuch@example.com", "secret")],
)
def test_bad_credentials_return_400(email, password):
    client = TestClient(app)
    register_user(client, "wrongpw@example.com")
    response = login(client, email, password)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid credentials"


def test_missing_hash_returns_400_not_500():
    client = TestClient(app)
    register_user(client, "badhash@example.com")
    _update_user("badhash@example.com", hashed_password=None)
    assert login(client, "badhash@example.com").status_code == 400


def test_inactive_user_cannot_login():
    client = TestClient(app)
    register_user(client, "inactive@example.com")
    _update_user("inactive@example.com", is_active=False)
    response = login(client, "inactive@example.com")
    assert response.status_code == 400
    assert response.json()["detail"] == "User is inactive"


def test_user_with_owned_rows_queries_without_ambiguous_joins():
    client = TestClient(app)
    token = login(client, register_user(client, "owner@example.com").json()["email"]).json()["access_token"]
    client.post("/folders/", json={"name": "Acme"}, headers={"Authorization": f"Bearer {token}"})
    with SessionLocal() as db:
        user = db.query(User).one()
        assert [folder.name for folder in user.folders] == ["Acme"]
