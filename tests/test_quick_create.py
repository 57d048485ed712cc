from datetime import date

import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.main import app


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_quick_create_uses_folder_defaults_and_continues_the_sequence():
    client = TestClient(app)
    token = register_and_login(client, "quick1@example.com", "secret")
    client.put(
        "/profile/me",
        json={"business_name": "Acme Studio", "email": "me@acme.test", "invoice_prefix": "ACME"},
        headers=auth(token),
    )
    customer = client.post(
        "/clients/", json={"name": "Globex", "email": "ap@globex.test", "country": "US"}, headers=auth(token)
    ).json()
    folder = client.post(
        "/folders/",
        json={
            "name": "Globex",
            "client_profile_id": customer["id"],
            "default_hourly_rate": 50,
            "default_hours_per_day": 7.5,
            "default_payment_terms": "NET_15",
            "default_currency": "EUR",
            "default_job_title": "Consultant",
        },
        headers=auth(token),
    ).json()
    client.post(
        "/invoices/",
        json={
            "folder_id": folder["id"],
            "invoice_number": "ACME-004",
            "period_start": "2024-02-01",
            "period_end": "2024-02-15",
        },
        headers=auth(token),
    )

    resp = client.post(
        "/invoices/quick-create", json={"folder_id": folder["id"], "issue_date": "2024-02-20"}, headers=auth(token)
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["invoice_number"] == "ACME-005"
    assert (data["period_start"], data["period_end"]) == ("2024-02-16", "2024-02-29")
    assert len(data["daily_work_hours"]) == 14
    assert data["total_days"] == 10
    assert data["total_hours"] == 75
    assert data["total_amount"] == 3750
    assert data["currency"] == "EUR"
    assert data["payment_terms"] == "NET_15"
    assert data["due_date"] == "2024-03-06"
    assert data["job_title"] == "Consultant"
    assert data["from_party"]["name"] == "Acme Studio"
    assert data["to_party"]["name"] == "Globex"
    assert data["to_party"]["email"] == "ap@globex.test"
    assert data["status"] == "DRAFT"


def test_quick_create_with_explicit_period_and_rate():
    client = TestClient(app)
    token = register_and_login(client, "quick2@example.com", "secret")
    resp = client.post(
        "/invoices/quick-create",
        json={"period_start": "2024-03-04", "period_end": "2024-03-08", "hourly_rate": 20},
        headers=auth(token),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["folder_id"] is None
    assert data["invoice_number"] == "001"
    assert data["total_hours"] == 40
    assert data["total_amount"] == 800
    assert data["issue_date"] == date.today().isoformat()


def test_quick_create_rejects_inverted_period():
    client = TestClient(app)
    token = register_and_login(client, "quick3@example.com", "secret")
    resp = client.post(
        "/invoices/quick-create",
        json={"period_start": "2024-03-08", "period_end": "2024-03-04"},
        headers=auth(token),
    )
    assert resp.status_code == 400


def test_quick_create_requires_identity():
    client = TestClient(app)
    assert client.post("/invoices/quick-create", json={}).status_code == 401
