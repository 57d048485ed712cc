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


def create_invoice(client: TestClient, token: str, amount: float, **payload) -> dict:
    payload.setdefault("line_items", [{"description": "Work", "quantity": 1, "unit_price": amount}])
    resp = client.post("/invoices/", json=payload, headers=auth(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def seed(client: TestClient, token: str) -> int:
    folder_id = client.post("/folders/", json={"name": "Acme"}, headers=auth(token)).json()["id"]
    create_invoice(client, token, 100, folder_id=folder_id, to_party={"name": "Acme"}, status="PAID", issue_date="2024-01-10")
    create_invoice(client, token, 300, folder_id=folder_id, to_party={"name": "Acme"}, status="SENT", issue_date="2024-01-20")
    create_invoice(client, token, 50, to_party={"name": "Globex"}, currency="EUR", issue_date="2024-03-05")
    archived = create_invoice(client, token, 1000, to_party={"name": "Acme"}, issue_date="2024-02-01")
    deleted = create_invoice(client, token, 2000, to_party={"name": "Acme"}, issue_date="2024-02-02")
    client.post(f"/invoices/{archived['id']}/archive", headers=auth(token))
    client.delete(f"/invoices/{deleted['id']}", headers=auth(token))
    return folder_id


def test_global_analytics_excludes_archived_and_deleted():
    client = TestClient(app)
    token = register_and_login(client, "stats1@example.com", "secret")
    seed(client, token)

    data = client.get("/analytics/global", headers=auth(token)).json()
    assert data["invoice_count"] == 3
    assert data["total_amount"] == 450
    assert data["average_amount"] == 150
    assert data["paid_amount"] == 100
    assert data["pending_amount"] == 300
    assert data["draft_count"] == 1
    assert data["currency_breakdown"] == {"USD": {"count": 2, "total": 400}, "EUR": {"count": 1, "total": 50}}
    assert data["oldest_invoice_date"] == "2024-01-10"
    assert data["newest_invoice_date"] == "2024-03-05"

    with_archived = client.get("/analytics/global", params={"include_archived": True}, headers=auth(token)).json()
    assert with_archived["invoice_count"] == 4


def test_folder_and_unfiled_analytics():
    client = TestClient(app)
    token = register_and_login(client, "stats2@example.com", "secret")
    folder_id = seed(client, token)

    folder = client.get(f"/analytics/folders/{folder_id}", headers=auth(token)).json()
    assert folder["folder_name"] == "Acme"
    assert folder["invoice_count"] == 2
    assert folder["total_amount"] == 400

    unfiled = client.get("/analytics/unfiled", headers=auth(token)).json()
    assert unfiled["invoice_count"] == 1
    assert unfiled["client_breakdown"] == {"Globex": {"count": 1, "total": 50}}

    assert len(client.get("/analytics/folders", headers=auth(token)).json()) == 1
    assert client.get("/analytics/folders/9999", headers=auth(token)).status_code == 404


def test_status_client_and_monthly_breakdowns():
    client = TestClient(app)
    token = register_and_login(client, "stats3@example.com", "secret")
    seed(client, token)

    by_status = client.get("/analytics/by-status", headers=auth(token)).json()
    assert by_status["PAID"]["total_amount"] == 100
    assert by_status["SENT"]["count"] == 1

    by_client = client.get("/analytics/by-client", headers=auth(token)).json()
    assert [entry["client_name"] for entry in by_client] == ["Acme", "Globex"]
    assert by_client[0]["paid_amount"] == 100
    assert by_client[0]["last_invoice_date"] == "2024-01-20"

    monthly = client.get("/analytics/monthly", params={"year": 2024}, headers=auth(token)).json()
    assert monthly["year"] == 2024
    assert len(monthly["months"]) == 12
    january = monthly["months"][0]
    assert january == {"month": "2024-01", "invoiced": 400, "paid": 100, "hours": 0, "count": 2}
    assert monthly["months"][1]["count"] == 0


def test_analytics_without_identity():
    client = TestClient(app)
    assert client.get("/analytics/global").json() is None
    assert client.get("/analytics/by-client").json() == []
