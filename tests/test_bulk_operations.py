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


def create_invoice(client: TestClient, token: str, **payload) -> int:
    resp = client.post("/invoices/", json=payload, headers=auth(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def test_bulk_status_counts_missing_ids():
    client = TestClient(app)
    token = register_and_login(client, "bulk1@example.com", "secret")
    ids = [create_invoice(client, token) for _ in range(3)]

    resp = client.post(
        "/invoices/bulk/status", json={"invoice_ids": ids + [9999], "status": "SENT"}, headers=auth(token)
    )
    assert resp.status_code == 200
    assert resp.json() == {"processed": 4, "succeeded": 3, "locked": 0, "not_found": 1, "conflicts": 0}
    statuses = {invoice["status"] for invoice in client.get("/invoices/", headers=auth(token)).json()}
    assert statuses == {"SENT"}


def test_bulk_move_skips_locked_and_conflicting_invoices():
    client = TestClient(app)
    token = register_and_login(client, "bulk2@example.com", "secret")
    target = client.post("/folders/", json={"name": "Target"}, headers=auth(token)).json()["id"]
    create_invoice(client, token, invoice_number="T-1", folder_id=target)

    free = create_invoice(client, token, invoice_number="U-1")
    locked = create_invoice(client, token, invoice_number="U-2")
    clashing = create_invoice(client, token, invoice_number="T-1")
    client.post(f"/invoices/{locked}/lock", headers=auth(token))

    resp = client.post(
        "/invoices/bulk/move", json={"invoice_ids": [free, locked, clashing], "folder_id": target}, headers=auth(token)
    ).json()
    assert resp == {"processed": 3, "succeeded": 1, "locked": 1, "not_found": 0, "conflicts": 1}
    assert client.get(f"/invoices/{free}", headers=auth(token)).json()["folder_id"] == target
    assert client.get(f"/invoices/{locked}", headers=auth(token)).json()["folder_id"] is None


def test_bulk_move_to_unknown_folder_fails_whole_batch():
    client = TestClient(app)
    token = register_and_login(client, "bulk3@example.com", "secret")
    invoice_id = create_invoice(client, token)
    resp = client.post("/invoices/bulk/move", json={"invoice_ids": [invoice_id], "folder_id": 9999}, headers=auth(token))
    assert resp.status_code == 404


def test_bulk_archive_and_delete():
    client = TestClient(app)
    token = register_and_login(client, "bulk4@example.com", "secret")
    other = register_and_login(client, "bulk5@example.com", "secret")
    ids = [create_invoice(client, token) for _ in range(2)]
    foreign = create_invoice(client, other)

    archived = client.post("/invoices/bulk/archive", json={"invoice_ids": ids + [foreign]}, headers=auth(token)).json()
    assert archived["succeeded"] == 2
    assert archived["not_found"] == 1
    assert client.get("/invoices/", headers=auth(token)).json() == []
    assert len(client.get("/invoices/archived", headers=auth(token)).json()) == 2

    deleted = client.post("/invoices/bulk/delete", json={"invoice_ids": ids}, headers=auth(token)).json()
    assert deleted["succeeded"] == 2
    assert client.get("/invoices/archived", headers=auth(token)).json() == []
    assert client.get(f"/invoices/{foreign}", headers=auth(other)).status_code == 200


def test_bulk_requires_identity():
    client = TestClient(app)
    resp = client.post("/invoices/bulk/archive", json={"invoice_ids": [1]})
    assert resp.status_code == 401
