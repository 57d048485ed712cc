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


def create_tag(client: TestClient, token: str, name: str, tag_type: str = "both") -> dict:
    resp = client.post("/tags/", json={"name": name, "type": tag_type, "color": "#f00"}, headers=auth(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_tag_names_are_unique_per_owner():
    client = TestClient(app)
    token = register_and_login(client, "tags1@example.com", "secret")
    other = register_and_login(client, "tags2@example.com", "secret")
    create_tag(client, token, "urgent")

    dup = client.post("/tags/", json={"name": "urgent"}, headers=auth(token))
    assert dup.status_code == 400
    create_tag(client, other, "urgent")


def test_list_by_type():
    client = TestClient(app)
    token = register_and_login(client, "tags3@example.com", "secret")
    create_tag(client, token, "inv", "invoice")
    create_tag(client, token, "fold", "folder")
    create_tag(client, token, "any", "both")

    names = lambda path, **params: sorted(tag["name"] for tag in client.get(path, params=params, headers=auth(token)).json())
    assert names("/tags/") == ["any", "fold", "inv"]
    assert names("/tags/", type="folder") == ["fold"]
    assert names("/tags/invoice") == ["any", "inv"]
    assert names("/tags/folder") == ["any", "fold"]


def test_tag_type_must_match_target():
    client = TestClient(app)
    token = register_and_login(client, "tags4@example.com", "secret")
    folder_only = create_tag(client, token, "folder-only", "folder")
    invoice_only = create_tag(client, token, "invoice-only", "invoice")
    folder = client.post("/folders/", json={"name": "Acme"}, headers=auth(token)).json()
    invoice = client.post("/invoices/", json={}, headers=auth(token)).json()

    bad_invoice = client.post("/invoices/", json={"tags": [folder_only["id"]]}, headers=auth(token))
    assert bad_invoice.status_code == 400
    assert bad_invoice.json()["detail"] == "Cannot use folder-only tag on invoice"

    bad_folder = client.post(f"/tags/{invoice_only['id']}/folders/{folder['id']}", headers=auth(token))
    assert bad_folder.status_code == 400
    assert bad_folder.json()["detail"] == "Cannot use invoice-only tag on folder"

    ok = client.post(f"/tags/{invoice_only['id']}/invoices/{invoice['id']}", headers=auth(token))
    assert ok.json()["tags"] == [invoice_only["id"]]


def test_assign_and_remove_tags():
    client = TestClient(app)
    token = register_and_login(client, "tags5@example.com", "secret")
    tag = create_tag(client, token, "vip")
    folder = client.post("/folders/", json={"name": "Acme"}, headers=auth(token)).json()
    invoice = client.post("/invoices/", json={}, headers=auth(token)).json()

    client.post(f"/tags/{tag['id']}/invoices/{invoice['id']}", headers=auth(token))
    client.post(f"/tags/{tag['id']}/invoices/{invoice['id']}", headers=auth(token))
    client.post(f"/tags/{tag['id']}/folders/{folder['id']}", headers=auth(token))

    invoices = client.get(f"/tags/{tag['id']}/invoices", headers=auth(token)).json()
    assert [item["id"] for item in invoices] == [invoice["id"]]
    assert invoices[0]["tags"] == [tag["id"]]
    folders = client.get(f"/tags/{tag['id']}/folders", headers=auth(token)).json()
    assert [item["id"] for item in folders] == [folder["id"]]

    removed = client.delete(f"/tags/{tag['id']}/invoices/{invoice['id']}", headers=auth(token)).json()
    assert removed["tags"] == []


def test_deleting_a_tag_strips_it_everywhere():
    client = TestClient(app)
    token = register_and_login(client, "tags6@example.com", "secret")
    keep = create_tag(client, token, "keep")
    doomed = create_tag(client, token, "doomed")
    folder = client.post("/folders/", json={"name": "Acme", "tags": [doomed["id"]]}, headers=auth(token)).json()
    invoice = client.post("/invoices/", json={"tags": [keep["id"], doomed["id"]]}, headers=auth(token)).json()

    resp = client.delete(f"/tags/{doomed['id']}", headers=auth(token))
    assert resp.status_code == 204

    assert client.get(f"/tags/{doomed['id']}", headers=auth(token)).status_code == 404
    assert client.get(f"/invoices/{invoice['id']}", headers=auth(token)).json()["tags"] == [keep["id"]]
    assert client.get(f"/folders/{folder['id']}", headers=auth(token)).json()["tags"] == []


def test_update_tag():
    client = TestClient(app)
    token = register_and_login(client, "tags7@example.com", "secret")
    tag = create_tag(client, token, "old")
    create_tag(client, token, "taken")

    renamed = client.patch(f"/tags/{tag['id']}", json={"name": "new", "type": "invoice"}, headers=auth(token))
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "new"
    assert renamed.json()["type"] == "invoice"
    assert renamed.json()["color"] == "#f00"

    clash = client.patch(f"/tags/{tag['id']}", json={"name": "taken"}, headers=auth(token))
    assert clash.status_code == 400
