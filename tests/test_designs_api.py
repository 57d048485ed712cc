from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)


def test_list_designs():
    response = client.get("/designs/")
    assert response.status_code == 200
    designs = response.json()
    assert {design["id"] for design in designs} >= {"minimal", "professional", "modern", "elegant", "corporate"}
    assert all(design["background_color"].startswith("#") for design in designs)
