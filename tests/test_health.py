from fastapi.testclient import TestClient
from faculty_eval.main import app


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint():
    """Test root endpoint"""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Faculty Evaluation API"
    assert data["status"] == "ok"
    assert data["api"] == "/api/v1"
    assert "docs" in data
    assert "health" in data


def test_unknown_route_uses_error_envelope():
    client = TestClient(app)
    r = client.get("/api/v1/does-not-exist")
    assert r.status_code == 404
    body = r.json()
    assert body["status"] == "error"
    assert body["message"]
