"""
Tests for health check endpoints and the API root
"""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "Elite Dog Training"
    assert "timestamp" in data


def test_detailed_health(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["database"]["status"] == "healthy"
    assert data["components"]["user_directory"]["backend"] == "local"


def test_detailed_health_reports_database_failure(client, db, monkeypatch):
    from sqlalchemy.exc import OperationalError

    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is down"))

    monkeypatch.setattr(db, "execute", broken_execute)

    response = client.get("/health/detailed")

    assert response.status_code == 503
    assert response.json()["components"]["database"]["status"] == "unhealthy"


def test_api_root(client):
    response = client.get("/api")

    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["x-request-id"] == "req-123"
