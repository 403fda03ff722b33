"""
Tests for health, metrics and root endpoints
"""
from app.api.routes.health import UPLOAD_SUBDIRS, check_upload_directories


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_liveness(client):
    assert client.get("/health/liveness").json()["status"] == "alive"


def test_upload_directories_missing(upload_dir):
    result = check_upload_directories()
    assert result["status"] == "degraded"
    assert set(result["directories"]) == set(UPLOAD_SUBDIRS)


def test_upload_directories_present(upload_dir):
    for relative in UPLOAD_SUBDIRS:
        (upload_dir / relative).mkdir(parents=True)

    result = check_upload_directories()

    assert result["status"] == "healthy"
    assert all(info["exists"] and info["writable"] for info in result["directories"].values())


def test_detailed_health_reports_components(client):
    response = client.get("/health/detailed")
    assert response.status_code == 200
    body = response.json()

    assert body["components"]["database"]["status"] == "healthy"
    assert body["components"]["token_blacklist"]["status"] == "healthy"
    assert body["components"]["token_cleanup"]["enabled"] is False
    # No upload directories in a fresh temp root
    assert body["components"]["uploads"]["status"] == "degraded"
    assert body["status"] == "degraded"


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "token_blacklist_size" in response.text


def test_api_root(client):
    response = client.get("/api")
    assert response.status_code == 200


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"statusCode": 404, "message": "Not Found", "error": "Not Found"}
