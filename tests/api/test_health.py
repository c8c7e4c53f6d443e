def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    response = client.get("/api/v1/health/db")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"


def test_generated_correlation_id_when_header_missing(client):
    response = client.get("/api/v1/health")
    assert len(response.headers["X-Correlation-ID"]) == 32


def test_pipeline_health_reports_local_index(client):
    response = client.get("/api/v1/health/pipeline")

    assert response.status_code == 200
    body = response.json()
    assert body["vector_store"] == "NumpyIndex"
    assert body["pending_runs"] == 0
    assert body["scheduled_sync"] is False
