"""Tests for correlation ID header and request logging."""

from structlog.testing import capture_logs


def test_correlation_id_on_success(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert "X-Correlation-ID" in response.headers
    assert len(response.headers["X-Correlation-ID"]) == 8  # 4 bytes as hex


def test_correlation_id_on_error_responses(client):
    """Structured error bodies go through the middleware like any other response."""
    task = client.get("/api/tasks").json()

    forbidden = client.post(f"/api/tasks/{task['task_id']}", json={"result": 0})
    unauthorized = client.post(
        f"/api/tasks/{task['task_id']}",
        json={"result": 0},
        headers={"Authorization": "Bearer bad"},
    )
    not_found = client.post(
        "/api/tasks/missing",
        json={"result": 0},
        headers={"Authorization": f"Bearer {task['token']}"},
    )

    for response, status in ((forbidden, 403), (unauthorized, 401), (not_found, 404)):
        assert response.status_code == status
        assert len(response.headers["X-Correlation-ID"]) == 8


def test_correlation_id_on_validation_error(client):
    response = client.post("/api/tasks/whatever", json={"result": 1000})
    assert response.status_code == 422
    assert "X-Correlation-ID" in response.headers


def test_correlation_ids_unique_across_requests(client):
    response1 = client.get("/health")
    response2 = client.get("/health")

    corr_id_1 = response1.headers.get("X-Correlation-ID")
    corr_id_2 = response2.headers.get("X-Correlation-ID")

    assert corr_id_1 != corr_id_2, "Correlation IDs should be unique across requests"


def test_completed_request_logs_route_and_task_id(client):
    task = client.get("/api/tasks").json()

    with capture_logs() as logs:
        client.post(
            f"/api/tasks/{task['task_id']}",
            json={"result": 0},
            headers={"Authorization": f"Bearer {task['token']}"},
        )

    completed = [entry for entry in logs if entry["event"] == "request_completed"]
    assert len(completed) == 1
    assert completed[0]["route"] == "/api/tasks/{task_id}"
    assert completed[0]["task_id"] == task["task_id"]
    assert all(task["token"] not in str(entry) for entry in logs)
