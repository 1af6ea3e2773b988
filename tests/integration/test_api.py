"""Integration tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from dnc.config import Settings
from dnc.interfaces.api import create_app


@pytest.fixture
def client(data_dir) -> TestClient:
    return TestClient(create_app(Settings(data_dir=data_dir)))


@pytest.fixture
def project(client) -> TestClient:
    client.post("/api/tasks", json={"taskId": "proj-x", "goal": "Ship it", "acceptance": "Released"})
    client.post(
        "/api/tasks/proj-x/children",
        json={"parentTaskId": "proj-x", "taskId": "step-1", "goal": "First", "acceptance": "Merged"},
    )
    return client


class TestTaskRoutes:
    """Test cases for the task tree routes."""

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "ok"

    def test_create_and_get(self, project):
        tree = project.get("/api/tasks/proj-x").json()
        assert tree["id"] == "proj-x"
        assert tree["tasks"][0]["id"] == "step-1"
        assert "additionalInstructions" not in tree

    def test_list(self, project):
        assert project.get("/api/tasks").json() == ["proj-x"]

    def test_create_conflict(self, project):
        response = project.post(
            "/api/tasks", json={"taskId": "proj-x", "goal": "Again", "acceptance": "Again"}
        )
        assert response.status_code == 409

    def test_create_invalid_id(self, client):
        response = client.post("/api/tasks", json={"taskId": "Proj X", "goal": "g", "acceptance": "a"})
        assert response.status_code == 400

    def test_get_missing(self, client):
        response = client.get("/api/tasks/ghost")
        assert response.status_code == 404
        assert response.json()["detail"] == "root not found: ghost"

    def test_update(self, project):
        response = project.patch(
            "/api/tasks/proj-x/nodes/step-1",
            json={"status": "accept", "additionalInstructions": "Use pytest"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["task"]["status"] == "accept"
        assert body["task"]["additionalInstructions"] == "Use pytest"
        assert "warning" not in body

    def test_update_warning(self, project):
        body = project.patch("/api/tasks/proj-x/nodes/step-1", json={"status": "done"}).json()
        assert body["warning"].startswith("Unrecommended status transition")

    def test_update_bad_status(self, project):
        response = project.patch("/api/tasks/proj-x/nodes/step-1", json={"status": "pending"})
        assert response.status_code == 400

    def test_summary(self, project):
        body = project.get("/api/tasks/proj-x/summary").json()
        assert body["rootTaskId"] == "proj-x"
        assert body["total"] == 2
        assert body["counts"]["init"] == 2
        assert body["progressPercent"] == 0.0

    def test_delete_node_and_root(self, project):
        assert project.delete("/api/tasks/proj-x/nodes/step-1").status_code == 200
        assert project.get("/api/tasks/proj-x").json()["tasks"] == []

        assert project.delete("/api/tasks/proj-x/nodes/proj-x").status_code == 200
        assert project.get("/api/tasks").json() == []
        assert project.delete("/api/tasks/proj-x/nodes/proj-x").status_code == 404


class TestBatchUpdateRoute:
    """Test cases for POST /api/tasks/batch-update."""

    def test_partial_success(self, project):
        response = project.post(
            "/api/tasks/batch-update",
            json={
                "updates": [
                    {"taskId": "step-1", "rootTaskId": "proj-x", "status": "done"},
                    {"taskId": "ghost", "rootTaskId": "proj-x", "status": "done"},
                ]
            },
        )
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "results": [
                {"taskId": "step-1", "success": True},
                {"taskId": "ghost", "success": False, "error": "target not found: ghost"},
            ],
        }
        assert project.get("/api/tasks/proj-x").json()["tasks"][0]["status"] == "done"

    def test_empty_updates(self, client):
        response = client.post("/api/tasks/batch-update", json={"updates": []})
        assert response.status_code == 400
        assert response.json() == {"error": "Updates array cannot be empty"}

    def test_invalid_status(self, project):
        response = project.post(
            "/api/tasks/batch-update",
            json={"updates": [{"taskId": "step-1", "rootTaskId": "proj-x", "status": "finished"}]},
        )
        assert response.status_code == 400
        assert "Invalid status" in response.json()["error"]

    def test_missing_updates(self, client):
        response = client.post("/api/tasks/batch-update", json={"items": []})
        assert response.status_code == 400

    def test_recorded_in_history(self, project):
        project.post(
            "/api/tasks/batch-update",
            json={"updates": [{"taskId": "step-1", "rootTaskId": "proj-x", "status": "hold"}]},
        )
        entries = project.get("/api/history", params={"tool_name": "batch_update"}).json()
        assert len(entries) == 1
        assert entries[0]["response"]["success"] is True

        applied = project.get("/api/history", params={"tool_name": "BatchApplied"}).json()
        assert applied[0]["root_id"] == "proj-x"
