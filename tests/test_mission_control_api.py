# Tests for Mission Control API endpoints
# Created: 2026-02-05
# Updated: 2026-03-02 - v1 routers, error envelope, signed storage URLs

import tempfile
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from squadboard.api.serve import register_exception_handlers
from squadboard.api.v1 import mount_v1_routers
from squadboard.mission_control import (
    FileBlobStore,
    FileMissionControlStore,
    MissionControlManager,
    UrlSigner,
    reset_blob_store,
    reset_mission_control_manager,
    reset_mission_control_store,
)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def temp_store_path():
    """Create a temporary directory for test storage."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_app(temp_store_path, monkeypatch):
    """Create a test FastAPI app with the v1 routers."""
    reset_mission_control_store()
    reset_mission_control_manager()
    reset_blob_store()

    store = FileMissionControlStore(temp_store_path / "mission_control")
    blobs = FileBlobStore(temp_store_path / "blobs")
    manager = MissionControlManager(
        store,
        blobs,
        signer=UrlSigner("test-signing-key"),
        base_url="http://testserver",
    )

    import squadboard.mission_control.blobs as blobs_module
    import squadboard.mission_control.manager as manager_module
    import squadboard.mission_control.store as store_module

    monkeypatch.setattr(store_module, "_store_instance", store)
    monkeypatch.setattr(blobs_module, "_blob_store_instance", blobs)
    monkeypatch.setattr(manager_module, "_manager_instance", manager)

    app = FastAPI()
    register_exception_handlers(app)
    mount_v1_routers(app)
    return app


@pytest.fixture
def client(test_app):
    """Create a test client."""
    return TestClient(test_app)


def _create_task(client, **overrides):
    payload = {"title": "Test task", "created_by": "nash"}
    payload.update(overrides)
    response = client.post("/api/v1/tasks", json=payload)
    assert response.status_code == 200
    return response.json()["task"]


def _upload(client, data: bytes) -> str:
    upload_url = client.post("/api/v1/storage/upload-url").json()["upload_url"]
    response = client.post(upload_url, content=data)
    assert response.status_code == 200
    return response.json()["storage_id"]


# ============================================================================
# Task API Tests
# ============================================================================


class TestTaskAPI:
    """Tests for task endpoints."""

    def test_list_tasks_empty(self, client):
        response = client.get("/api/v1/tasks")
        assert response.status_code == 200
        assert response.json() == {"tasks": [], "count": 0}

    def test_create_and_get_task(self, client):
        task = _create_task(client, priority="high", tags=["api"])
        assert task["status"] == "pending"
        assert task["priority"] == "high"

        response = client.get(f"/api/v1/tasks/{task['id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["task"]["title"] == "Test task"
        assert data["comments"] == []

    def test_get_task_not_found(self, client):
        response = client.get("/api/v1/tasks/nonexistent")
        assert response.status_code == 404
        assert response.json() == {"detail": "Task nonexistent not found", "code": "not_found"}

    def test_create_task_rejects_bad_priority(self, client):
        response = client.post(
            "/api/v1/tasks",
            json={"title": "x", "created_by": "nash", "priority": "whenever"},
        )
        assert response.status_code == 422

    def test_list_orders_by_priority(self, client):
        _create_task(client, title="low", priority="low")
        _create_task(client, title="urgent", priority="urgent")
        _create_task(client, title="normal")

        titles = [t["title"] for t in client.get("/api/v1/tasks").json()["tasks"]]
        assert titles == ["urgent", "normal", "low"]

    def test_update_status(self, client):
        task = _create_task(client, assigned_to="dev")

        response = client.post(
            f"/api/v1/tasks/{task['id']}/status", json={"status": "in_progress"}
        )
        assert response.status_code == 200
        updated = response.json()["task"]
        assert updated["status"] == "in_progress"
        assert updated["started_at"] is not None

        history = client.get(f"/api/v1/tasks/{task['id']}/history").json()
        assert history["count"] == 1
        assert history["history"][0]["changed_by"] == "dev"

        by_status = client.get("/api/v1/tasks/by-status/in_progress").json()
        assert by_status["count"] == 1

    def test_update_status_invalid_value(self, client):
        task = _create_task(client)
        response = client.post(f"/api/v1/tasks/{task['id']}/status", json={"status": "paused"})
        assert response.status_code == 422

    def test_update_status_missing_task(self, client):
        response = client.post("/api/v1/tasks/nope/status", json={"status": "done"})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_assign(self, client):
        task = _create_task(client)

        response = client.post(
            f"/api/v1/tasks/{task['id']}/assign",
            json={"assigned_to": "otto", "changed_by": "nash"},
        )
        assert response.status_code == 200
        assert response.json()["task"]["assigned_to"] == "otto"

        ottos = client.get("/api/v1/tasks/by-assignee/otto").json()
        assert [t["id"] for t in ottos["tasks"]] == [task["id"]]

        activity = client.get(f"/api/v1/tasks/{task['id']}/activity").json()
        assert activity["activities"][0]["action_type"] == "task_assigned"

    def test_patch_task(self, client):
        task = _create_task(client)

        response = client.patch(
            f"/api/v1/tasks/{task['id']}",
            json={"description": "More detail", "project": "Axia OS"},
        )
        assert response.status_code == 200
        data = response.json()["task"]
        assert data["description"] == "More detail"
        assert data["project"] == "Axia OS"
        assert data["title"] == "Test task"

    def test_history_missing_task(self, client):
        response = client.get("/api/v1/tasks/nope/history")
        assert response.status_code == 404

    def test_task_reads_missing_task(self, client):
        for path in ("history", "comments", "activity"):
            response = client.get(f"/api/v1/tasks/nope/{path}")
            assert response.status_code == 404
            assert response.json()["code"] == "not_found"


# ============================================================================
# Comment API Tests
# ============================================================================


class TestCommentAPI:
    """Tests for comment and storage endpoints."""

    def test_add_and_list_comments(self, client):
        task = _create_task(client)

        response = client.post(
            f"/api/v1/tasks/{task['id']}/comments",
            json={"author": "dev", "content": "Looking into it", "content_type": "markdown"},
        )
        assert response.status_code == 200

        comments = client.get(f"/api/v1/tasks/{task['id']}/comments").json()
        assert comments["count"] == 1
        assert comments["comments"][0]["content_type"] == "markdown"

    def test_empty_comment_rejected(self, client):
        task = _create_task(client)
        response = client.post(
            f"/api/v1/tasks/{task['id']}/comments", json={"author": "dev", "content": "  "}
        )
        assert response.status_code == 400

    def test_comment_on_missing_task(self, client):
        response = client.post(
            "/api/v1/tasks/nope/comments", json={"author": "dev", "content": "hi"}
        )
        assert response.status_code == 404

    def test_attachment_only_comment_gets_placeholder(self, client):
        task = _create_task(client)
        storage_id = _upload(client, b"report")

        response = client.post(
            f"/api/v1/tasks/{task['id']}/comments",
            json={
                "author": "dev",
                "attachments": [
                    {"storage_id": storage_id, "filename": "report.txt", "size": 6}
                ],
            },
        )
        assert response.status_code == 200
        comment = response.json()["comment"]
        assert comment["content"] == "📎 Attached files"
        assert comment["attachments"][0]["storage_id"] == storage_id

    def test_upload_and_download(self, client):
        storage_id = _upload(client, b"hello world")

        response = client.get(f"/api/v1/storage/{storage_id}/url")
        assert response.status_code == 200
        url = response.json()["url"]

        download = client.get(url)
        assert download.status_code == 200
        assert download.content == b"hello world"

    def test_upload_with_bad_signature(self, client):
        response = client.post(
            "/api/v1/storage/upload?expires=9999999999&signature=forged", content=b"x"
        )
        assert response.status_code == 403
        assert response.json()["code"] == "invalid_signature"

    def test_upload_with_non_ascii_signature(self, client):
        response = client.post(
            "/api/v1/storage/upload",
            params={"expires": 9999999999, "signature": "éé" * 32},
            content=b"x",
        )
        assert response.status_code == 403
        assert response.json()["code"] == "invalid_signature"

    def test_url_for_missing_attachment(self, client):
        response = client.get("/api/v1/storage/00000000-0000-0000-0000-000000000000/url")
        assert response.status_code == 404

    def test_delete_comment_removes_blobs(self, client):
        task = _create_task(client)
        storage_id = _upload(client, b"bye")
        comment = client.post(
            f"/api/v1/tasks/{task['id']}/comments",
            json={
                "author": "dev",
                "content": "file",
                "attachments": [{"storage_id": storage_id, "filename": "bye.txt"}],
            },
        ).json()["comment"]

        response = client.delete(f"/api/v1/comments/{comment['id']}")
        assert response.status_code == 200
        assert response.json()["ok"] is True

        assert client.get(f"/api/v1/tasks/{task['id']}/comments").json()["count"] == 0
        assert client.get(f"/api/v1/storage/{storage_id}/url").status_code == 404

    def test_delete_missing_comment(self, client):
        response = client.delete("/api/v1/comments/nope")
        assert response.status_code == 404


# ============================================================================
# Agent API Tests
# ============================================================================


class TestAgentAPI:
    """Tests for agent endpoints."""

    def test_upsert_and_lookup(self, client):
        response = client.post(
            "/api/v1/agents/upsert",
            json={"name": "dev", "config": {"role": "CTO", "emoji": "⚡"}},
        )
        assert response.status_code == 200
        agent = response.json()["agent"]
        assert agent["status"] == "offline"
        assert agent["config"]["role"] == "CTO"

        by_name = client.get("/api/v1/agents/by-name/dev")
        assert by_name.json()["agent"]["id"] == agent["id"]

        by_id = client.get(f"/api/v1/agents/{agent['id']}")
        assert by_id.json()["agent"]["name"] == "dev"

        assert client.get("/api/v1/agents").json()["count"] == 1

    def test_get_agent_not_found(self, client):
        assert client.get("/api/v1/agents/nonexistent").status_code == 404
        assert client.get("/api/v1/agents/by-name/ghost").status_code == 404

    def test_heartbeat(self, client):
        client.post("/api/v1/agents/upsert", json={"name": "otto"})

        response = client.post(
            "/api/v1/agents/heartbeat", json={"name": "otto", "status": "busy"}
        )
        assert response.status_code == 200
        agent = response.json()["agent"]
        assert agent["status"] == "busy"
        assert agent["last_heartbeat"] is not None

    def test_heartbeat_unknown_agent(self, client):
        response = client.post("/api/v1/agents/heartbeat", json={"name": "ghost"})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_set_status(self, client):
        agent = client.post("/api/v1/agents/upsert", json={"name": "mike"}).json()["agent"]

        response = client.post(f"/api/v1/agents/{agent['id']}/status", json={"status": "offline"})
        assert response.status_code == 200
        assert response.json()["agent"]["health_status"] == "degraded"

    def test_costs_and_reset(self, client):
        client.post("/api/v1/agents/upsert", json={"name": "dev"})

        response = client.post(
            "/api/v1/agents/costs",
            json={"name": "dev", "tokens_today": 1000, "cost_today": 0.3},
        )
        assert response.json()["agent"]["tokens_today"] == 1000

        assert client.post("/api/v1/agents/reset-daily-costs").json() == {"reset": 1}
        agent = client.get("/api/v1/agents/by-name/dev").json()["agent"]
        assert agent["tokens_today"] == 0


# ============================================================================
# Activity, Cost, Operator, Health API Tests
# ============================================================================


class TestLedgerAPI:
    """Tests for activity, cost, operator status and health endpoints."""

    def test_activity_feed(self, client):
        _create_task(client, created_by="nash")
        client.post("/api/v1/activity", json={"agent": "dev", "action_type": "deploy"})

        feed = client.get("/api/v1/activity?limit=10").json()
        assert feed["count"] == 2
        assert feed["activities"][0]["action_type"] == "deploy"

        nash = client.get("/api/v1/activity/agent/nash").json()
        assert nash["activities"][0]["action_type"] == "task_created"

    def test_record_cost_and_summary(self, client):
        for agent, cost in [("dev", 0.5), ("dev", 0.25), ("otto", 1.0)]:
            response = client.post(
                "/api/v1/costs",
                json={
                    "agent": agent,
                    "model": "sonnet",
                    "tokens_in": 100,
                    "tokens_out": 20,
                    "estimated_cost": cost,
                },
            )
            assert response.status_code == 200

        assert client.get("/api/v1/costs").json()["count"] == 3
        assert client.get("/api/v1/costs/agent/otto").json()["count"] == 1

        summary = client.get("/api/v1/costs/daily-summary").json()["summary"]
        assert summary["turn_count"] == 3
        assert summary["total_cost"] == pytest.approx(1.75)
        assert summary["by_agent"]["dev"]["turns"] == 2
        assert summary["total_tokens_in"] == 300

        dev = client.get("/api/v1/costs/daily-summary?agent=dev").json()["summary"]
        assert list(dev["by_agent"]) == ["dev"]

    def test_summary_for_past_window_is_empty(self, client):
        client.post(
            "/api/v1/costs",
            json={"agent": "dev", "model": "m", "tokens_in": 1, "tokens_out": 1, "estimated_cost": 1},
        )
        response = client.get("/api/v1/costs/daily-summary?start=2020-01-01T00:00:00")
        assert response.status_code == 200
        summary = response.json()["summary"]
        assert summary["turn_count"] == 0
        assert summary["window"]["start"].startswith("2020-01-01T00:00:00")
        assert summary["window"]["end"].startswith("2020-01-02T00:00:00")

    def test_summary_window_validation(self, client):
        assert client.get("/api/v1/costs/daily-summary?end=2020-01-01T00:00:00").status_code == 400
        response = client.get(
            "/api/v1/costs/daily-summary?start=2020-01-02T00:00:00&end=2020-01-01T00:00:00"
        )
        assert response.status_code == 400

        # One day past the start would overflow the calendar
        response = client.get("/api/v1/costs/daily-summary?start=9999-12-31T12:00:00")
        assert response.status_code == 400

    def test_operator_status(self, client):
        assert client.get("/api/v1/operator-status").json() == {"operator_status": None}

        response = client.put(
            "/api/v1/operator-status",
            json={
                "free_credits_remaining": 4.5,
                "free_credits_total": 10,
                "workspace_balance": 20,
                "loop_running": True,
                "loop_current_task": 2,
                "loop_total_tasks": 5,
                "loop_project": "site",
            },
        )
        assert response.status_code == 200

        status = client.get("/api/v1/operator-status").json()["operator_status"]
        assert status["loop_running"] is True
        assert status["loop_current_task"] == 2
        assert status["last_updated"] is not None

    def test_health_and_stats(self, client):
        health = client.get("/api/v1/health")
        assert health.status_code == 200
        assert health.json()["status"] == "ok"

        _create_task(client)
        stats = client.get("/api/v1/stats").json()["stats"]
        assert stats["tasks"]["total"] == 1
        assert stats["tasks"]["by_status"]["pending"] == 1
