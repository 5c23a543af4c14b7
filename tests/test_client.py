"""Tests for the Task API client."""

import httpx
import pytest

from task_tracker.client import DEFAULT_ERROR_MESSAGE, TaskClient, TaskClientError


class TestAgainstApp:
    def test_crud_flow(self, task_client, db):
        created = task_client.create_task({"title": "A", "description": "first"})
        assert created["status"] == "NOT_STARTED"

        fetched = task_client.get_task(created["id"])
        assert fetched["title"] == "A"

        updated = task_client.update_task(created["id"], {"status": "COMPLETED"})
        assert updated["status"] == "COMPLETED"

        assert [t["id"] for t in task_client.fetch_tasks()] == [created["id"]]
        assert task_client.fetch_tasks(status="IN_PROGRESS") == []

        deleted = task_client.delete_task(created["id"])
        assert deleted["id"] == created["id"]
        assert task_client.fetch_tasks() == []

    def test_stats(self, task_client, db):
        task_client.create_task({"title": "A"})
        task_client.create_task({"title": "B", "status": "COMPLETED"})

        stats = task_client.get_task_stats()
        assert stats["total"] == 2
        assert stats["percentCompleted"] == 50.0

    def test_not_found_carries_server_message(self, task_client, db):
        with pytest.raises(TaskClientError) as exc_info:
            task_client.update_task(999999, {"title": "X"})
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Task with id 999999 not found"

    def test_validation_error(self, task_client, db):
        with pytest.raises(TaskClientError) as exc_info:
            task_client.create_task({"title": ""})
        assert exc_info.value.status_code == 400


def _client_for(handler) -> TaskClient:
    return TaskClient(base_url="http://api.test/tasks/", transport=httpx.MockTransport(handler))


class TestErrorExtraction:
    def test_uses_message_field(self):
        client = _client_for(lambda request: httpx.Response(400, json={"message": "bad things"}))
        with pytest.raises(TaskClientError, match="bad things"):
            client.fetch_tasks()

    def test_falls_back_without_body(self):
        client = _client_for(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(TaskClientError) as exc_info:
            client.get_task_stats()
        assert exc_info.value.message == DEFAULT_ERROR_MESSAGE
        assert exc_info.value.status_code == 500

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client_for(handler)
        with pytest.raises(TaskClientError) as exc_info:
            client.fetch_tasks()
        assert exc_info.value.status_code is None


class TestRequests:
    def test_urls_and_methods(self):
        seen = []

        def handler(request):
            seen.append((request.method, str(request.url)))
            return httpx.Response(200, json={})

        with _client_for(handler) as client:
            client.fetch_tasks(status="COMPLETED")
            client.update_task(3, {"title": "T"})
            client.delete_task(3)
            client.get_task_stats()

        assert seen == [
            ("GET", "http://api.test/tasks?status=COMPLETED"),
            ("PUT", "http://api.test/tasks/3"),
            ("DELETE", "http://api.test/tasks/3"),
            ("GET", "http://api.test/tasks/get-stats"),
        ]

    def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("TASKS_API_URL", "http://env.test/tasks")
        client = TaskClient()
        assert client.base_url == "http://env.test/tasks"
        client.close()
