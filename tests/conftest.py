"""Pytest fixtures for task tracker testing."""

import os

import httpx
import pytest


# Disable OpenTelemetry for tests
os.environ["OTEL_SDK_DISABLED"] = "true"


@pytest.fixture
def app():
    """Create test application."""
    from task_tracker import create_app
    from task_tracker.config import TestConfig

    app = create_app(TestConfig)
    app.config["TESTING"] = True

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db(app):
    """Create test database and push an app context for service calls."""
    from task_tracker.extensions import db as _db

    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def task_client(app):
    """TaskClient wired to the in-process app, also used by the UI."""
    from task_tracker.client import TaskClient

    task_client = TaskClient(
        base_url=app.config["TASKS_API_URL"],
        transport=httpx.WSGITransport(app=app),
    )
    app.extensions["task_client"] = task_client
    yield task_client
    task_client.close()


@pytest.fixture
def make_task(client):
    """Create a task through the API and return its JSON."""

    def _make_task(title="Test Task", **fields):
        response = client.post("/tasks", json={"title": title, **fields})
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _make_task
