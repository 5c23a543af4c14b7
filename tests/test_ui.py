"""Tests for the browser UI pages."""

from unittest.mock import MagicMock

from task_tracker.client import TaskClientError


class TestAppShellPage:
    def test_empty_list(self, client, task_client, db):
        response = client.get("/")
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert "No tasks available." in html
        assert "Completion: 0.00%" in html

    def test_lists_tasks_with_progress(self, client, task_client, make_task, db):
        make_task("Write README", description="docs")
        make_task("Ship it", status="COMPLETED")

        html = client.get("/").get_data(as_text=True)
        assert "Write README" in html
        assert "Ship it" in html
        assert "Completion: 50.00%" in html
        assert 'style="width: 50.0%"' in html
        assert html.index("Ship it") < html.index("Write README")

    def test_missing_description_renders_dash(self, client, task_client, make_task, db):
        make_task("No desc")
        assert "<td>-</td>" in client.get("/").get_data(as_text=True)

    def test_filter_in_memory(self, client, app, make_task, db):
        make_task("Open task")
        make_task("Done task", status="COMPLETED")
        fake = MagicMock()
        fake.fetch_tasks.return_value = client.get("/tasks").get_json()
        fake.get_task_stats.return_value = {"percentCompleted": 50.0}
        app.extensions["task_client"] = fake

        html = client.get("/?filter=COMPLETED").get_data(as_text=True)
        assert "Done task" in html
        assert "Open task" not in html
        fake.fetch_tasks.assert_called_once_with()

    def test_filter_no_match(self, client, task_client, make_task, db):
        make_task("Open task")

        html = client.get("/?filter=COMPLETED&filter=IN_PROGRESS").get_data(as_text=True)
        assert "No tasks match the selected status." in html

    def test_unknown_filter_is_ignored(self, client, task_client, db):
        html = client.get("/?filter=BOGUS").get_data(as_text=True)
        assert "No tasks available." in html
        assert "No tasks match the selected status." not in html

    def test_list_failure_replaces_view(self, client, app, db):
        fake = MagicMock()
        fake.fetch_tasks.side_effect = TaskClientError("Failed to fetch tasks", 500)
        app.extensions["task_client"] = fake

        response = client.get("/")
        html = response.get_data(as_text=True)
        assert "Error: Failed to fetch tasks" in html
        assert "<table" not in html
        assert "Completion" not in html

    def test_stats_failure_shows_dash(self, client, app, db):
        fake = MagicMock()
        fake.fetch_tasks.return_value = []
        fake.get_task_stats.side_effect = TaskClientError("nope", 500)
        app.extensions["task_client"] = fake

        html = client.get("/").get_data(as_text=True)
        assert "Completion: —" in html
        assert "No tasks available." in html


class TestTaskFormPages:
    def test_edit_modal_prefills(self, client, task_client, make_task, db):
        task = make_task("Edit me", description="before", status="IN_PROGRESS")

        html = client.get(f"/?edit={task['id']}").get_data(as_text=True)
        assert f"Edit Task #{task['id']}" in html
        assert 'value="Edit me"' in html
        assert '<option value="IN_PROGRESS" selected>' in html
        assert "Escape" in html

    def test_new_modal(self, client, task_client, db):
        html = client.get("/?new=1").get_data(as_text=True)
        assert "New Task" in html
        assert 'id="tf-submit" type="submit" disabled' in html

    def test_create_through_form(self, client, task_client, db):
        response = client.post("/ui/tasks", data={"title": "  From UI ", "description": " ", "status": "IN_PROGRESS"})
        assert response.status_code == 302

        tasks = client.get("/tasks").get_json()
        assert len(tasks) == 1
        assert tasks[0]["title"] == "From UI"
        assert tasks[0]["description"] is None
        assert tasks[0]["status"] == "IN_PROGRESS"

    def test_create_blank_title_rerenders(self, client, task_client, db):
        response = client.post("/ui/tasks", data={"title": "   "})
        assert response.status_code == 400
        assert "Title is required." in response.get_data(as_text=True)
        assert client.get("/tasks").get_json() == []

    def test_edit_through_form(self, client, task_client, make_task, db):
        task = make_task("Before")

        response = client.post(
            f"/ui/tasks/{task['id']}",
            data={"title": "After", "description": "now", "status": "COMPLETED"},
        )
        assert response.status_code == 302

        updated = client.get(f"/tasks/{task['id']}").get_json()
        assert (updated["title"], updated["description"], updated["status"]) == ("After", "now", "COMPLETED")

    def test_edit_missing_task_shows_error(self, client, task_client, db):
        response = client.post("/ui/tasks/999999", data={"title": "X"})
        assert response.status_code == 404
        assert "Error: Task with id 999999 not found" in response.get_data(as_text=True)

    def test_delete_through_form(self, client, task_client, make_task, db):
        task = make_task("Bye")

        response = client.post(f"/ui/tasks/{task['id']}/delete")
        assert response.status_code == 302
        assert client.get("/tasks").get_json() == []
