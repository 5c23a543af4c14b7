"""Browser pages: app shell, task list, create/edit modal."""

import logging

from flask import Blueprint, current_app, redirect, render_template, request, url_for

from task_tracker.client import TaskClient, TaskClientError
from task_tracker.ui.state import (
    STATUS_OPTIONS,
    AppShell,
    ShellPhase,
    TaskForm,
    filter_tasks,
    known_statuses,
    status_label,
    task_status,
)


logger = logging.getLogger(__name__)

ui_bp = Blueprint("ui", __name__)


@ui_bp.app_context_processor
def _template_helpers():
    return {"status_label": status_label, "task_status": task_status}


def get_task_client() -> TaskClient:
    """The client shared by the UI, created by the app factory."""
    return current_app.extensions["task_client"]


def _render_shell(shell: AppShell, status_code: int = 200):
    selected = known_statuses(request.args.getlist("filter"))
    return (
        render_template(
            "ui/index.html",
            shell=shell,
            phase=ShellPhase,
            visible_tasks=filter_tasks(shell.tasks, selected),
            selected_statuses=selected,
            status_options=STATUS_OPTIONS,
        ),
        status_code,
    )


def _render_failure(shell: AppShell, error: TaskClientError):
    shell.fail(error.message)
    return _render_shell(shell, error.status_code or 502)


@ui_bp.route("/", methods=["GET"])
def index():
    """App shell: progress bar, task list and, when asked for, the modal.

    Query params:
        filter: Status to show; repeatable. Applied to the fetched list.
        edit: Id of the task to edit.
        new: Open an empty form.
    """
    client = get_task_client()
    shell = AppShell()
    shell.load(client)
    if shell.phase is not ShellPhase.LOADED:
        return _render_shell(shell)

    edit_id = request.args.get("edit", type=int)
    if edit_id is not None:
        task = shell.find_task(edit_id)
        if task is None:
            try:
                task = client.get_task(edit_id)
            except TaskClientError as exc:
                return _render_failure(shell, exc)
        shell.open_editor(task)
    elif request.args.get("new"):
        shell.open_editor()

    return _render_shell(shell)


def _submit(task_id: int | None = None):
    client = get_task_client()
    form = TaskForm.from_form(request.form, task_id=task_id)

    if not form.can_submit:
        shell = AppShell()
        shell.load(client)
        if shell.phase is not ShellPhase.LOADED:
            return _render_shell(shell)
        shell.open_editor()
        form.error = "Title is required."
        shell.form = form
        return _render_shell(shell, 400)

    try:
        if form.is_edit:
            client.update_task(form.task_id, form.payload())
        else:
            client.create_task(form.payload())
    except TaskClientError as exc:
        logger.error(f"Saving task failed: {exc.message}")
        return _render_failure(AppShell(phase=ShellPhase.LOADED), exc)

    return redirect(url_for("ui.index"))


@ui_bp.route("/ui/tasks", methods=["POST"])
def create_task():
    """Create from the modal form, then back to the list."""
    return _submit()


@ui_bp.route("/ui/tasks/<int:task_id>", methods=["POST"])
def update_task(task_id: int):
    """Save the edit modal, then back to the list."""
    return _submit(task_id)


@ui_bp.route("/ui/tasks/<int:task_id>/delete", methods=["POST"])
def delete_task(task_id: int):
    try:
        get_task_client().delete_task(task_id)
    except TaskClientError as exc:
        logger.error(f"Deleting task {task_id} failed: {exc.message}")
        return _render_failure(AppShell(phase=ShellPhase.LOADED), exc)
    return redirect(url_for("ui.index"))
