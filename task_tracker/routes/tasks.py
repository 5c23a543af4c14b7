"""Task CRUD and statistics endpoints."""

import re
from typing import Any

from flask import Blueprint, request
from marshmallow import ValidationError

from task_tracker.exceptions import TaskValidationError
from task_tracker.schemas import (
    TaskCreateSchema,
    TaskListQuerySchema,
    TaskSchema,
    TaskStatsSchema,
    TaskUpdateSchema,
)
from task_tracker.services import tasks as task_service
from task_tracker.telemetry import get_meter, get_tracer


tracer = get_tracer(__name__)
meter = get_meter(__name__)

tasks_created = meter.create_counter(
    name="tasks.created",
    description="Tasks created",
    unit="1",
)
tasks_updated = meter.create_counter(
    name="tasks.updated",
    description="Tasks updated",
    unit="1",
)
tasks_deleted = meter.create_counter(
    name="tasks.deleted",
    description="Tasks deleted",
    unit="1",
)

tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

# at most 10 digits: anything longer cannot fit the column
_TASK_ID = re.compile(r"-?[0-9]{1,10}")
_MAX_TASK_ID = 2**31 - 1


def _parse_task_id(raw: str) -> int:
    # ids are 32-bit integer columns
    if not _TASK_ID.fullmatch(raw) or abs(int(raw)) > _MAX_TASK_ID:
        raise TaskValidationError("Validation failed (numeric string is expected)")
    return int(raw)


def _json_body() -> dict[str, Any]:
    if not request.get_data():
        return {}
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise TaskValidationError("Request body must be a JSON object")
    return data


def _load(schema, data) -> dict[str, Any]:
    try:
        return schema.load(data)
    except ValidationError as err:
        raise TaskValidationError("Validation failed", err.messages) from None


@tasks_bp.route("", methods=["GET"])
def list_tasks():
    """List tasks, newest first.

    Query params:
        status: Only return tasks with this status.

    Returns:
        JSON array of tasks.
    """
    query = _load(TaskListQuerySchema(), request.args)
    tasks = task_service.list_tasks(query.get("status"))
    return TaskSchema(many=True).jsonify(tasks)


@tasks_bp.route("", methods=["POST"])
def create_task():
    """Create a new task.

    Returns:
        JSON response with created task.
    """
    with tracer.start_as_current_span("task.create") as span:
        data = _load(TaskCreateSchema(), _json_body())

        task = task_service.create_task(
            title=data["title"],
            description=data.get("description"),
            status=data.get("status"),
        )

        span.set_attribute("task.id", task.id)
        span.set_attribute("task.status", task.status.value)
        tasks_created.add(1, {"status": task.status.value})

        return TaskSchema().jsonify(task), 201


@tasks_bp.route("/get-stats", methods=["GET"])
def get_stats():
    """Completion statistics over all tasks.

    Returns:
        JSON with total, per-status counts and completion percentage.
    """
    with tracer.start_as_current_span("task.stats") as span:
        stats = task_service.task_stats()
        span.set_attribute("task.total", stats.total)
        return TaskStatsSchema().jsonify(stats)


@tasks_bp.route("/<task_id>", methods=["GET"])
def get_task(task_id: str):
    """Get a single task by id."""
    task = task_service.get_task(_parse_task_id(task_id))
    return TaskSchema().jsonify(task)


@tasks_bp.route("/<task_id>", methods=["PUT"])
def update_task(task_id: str):
    """Update a task with the fields present in the body.

    Args:
        task_id: Task id, must be an integer.

    Returns:
        JSON response with updated task.
    """
    with tracer.start_as_current_span("task.update") as span:
        parsed_id = _parse_task_id(task_id)
        span.set_attribute("task.id", parsed_id)
        changes = _load(TaskUpdateSchema(), _json_body())
        task = task_service.update_task(parsed_id, changes)

        span.set_attribute("task.status", task.status.value)
        tasks_updated.add(1, {"status": task.status.value})

        return TaskSchema().jsonify(task)


@tasks_bp.route("/<task_id>", methods=["DELETE"])
def delete_task(task_id: str):
    """Delete a task.

    Returns:
        JSON response with the deleted task's last state.
    """
    with tracer.start_as_current_span("task.delete") as span:
        parsed_id = _parse_task_id(task_id)
        span.set_attribute("task.id", parsed_id)

        task = task_service.remove_task(parsed_id)
        tasks_deleted.add(1, {"status": task.status.value})

        return TaskSchema().jsonify(task)
