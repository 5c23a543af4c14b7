"""Task CRUD and completion statistics."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func

from task_tracker.exceptions import TaskNotFoundError, TaskValidationError
from task_tracker.extensions import db
from task_tracker.models import Task, TaskStatus
from task_tracker.models.task import utcnow


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"title", "description", "status", "due_date"})


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counts over all tasks."""

    total: int
    by_status: dict[str, int]
    percent_completed: float


def _clean_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise TaskValidationError("Title must not be empty", {"title": ["Title must not be empty."]})
    return title


def _coerce_status(status: Any) -> TaskStatus:
    if isinstance(status, TaskStatus):
        return status
    try:
        return TaskStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise TaskValidationError(
            f"Invalid status {status!r}", {"status": [f"Must be one of: {allowed}."]}
        ) from None


def create_task(title: str, description: str | None = None, status: Any = None) -> Task:
    """Create and persist a new task.

    Args:
        title: Non-empty title.
        description: Optional free text.
        status: Initial status. Defaults to NOT_STARTED.

    Returns:
        The persisted task, with id and timestamps assigned.

    Raises:
        TaskValidationError: If the title is empty or the status is unknown.
    """
    logger.info("Creating a new task...")
    task = Task(
        title=_clean_title(title),
        description=description,
        status=_coerce_status(status) if status is not None else TaskStatus.NOT_STARTED,
    )
    db.session.add(task)
    db.session.commit()
    logger.info(f"Task created: {task.id}", extra={"task_id": task.id})
    return task


def list_tasks(status: Any = None) -> list[Task]:
    """Return tasks newest first, optionally only those with the given status."""
    query = db.session.query(Task)
    if status is not None:
        query = query.filter(Task.status == _coerce_status(status))
    return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(task_id: int) -> Task:
    """Fetch a task by id.

    Raises:
        TaskNotFoundError: If no task has this id.
    """
    task = db.session.get(Task, task_id)
    if task is None:
        logger.warning(f"Task with id {task_id} not found")
        raise TaskNotFoundError(task_id)
    return task


def update_task(task_id: int, changes: Mapping[str, Any]) -> Task:
    """Apply the supplied fields to an existing task.

    Only keys present in ``changes`` are touched. ``updated_at`` is bumped
    even when no value actually changes.

    Raises:
        TaskNotFoundError: If no task has this id.
        TaskValidationError: If a field is unknown or invalid.
    """
    logger.info(f"Updating task with id {task_id}...")
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise TaskValidationError(
            "Unknown fields", {name: ["Unknown field."] for name in sorted(unknown)}
        )

    task = get_task(task_id)

    if "title" in changes:
        task.title = _clean_title(changes["title"])
    if "description" in changes:
        task.description = changes["description"]
    if "status" in changes:
        task.status = _coerce_status(changes["status"])
    if "due_date" in changes:
        task.due_date = changes["due_date"]
    task.updated_at = utcnow()

    db.session.commit()
    return task


def remove_task(task_id: int) -> Task:
    """Hard-delete a task and return its last state.

    Raises:
        TaskNotFoundError: If no task has this id.
    """
    logger.info(f"Deleting task with id {task_id}...")
    task = get_task(task_id)

    db.session.delete(task)
    db.session.commit()
    return task


def count_tasks_by_status() -> dict[str, int]:
    """Count tasks per status. Every status is present, zero included."""
    counts = {status.value: 0 for status in TaskStatus}
    rows = db.session.query(Task.status, func.count(Task.id)).group_by(Task.status).all()
    for status, count in rows:
        counts[status.value] = count
    return counts


def percent_completed(completed: int, total: int) -> float:
    """Share of completed tasks in percent, two decimals. Zero when there are no tasks."""
    if not total:
        return 0.0
    return round(100 * completed / total, 2)


def task_stats() -> TaskStats:
    """Compute totals and completion percentage over all tasks."""
    by_status = count_tasks_by_status()
    total = sum(by_status.values())
    return TaskStats(
        total=total,
        by_status=by_status,
        percent_completed=percent_completed(by_status[TaskStatus.COMPLETED.value], total),
    )
