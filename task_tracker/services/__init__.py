"""Service modules."""

from task_tracker.services.tasks import (
    TaskStats,
    create_task,
    get_task,
    list_tasks,
    remove_task,
    task_stats,
    update_task,
)


__all__ = [
    "TaskStats",
    "create_task",
    "list_tasks",
    "get_task",
    "update_task",
    "remove_task",
    "task_stats",
]
