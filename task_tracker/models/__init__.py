"""Database models."""

from task_tracker.models.task import Task, TaskStatus


__all__ = ["Task", "TaskStatus"]
