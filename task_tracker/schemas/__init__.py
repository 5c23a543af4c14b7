"""Marshmallow schemas for serialization and validation."""

from task_tracker.schemas.task import (
    TaskCreateSchema,
    TaskListQuerySchema,
    TaskSchema,
    TaskStatsSchema,
    TaskUpdateSchema,
)


__all__ = [
    "TaskSchema",
    "TaskCreateSchema",
    "TaskUpdateSchema",
    "TaskListQuerySchema",
    "TaskStatsSchema",
]
