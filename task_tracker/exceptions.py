"""Task service exceptions.

These are raised by the service layer and carry no HTTP semantics; the
translation to status codes happens in :mod:`task_tracker.errors`.
"""


class TaskTrackerError(Exception):
    """Base class for task service errors."""


class TaskValidationError(TaskTrackerError):
    """A field is missing, malformed or outside its allowed values."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TaskNotFoundError(TaskTrackerError):
    """The task targeted by an operation does not exist."""

    def __init__(self, task_id: int):
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id
        self.message = str(self)
