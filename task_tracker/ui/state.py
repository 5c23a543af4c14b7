"""View state for the browser UI.

Nothing in here touches Flask; the views build an :class:`AppShell` per
request, drive it with a :class:`~task_tracker.client.TaskClient` and hand
it to the templates.
"""

import enum
import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from task_tracker.client import TaskClient, TaskClientError
from task_tracker.models.task import TaskStatus


logger = logging.getLogger(__name__)

STATUS_OPTIONS = [(status.value, status.label) for status in TaskStatus]
DEFAULT_STATUS = TaskStatus.NOT_STARTED.value


class ShellPhase(str, enum.Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"
    EDITING = "editing"


_TRANSITIONS = {
    ShellPhase.LOADING: {ShellPhase.LOADED, ShellPhase.ERROR},
    ShellPhase.LOADED: {ShellPhase.LOADING, ShellPhase.EDITING, ShellPhase.ERROR},
    ShellPhase.EDITING: {ShellPhase.LOADING, ShellPhase.LOADED, ShellPhase.ERROR},
    ShellPhase.ERROR: {ShellPhase.LOADING},
}


class InvalidTransition(RuntimeError):
    pass


def task_status(task: Mapping[str, Any]) -> str:
    return task.get("status") or DEFAULT_STATUS


def status_label(status: str) -> str:
    try:
        return TaskStatus(status).label
    except ValueError:
        return status


def known_statuses(values: Iterable[str]) -> list[str]:
    """Drop values that are not task statuses, keeping order and first occurrence."""
    return list(dict.fromkeys(value for value in values if value in TaskStatus.__members__))


def filter_tasks(tasks: Iterable[Mapping[str, Any]], selected: Iterable[str]) -> list:
    """Keep tasks whose status is in ``selected``; all tasks when nothing is selected.

    Works on the already-fetched list, never the API. Unknown statuses are ignored.
    """
    wanted = set(known_statuses(selected))
    if not wanted:
        return list(tasks)
    return [task for task in tasks if task_status(task) in wanted]


def clamp_percent(value: float | None) -> float:
    """Progress bar width, bounded to [0, 100]."""
    if value is None or math.isnan(value):
        return 0.0
    return max(0.0, min(100.0, float(value)))


def format_percent(value: float | None) -> str:
    if value is None or not math.isfinite(value):
        return "—"
    return f"{value:.2f}%"


@dataclass
class TaskForm:
    """Title/description/status form shared by create and edit."""

    title: str = ""
    description: str = ""
    status: str = DEFAULT_STATUS
    task_id: int | None = None
    submitting: bool = False
    error: str | None = None

    @classmethod
    def from_task(cls, task: Mapping[str, Any] | None) -> "TaskForm":
        if task is None:
            return cls()
        return cls(
            title=task.get("title") or "",
            description=task.get("description") or "",
            status=task_status(task),
            task_id=task.get("id"),
        )

    @classmethod
    def from_form(cls, data: Mapping[str, str], task_id: int | None = None) -> "TaskForm":
        status = data.get("status") or DEFAULT_STATUS
        return cls(
            title=data.get("title", ""),
            description=data.get("description", ""),
            status=status if status in TaskStatus.__members__ else DEFAULT_STATUS,
            task_id=task_id,
        )

    @property
    def is_edit(self) -> bool:
        return self.task_id is not None

    @property
    def can_submit(self) -> bool:
        return bool(self.title.strip()) and not self.submitting

    def payload(self) -> dict[str, Any]:
        """Request body for create/update. A blank description is left out."""
        payload: dict[str, Any] = {"title": self.title.strip(), "status": self.status}
        description = self.description.strip()
        if description:
            payload["description"] = description
        return payload


@dataclass
class AppShell:
    """Top-level page state: Loading -> Loaded/Error, Loaded <-> Editing."""

    phase: ShellPhase = ShellPhase.LOADING
    tasks: list = field(default_factory=list)
    percent_completed: float | None = None
    error: str | None = None
    form: TaskForm | None = None

    def _move(self, target: ShellPhase) -> None:
        if target not in _TRANSITIONS[self.phase]:
            raise InvalidTransition(f"{self.phase.value} -> {target.value}")
        self.phase = target

    def load(self, client: TaskClient) -> None:
        """Fetch tasks, then stats. A stats failure only blanks the percentage."""
        if self.phase is not ShellPhase.LOADING:
            self._move(ShellPhase.LOADING)
        self.error = None
        self.form = None
        try:
            self.tasks = client.fetch_tasks()
        except TaskClientError as exc:
            self.fail(exc.message)
            return

        try:
            self.percent_completed = client.get_task_stats()["percentCompleted"]
        except TaskClientError as exc:
            logger.warning(f"Stats unavailable: {exc.message}")
            self.percent_completed = None

        self._move(ShellPhase.LOADED)

    def fail(self, message: str) -> None:
        self.error = message
        self.form = None
        self._move(ShellPhase.ERROR)

    def open_editor(self, task: Mapping[str, Any] | None = None) -> TaskForm:
        """Open the modal; an empty form when ``task`` is None."""
        self._move(ShellPhase.EDITING)
        self.form = TaskForm.from_task(task)
        return self.form

    def close_editor(self) -> None:
        self._move(ShellPhase.LOADED)
        self.form = None

    def find_task(self, task_id: int) -> dict | None:
        return next((task for task in self.tasks if task.get("id") == task_id), None)

    @property
    def progress(self) -> float:
        return clamp_percent(self.percent_completed)

    @property
    def progress_label(self) -> str:
        return format_percent(self.percent_completed)
