"""Server-rendered browser UI backed by the Task API client."""

from task_tracker.ui.views import ui_bp


__all__ = ["ui_bp"]
