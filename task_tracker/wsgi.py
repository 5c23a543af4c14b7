"""WSGI entry point: ``gunicorn task_tracker.wsgi:app``."""

from task_tracker import create_app


app = create_app()
