"""Gunicorn settings: ``gunicorn -c gunicorn.conf.py task_tracker.wsgi:app``.

The browser pages call this same service's ``/tasks`` API over HTTP while
they are being served, so every worker needs spare threads to answer that
inner request. A single sync worker deadlocks until the client times out.
"""

import os


bind = os.getenv("GUNICORN_BIND", "0.0.0.0:5000")
worker_class = "gthread"
workers = max(2, int(os.getenv("GUNICORN_WORKERS", "2")))
threads = max(2, int(os.getenv("GUNICORN_THREADS", "4")))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))
accesslog = "-"
