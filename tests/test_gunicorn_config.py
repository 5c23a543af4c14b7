"""Tests for the Gunicorn settings shipped with the service."""

import runpy
from pathlib import Path


CONFIG_PATH = Path(__file__).resolve().parents[1] / "gunicorn.conf.py"


def _load(monkeypatch, **env):
    for name in ("GUNICORN_BIND", "GUNICORN_WORKERS", "GUNICORN_THREADS", "GUNICORN_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return runpy.run_path(str(CONFIG_PATH))


def test_threaded_workers_by_default(monkeypatch):
    settings = _load(monkeypatch)
    assert settings["worker_class"] == "gthread"
    assert settings["workers"] >= 2
    assert settings["threads"] >= 2
    assert settings["bind"] == "0.0.0.0:5000"


def test_cannot_drop_to_single_thread(monkeypatch):
    settings = _load(monkeypatch, GUNICORN_WORKERS="1", GUNICORN_THREADS="1")
    assert settings["workers"] == 2
    assert settings["threads"] == 2
