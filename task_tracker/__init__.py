"""Task tracker: Flask application factory."""

import logging

from flask import Flask

from task_tracker.client import TaskClient
from task_tracker.extensions import db, ma
from task_tracker.telemetry import telemetry_enabled


def create_app(config_class: type | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to Config.

    Returns:
        Configured Flask application with tables created.
    """
    if telemetry_enabled():
        from task_tracker.telemetry import setup_telemetry

        # Providers must exist before the app is instrumented
        setup_telemetry()

    app = Flask(__name__)

    if config_class is None:
        from task_tracker.config import Config

        config_class = Config
    app.config.from_object(config_class)

    db.init_app(app)
    ma.init_app(app)
    app.extensions["task_client"] = TaskClient(
        base_url=app.config["TASKS_API_URL"],
        timeout=app.config.get("TASKS_API_TIMEOUT"),
    )

    _register_blueprints(app)

    from task_tracker.errors import register_error_handlers
    from task_tracker.middleware import register_metrics_middleware

    register_error_handlers(app)
    register_metrics_middleware(app)

    if telemetry_enabled():
        from task_tracker.telemetry import attach_log_handler, instrument_flask_app

        instrument_flask_app(app)
        attach_log_handler()

    _configure_logging()

    with app.app_context():
        db.create_all()

    return app


def _register_blueprints(app: Flask) -> None:
    from task_tracker.routes import health_bp, tasks_bp
    from task_tracker.ui import ui_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(tasks_bp)
    app.register_blueprint(ui_bp)


def _configure_logging() -> None:
    """Configure logging for the application."""
    # App loggers propagate to root, where the OTel handler sits
    logging.getLogger("task_tracker").setLevel(logging.DEBUG)
    logging.getLogger("task_tracker").propagate = True

    # Reduce noise from framework loggers
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").propagate = False
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
