"""Health check endpoints."""

from typing import Any

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from task_tracker.extensions import db


health_bp = Blueprint("health", __name__, url_prefix="/api")


@health_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint for monitoring.

    Returns:
        JSON response with health status of the database.
    """
    health_status: dict[str, Any] = {
        "status": "healthy",
        "components": {
            "database": "healthy",
        },
        "service": {
            "name": current_app.config.get("SERVICE_NAME", "task-tracker"),
            "version": current_app.config.get("SERVICE_VERSION", "1.0.0"),
        },
    }

    # Check database connection
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:
        db.session.rollback()
        health_status["status"] = "unhealthy"
        health_status["components"]["database"] = "unhealthy"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return jsonify(health_status), status_code


@health_bp.route("/health/db", methods=["GET"])
def database_health():
    """Run ``SELECT 1`` against the store and echo the result."""
    rows = db.session.execute(text("SELECT 1 AS result")).all()
    return jsonify({"status": "ok", "result": [{"result": str(row.result)} for row in rows]})
