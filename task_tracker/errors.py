"""Error handlers with OpenTelemetry trace context."""

import logging

from flask import Flask, jsonify
from opentelemetry import trace
from werkzeug.exceptions import HTTPException

from task_tracker.exceptions import TaskNotFoundError, TaskValidationError


logger = logging.getLogger(__name__)


def error_response(message: str, status_code: int, details: dict | None = None) -> tuple:
    """Create error response with trace context.

    Use this function in routes instead of returning jsonify directly.

    Args:
        message: Error message.
        status_code: HTTP status code.
        details: Optional per-field validation messages.

    Returns:
        Tuple of (response, status_code).
    """
    response = {
        "error": message,
        "status": status_code,
    }
    if details:
        response["details"] = details

    # Add trace ID for debugging
    span = trace.get_current_span()
    span_context = span.get_span_context()
    if span_context.is_valid:
        response["trace_id"] = format(span_context.trace_id, "032x")
        if status_code >= 400:
            span.set_attribute("error.type", _get_error_type(status_code))

    return jsonify(response), status_code


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on Flask app.

    Args:
        app: Flask application instance.
    """

    @app.errorhandler(TaskValidationError)
    def task_validation_error(error: TaskValidationError):
        return error_response(error.message, 400, error.details)

    @app.errorhandler(TaskNotFoundError)
    def task_not_found(error: TaskNotFoundError):
        return error_response(error.message, 404)

    @app.errorhandler(400)
    def bad_request(error):
        return error_response(_description(error, "Bad request"), 400)

    @app.errorhandler(404)
    def not_found(error):
        return error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response("Method not allowed", 405)

    @app.errorhandler(500)
    def internal_error(error):
        original = getattr(error, "original_exception", None)
        logger.error(f"Unhandled exception: {original or error}", exc_info=original)
        return error_response("Internal server error", 500)


def _description(error: Exception, default: str) -> str:
    if isinstance(error, HTTPException) and error.description:
        return error.description
    return default


def _get_error_type(status_code: int) -> str:
    error_types = {
        400: "validation",
        404: "not_found",
        405: "method_not_allowed",
    }
    return error_types.get(status_code, "server_error" if status_code >= 500 else "client_error")
