"""HTTP client for the Task API.

Thin wrappers over the ``/tasks`` routes. Failures surface as a single
:class:`TaskClientError` carrying the message the server put in the
response body.
"""

import logging
import os
from typing import Any

import httpx


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000/tasks"
DEFAULT_ERROR_MESSAGE = "API request failed"


class TaskClientError(Exception):
    """A Task API call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TaskClient:
    """Client for the Task API.

    Args:
        base_url: URL of the task collection, e.g. ``http://host/tasks``.
            Defaults to ``TASKS_API_URL`` from the environment.
        timeout: Seconds before a request is abandoned. ``None`` keeps
            httpx's default.
        transport: Optional httpx transport, e.g. ``httpx.WSGITransport``
            to talk to an in-process app.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or os.getenv("TASKS_API_URL", DEFAULT_API_URL)).rstrip("/")
        client_kwargs: dict[str, Any] = {"transport": transport}
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._http = httpx.Client(**client_kwargs)

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def fetch_tasks(self, status: str | None = None) -> list[dict[str, Any]]:
        """GET /tasks, optionally filtered by status."""
        params = {"status": status} if status else None
        return self._request("GET", self.base_url, params=params)

    def get_task(self, task_id: int) -> dict[str, Any]:
        """GET /tasks/<id>."""
        return self._request("GET", f"{self.base_url}/{task_id}")

    def create_task(self, data: dict[str, Any]) -> dict[str, Any]:
        """POST /tasks."""
        return self._request("POST", self.base_url, json=data)

    def update_task(self, task_id: int, data: dict[str, Any]) -> dict[str, Any]:
        """PUT /tasks/<id>."""
        return self._request("PUT", f"{self.base_url}/{task_id}", json=data)

    def delete_task(self, task_id: int) -> dict[str, Any]:
        """DELETE /tasks/<id>. Returns the deleted task."""
        return self._request("DELETE", f"{self.base_url}/{task_id}")

    def get_task_stats(self) -> dict[str, Any]:
        """GET /tasks/get-stats."""
        return self._request("GET", f"{self.base_url}/get-stats")

    def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"Task API unreachable: {method} {url}: {exc}")
            raise TaskClientError(str(exc) or DEFAULT_ERROR_MESSAGE) from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"Task API error: {method} {url} -> {response.status_code}: {message}")
            raise TaskClientError(message, response.status_code)

        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    if isinstance(body, dict):
        return body.get("error") or body.get("message") or DEFAULT_ERROR_MESSAGE
    return DEFAULT_ERROR_MESSAGE
