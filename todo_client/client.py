"""
HTTP client for the remote task service.

Centralises HTTP communication with the task service so that every call
respects the configured timeout and every failure is reported through the
same small exception taxonomy:

- ``TaskServiceUnavailable``: transport failure (DNS, refused connection,
  dropped socket).  ``TaskServiceTimeout`` narrows it to timeouts.
- ``TaskServiceResponseError``: the service answered, but with a status
  outside the operation's success set or with a body that is not the
  expected JSON.

Contract (consumed, not implemented here):

- ``GET /tasks`` -> 200, JSON array of tasks
- ``POST /tasks`` -> 200/201, created task
- ``PUT /tasks/{id}`` -> 200, updated task
- ``DELETE /tasks/{id}`` -> 200/204, body ignored

Key Concepts Demonstrated:
- Per-service base URL and timeout configuration
- Translating ``requests`` exceptions into domain errors
- Strict success-status sets per operation
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from .models import Task, TaskPayloadError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class TaskServiceError(Exception):
    """
    Base error for failed task service calls.

    Attributes:
        message: Human-readable description suitable for a flash message.
        status_code: HTTP status code when the service answered, else ``None``.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class TaskServiceUnavailable(TaskServiceError):
    """The task service could not be reached."""


class TaskServiceTimeout(TaskServiceUnavailable):
    """The task service did not answer within the configured timeout."""


class TaskServiceResponseError(TaskServiceError):
    """The task service answered with a failure status or an unusable body."""


def _response_error_message(response: requests.Response, default: str) -> str:
    """
    Extract an error message from a JSON error body if possible.

    Falls back to *default* when the body is not JSON or carries no
    ``error`` / ``message`` field.
    """
    try:
        payload = response.json()
    except ValueError:
        return default
    if not isinstance(payload, dict):
        return default
    for key in ("error", "message"):
        message = payload.get(key)
        if isinstance(message, str) and message.strip():
            return message
    return default


class TaskServiceClient:
    """
    Thin wrapper around the task service's four CRUD endpoints.

    Args:
        base_url: Service root, e.g. ``https://todo.example.com``.
        timeout: Seconds to wait for each call.
    """

    def __init__(self, base_url: str, timeout: float = 5) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _task_path(self, task_id: str) -> str:
        return f"/tasks/{quote(str(task_id), safe='')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        expected: frozenset[int],
        failure_message: str,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Perform one call and enforce its success-status set.

        Raises:
            TaskServiceTimeout: If the service does not respond in time.
            TaskServiceUnavailable: For network-level failures.
            TaskServiceResponseError: If the status is not in *expected*.
        """
        url = self._url(path)
        try:
            response = requests.request(
                method=method,
                url=url,
                headers=JSON_HEADERS,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.Timeout as exc:
            logger.warning("Task service timed out: %s %s", method, url)
            raise TaskServiceTimeout("Task service timed out. Please try again.") from exc
        except requests.RequestException as exc:
            logger.warning("Task service unreachable: %s %s (%s)", method, url, exc)
            raise TaskServiceUnavailable(
                "Task service unavailable. Please try again later."
            ) from exc

        if response.status_code not in expected:
            logger.warning(
                "Task service returned %s for %s %s", response.status_code, method, url
            )
            raise TaskServiceResponseError(
                _response_error_message(response, failure_message),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _json(response: requests.Response, failure_message: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TaskServiceResponseError(
                failure_message, status_code=response.status_code
            ) from exc

    def _task_from(self, response: requests.Response, failure_message: str) -> Task:
        try:
            return Task.from_dict(self._json(response, failure_message))
        except TaskPayloadError as exc:
            logger.warning("Unusable task payload: %s", exc)
            raise TaskServiceResponseError(
                failure_message, status_code=response.status_code
            ) from exc

    def list_tasks(self) -> list[Task]:
        """Fetch the full ordered task collection."""
        message = "Failed to load tasks from server."
        response = self._request("GET", "/tasks", expected=frozenset({200}), failure_message=message)
        payload = self._json(response, message)
        if not isinstance(payload, list):
            raise TaskServiceResponseError(message, status_code=response.status_code)
        try:
            return [Task.from_dict(item) for item in payload]
        except TaskPayloadError as exc:
            logger.warning("Unusable task payload in list: %s", exc)
            raise TaskServiceResponseError(message, status_code=response.status_code) from exc

    def create_task(self, task: Task) -> Task:
        """Send a new task and return the server's representation."""
        message = "Failed to add task."
        response = self._request(
            "POST",
            "/tasks",
            expected=frozenset({200, 201}),
            failure_message=message,
            json=task.to_dict(),
        )
        return self._task_from(response, message)

    def update_task(self, task: Task) -> Task:
        """
        Replace a task on the server and return its confirmed representation.

        The full entity is sent, with ``dueDate`` as ``null`` when it was
        cleared.  A response carrying a different id is a response error.
        """
        message = "Failed to update task."
        response = self._request(
            "PUT",
            self._task_path(task.id),
            expected=frozenset({200}),
            failure_message=message,
            json=task.to_dict(include_empty=True),
        )
        updated = self._task_from(response, message)
        if updated.id != task.id:
            logger.warning("Update of task %s answered with task %s", task.id, updated.id)
            raise TaskServiceResponseError(message, status_code=response.status_code)
        return updated

    def delete_task(self, task_id: str) -> None:
        """Delete a task; any response body is ignored."""
        self._request(
            "DELETE",
            self._task_path(task_id),
            expected=frozenset({200, 204}),
            failure_message="Failed to delete task.",
        )
