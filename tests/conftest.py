"""
Shared pytest fixtures for the to-do client test suite.

This module contains fixtures that are shared across all test modules.
Fixtures follow the Arrange-Act-Assert (AAA) pattern and ensure
test isolation by providing a fresh application, controller and fake
task service for each test.

Key Concepts Demonstrated:
- Fixture dependencies
- Test data factories with Faker
- Monkeypatching HTTP calls onto an in-memory fake service
- Test client creation
"""

from __future__ import annotations

import os
from typing import Any

import pytest
from faker import Faker

# Set testing environment before importing app
os.environ["FLASK_ENV"] = "testing"

from todo_client import create_app
from todo_client.client import TaskServiceClient
from todo_client.models import TaskCategory, TaskPriority, generate_task_id
from todo_client.store import TaskStore

from tests.mocks.fake_task_service import FakeTaskService

# Initialize Faker for generating test data
fake = Faker()

TEST_SERVICE_URL = "http://task-service"


# -----------------------------------------------------------------------------
# Remote Service Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def fake_service(monkeypatch) -> FakeTaskService:
    """
    Replace the task service with an in-memory fake for one test.

    Every ``requests.request`` issued by the client is routed to the
    fake, so no test ever touches the network.

    Returns:
        The fake service; tests seed it and inspect ``calls``.
    """
    service = FakeTaskService()
    monkeypatch.setattr("todo_client.client.requests.request", service.request)
    return service


@pytest.fixture
def service_client() -> TaskServiceClient:
    return TaskServiceClient(TEST_SERVICE_URL, timeout=1)


@pytest.fixture
def store(fake_service, service_client) -> TaskStore:
    """Provide an empty task store wired to the fake service."""
    return TaskStore(service_client)


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def app(fake_service):
    """
    Create an application instance for one test.

    The controller (task list, filters, theme) lives on the app, so each
    test gets a fresh app to keep that state from leaking between tests.
    """
    application = create_app("testing")
    yield application


@pytest.fixture
def client(app):
    """
    Create a test client for making HTTP requests.

    Yields:
        Flask test client for making HTTP requests.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def controller(app):
    from todo_client.controller import EXTENSION_KEY

    return app.extensions[EXTENSION_KEY]


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def task_factory():
    """
    Factory fixture for task payloads in the service's wire format.

    Example:
        def test_something(task_factory):
            payload = task_factory(text="My Task", completed=True)
    """
    counter = iter(range(1, 10_000))

    def _create_task(
        text: str | None = None,
        completed: bool = False,
        category: str = TaskCategory.PERSONAL.value,
        priority: str = TaskPriority.MEDIUM.value,
        due_date: str | None = None,
        task_id: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": task_id or f"{generate_task_id()}{next(counter)}",
            "text": text or fake.sentence(nb_words=4),
            "completed": completed,
            "category": category,
            "priority": priority,
            "createdAt": "2025-01-01T09:00:00.000Z",
        }
        if due_date is not None:
            payload["dueDate"] = due_date
        return payload

    return _create_task


@pytest.fixture
def sample_tasks(task_factory) -> list[dict[str, Any]]:
    """
    Two tasks that differ in every filter dimension.

    Returns:
        ``[active/High/Work, completed/Low/Personal]`` payloads.
    """
    return [
        task_factory(
            task_id="1",
            text="Prepare quarterly report",
            completed=False,
            priority=TaskPriority.HIGH.value,
            category=TaskCategory.WORK.value,
        ),
        task_factory(
            task_id="2",
            text="Buy birthday present",
            completed=True,
            priority=TaskPriority.LOW.value,
            category=TaskCategory.PERSONAL.value,
        ),
    ]
