"""
In-process task store kept in step with the remote task service.

The store owns the client's copy of the task collection: an ordered
sequence (insertion order) with unique ids.  Every mutation goes through
the task service first and local state changes only after the service
confirms, using the entity the service returned.  There is no optimistic
update and therefore nothing to roll back: a failed call leaves the
collection exactly as it was.

Each operation returns a :class:`~todo_client.results.Result` holding the
confirmed value or the error that stopped it.

Concurrent mutations are not coordinated.  Two edits of the same task
race, and whichever response is applied last wins.
"""

from __future__ import annotations

import logging
from typing import Any

from .client import TaskServiceClient, TaskServiceError
from .models import Task, TaskDraft
from .results import Result

logger = logging.getLogger(__name__)


class TaskNotFoundError(TaskServiceError):
    """The task id is not present in the local collection."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task {task_id} not found.", status_code=None)
        self.task_id = task_id


class TaskStore:
    """
    Authoritative in-process copy of the task collection.

    Args:
        client: Task service client used for every remote call.
        tasks: Optional initial collection (already confirmed by the service).
    """

    def __init__(self, client: TaskServiceClient, tasks: list[Task] | None = None) -> None:
        self._client = client
        self._tasks: list[Task] = list(tasks or [])

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Snapshot of the collection in display order."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def load(self) -> Result[list[Task], TaskServiceError]:
        """
        Replace the collection with the service's current list.

        On failure the collection is left untouched; nothing is retried.
        """
        try:
            tasks = self._client.list_tasks()
        except TaskServiceError as error:
            logger.warning("Loading tasks failed: %s", error)
            return Result.err(error)

        # Later duplicates of an id are dropped to keep ids unique.
        unique: dict[str, Task] = {}
        for task in tasks:
            unique.setdefault(task.id, task)
        self._tasks = list(unique.values())
        logger.info("Loaded %d tasks", len(self._tasks))
        return Result.ok(list(self._tasks))

    def add(self, draft: TaskDraft) -> Result[Task, TaskServiceError]:
        """
        Create a task on the service and append the confirmed entity.

        Raises:
            ValueError: If the draft text is blank; callers validate first.
        """
        if not draft.text or not draft.text.strip():
            raise ValueError("Task text is required")

        try:
            created = self._client.create_task(draft.build_task())
        except TaskServiceError as error:
            logger.warning("Adding task failed: %s", error)
            return Result.err(error)

        if self.get(created.id) is not None:
            logger.warning("Service returned existing id %s on create; replacing", created.id)
            self._replace(created)
        else:
            self._tasks = [*self._tasks, created]
        logger.info("Added task %s", created.id)
        return Result.ok(created)

    def edit(self, task_id: str, patch: dict[str, Any]) -> Result[Task, TaskServiceError]:
        """
        Merge *patch* over the current task and send the full entity.

        An id that is not in the local collection is reported as
        :class:`TaskNotFoundError` without contacting the service.

        Raises:
            ValueError: If *patch* names an unknown or immutable field.
        """
        current = self.get(task_id)
        if current is None:
            logger.info("Edit of unknown task %s ignored", task_id)
            return Result.err(TaskNotFoundError(task_id))

        updated = current.merged(patch)
        try:
            confirmed = self._client.update_task(updated)
        except TaskServiceError as error:
            logger.warning("Updating task %s failed: %s", task_id, error)
            return Result.err(error)

        self._replace(confirmed, task_id=task_id)
        logger.debug("Updated task %s", task_id)
        return Result.ok(confirmed)

    def toggle_complete(self, task_id: str) -> Result[Task, TaskServiceError]:
        """Flip the completion flag; same semantics as :meth:`edit`."""
        current = self.get(task_id)
        if current is None:
            logger.info("Toggle of unknown task %s ignored", task_id)
            return Result.err(TaskNotFoundError(task_id))
        return self.edit(task_id, {"completed": not current.completed})

    def remove(self, task_id: str) -> Result[str, TaskServiceError]:
        """Delete a task on the service, then drop it locally."""
        try:
            self._client.delete_task(task_id)
        except TaskServiceError as error:
            logger.warning("Deleting task %s failed: %s", task_id, error)
            return Result.err(error)

        self._tasks = [task for task in self._tasks if task.id != task_id]
        logger.info("Deleted task %s", task_id)
        return Result.ok(task_id)

    def _replace(self, confirmed: Task, *, task_id: str | None = None) -> None:
        target = task_id if task_id is not None else confirmed.id
        if self.get(target) is None:
            # Removed while the call was in flight; do not resurrect it.
            logger.info("Task %s no longer present; dropping service response", target)
            return
        self._tasks = [confirmed if task.id == target else task for task in self._tasks]
