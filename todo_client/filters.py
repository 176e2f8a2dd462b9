"""
Filter composition for the task list.

The displayed list is a pure projection of the store's task sequence
through three independent dimensions: completion status, priority and
category.  The dimensions combine with logical AND and the projection is
a stable filter, so tasks keep their original relative order.

Priority and category are optional: each holds either ``None`` (no
narrowing) or a single value.  Selecting the value that is already active
clears the dimension again.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from .models import Task, TaskCategory, TaskPriority


class StatusFilter(str, Enum):
    """Completion-status dimension of the filter selection."""

    ALL = "All"
    COMPLETED = "Completed"
    ACTIVE = "Active"


@dataclass
class FilterSelection:
    """
    Current filter selection for the task list.

    Attributes:
        status: Completion status to show; ``All`` shows everything.
        priority: Priority to narrow to, or ``None``.
        category: Category to narrow to, or ``None``.
    """

    status: StatusFilter = StatusFilter.ALL
    priority: TaskPriority | None = None
    category: TaskCategory | None = None

    @property
    def is_active(self) -> bool:
        """True when any dimension narrows the list."""
        return (
            self.status is not StatusFilter.ALL
            or self.priority is not None
            or self.category is not None
        )

    def set_status(self, status: StatusFilter | str) -> None:
        self.status = StatusFilter(status)

    def select_priority(self, priority: TaskPriority | str) -> None:
        """Narrow to *priority*, or clear the dimension if it is already selected."""
        value = TaskPriority(priority)
        self.priority = None if self.priority is value else value

    def select_category(self, category: TaskCategory | str) -> None:
        """Narrow to *category*, or clear the dimension if it is already selected."""
        value = TaskCategory(category)
        self.category = None if self.category is value else value

    def clear(self) -> None:
        """Reset status to ``All`` and unset priority and category."""
        self.status = StatusFilter.ALL
        self.priority = None
        self.category = None

    def matches(self, task: Task) -> bool:
        if self.status is StatusFilter.COMPLETED and not task.completed:
            return False
        if self.status is StatusFilter.ACTIVE and task.completed:
            return False
        if self.priority is not None and task.priority != self.priority:
            return False
        if self.category is not None and task.category != self.category:
            return False
        return True


def filter_tasks(tasks: Iterable[Task], selection: FilterSelection) -> list[Task]:
    """
    Project *tasks* through *selection* without touching the source.

    Args:
        tasks: Task sequence in display order.
        selection: The filter selection to apply.

    Returns:
        A new list holding the matching tasks in their original order.
    """
    return [task for task in tasks if selection.matches(task)]
