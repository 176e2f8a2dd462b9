"""
Data models for the to-do client.

Defines the enum types and the ``Task`` entity that mirror the remote task
service's data contract.  The service speaks camelCase JSON
(``createdAt``, ``dueDate``); the Python side uses snake_case attributes
and converts at the ``from_dict`` / ``to_dict`` boundary.

Both enums inherit from ``str`` as well as ``Enum`` so that their values
serialise naturally to JSON strings and can be compared directly against
plain strings returned by the task service without explicit ``.value``
access.

Key Concepts Demonstrated:
- ``str``/``Enum`` dual inheritance for ergonomic serialisation
- Immutable entities replaced wholesale instead of mutated in place
- Explicit wire-format conversion at the service boundary
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class TaskCategory(str, Enum):
    """
    Task categories offered by the client.

    Attributes:
        WORK: Job related.
        PERSONAL: Personal errands (default for new tasks).
        SHOPPING: Things to buy.
        HEALTH: Health and fitness.
        OTHER: Anything else; also used for unknown server values.
    """

    WORK = "Work"
    PERSONAL = "Personal"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    OTHER = "Other"


class TaskPriority(str, Enum):
    """
    Task priority levels.

    Attributes:
        LOW: Low urgency.
        MEDIUM: Normal urgency (default for new tasks).
        HIGH: High urgency.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskPayloadError(ValueError):
    """Raised when a task payload from the service cannot be turned into a Task."""


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


_id_lock = threading.Lock()
_last_id = 0


def generate_task_id() -> str:
    """
    Return a timestamp-derived client id (milliseconds since the epoch).

    Two calls in the same millisecond still get distinct ids: the value
    is bumped past the last one handed out.
    """
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
    return str(candidate)


def parse_iso_datetime(iso_string: str | None) -> datetime | None:
    """
    Parse an ISO-8601 datetime string returned by the task service.

    Handles the ``Z`` suffix (common in JSON APIs) by replacing it with
    the equivalent ``+00:00`` offset that :meth:`datetime.fromisoformat`
    understands.

    Args:
        iso_string: An ISO-8601 formatted string, or ``None``.

    Returns:
        A :class:`datetime` object, or ``None`` if the input was
        ``None``, empty, or could not be parsed.
    """
    if not iso_string:
        return None
    try:
        return datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    except ValueError:
        return None


def ensure_utc(value: datetime) -> datetime:
    """
    Normalise a datetime to UTC.

    Naive datetimes (no ``tzinfo``) are assumed to already represent UTC
    and have the timezone attached.  Aware datetimes are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _coerce_category(value: Any) -> TaskCategory:
    try:
        return TaskCategory(value)
    except ValueError:
        logger.warning("Unknown task category %r from service; using Other", value)
        return TaskCategory.OTHER


def _coerce_priority(value: Any) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        logger.warning("Unknown task priority %r from service; using Medium", value)
        return TaskPriority.MEDIUM


@dataclass(frozen=True)
class Task:
    """
    A single to-do item as last confirmed by the task service.

    Attributes:
        id: Client-generated unique identifier, never reused.
        text: Non-empty task description.
        completed: Whether the task is done.
        category: One of :class:`TaskCategory`.
        priority: One of :class:`TaskPriority`.
        created_at: ISO-8601 creation timestamp; never changes.
        due_date: Optional ISO-8601 deadline.
    """

    id: str
    text: str
    completed: bool = False
    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    created_at: str | None = None
    due_date: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """
        Build a Task from a JSON object returned by the task service.

        Args:
            data: Decoded JSON object.

        Returns:
            The corresponding :class:`Task`.

        Raises:
            TaskPayloadError: If the payload is not an object or lacks
                ``id`` or ``text``.
        """
        if not isinstance(data, dict):
            raise TaskPayloadError(f"Expected a task object, got {type(data).__name__}")
        task_id = data.get("id")
        text = data.get("text")
        if task_id is None or task_id == "":
            raise TaskPayloadError("Task payload is missing 'id'")
        if not isinstance(text, str):
            raise TaskPayloadError(f"Task {task_id} payload is missing 'text'")
        return cls(
            id=str(task_id),
            text=text,
            completed=bool(data.get("completed", False)),
            category=_coerce_category(data.get("category", TaskCategory.OTHER.value)),
            priority=_coerce_priority(data.get("priority", TaskPriority.MEDIUM.value)),
            created_at=data.get("createdAt"),
            due_date=data.get("dueDate"),
        )

    def to_dict(self, *, include_empty: bool = False) -> dict[str, Any]:
        """
        Convert the task to the service's JSON representation.

        ``dueDate`` is only included when set, matching what the service
        receives from a freshly created task.  With ``include_empty`` an
        unset due date is sent as ``None`` so a full replacement clears it.
        """
        payload: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "completed": self.completed,
            "category": self.category.value,
            "priority": self.priority.value,
            "createdAt": self.created_at,
        }
        if self.due_date is not None or include_empty:
            payload["dueDate"] = self.due_date
        return payload

    def merged(self, patch: dict[str, Any]) -> Task:
        """
        Return a copy with *patch* applied over this task's fields.

        Patch keys are attribute names (``text``, ``completed``,
        ``category``, ``priority``, ``due_date``).  ``id`` and
        ``created_at`` are immutable and may not be patched.

        Raises:
            ValueError: On an unknown or immutable field.
        """
        changes = dict(patch)
        for key in changes:
            if key in ("id", "created_at"):
                raise ValueError(f"Field '{key}' cannot be changed")
            if key not in _PATCHABLE_FIELDS:
                raise ValueError(f"Unknown task field '{key}'")
        if "category" in changes:
            changes["category"] = TaskCategory(changes["category"])
        if "priority" in changes:
            changes["priority"] = TaskPriority(changes["priority"])
        return replace(self, **changes)

    @property
    def due_datetime(self) -> datetime | None:
        """The parsed due date, or ``None``."""
        return parse_iso_datetime(self.due_date)

    def __repr__(self) -> str:
        """Return string representation of the task."""
        return f"<Task {self.id}: {self.text}>"


_PATCHABLE_FIELDS = frozenset({"text", "completed", "category", "priority", "due_date"})


@dataclass(frozen=True)
class TaskDraft:
    """
    User input for a task that does not exist yet.

    Attributes:
        text: Task description; callers reject blank text before use.
        category: Defaults to Personal.
        priority: Defaults to Medium.
        due_date: Optional ISO-8601 deadline.
    """

    text: str
    category: TaskCategory = TaskCategory.PERSONAL
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: str | None = None

    def build_task(self) -> Task:
        """Stamp a new client id and creation time onto the draft."""
        return Task(
            id=generate_task_id(),
            text=self.text.strip(),
            completed=False,
            category=self.category,
            priority=self.priority,
            created_at=utc_now_iso(),
            due_date=self.due_date,
        )
