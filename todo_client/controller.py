"""
Client controller: the single owner of UI state.

One ``ClientController`` is created per application and stored on
``app.extensions``; views reach it through :func:`get_controller` rather
than through module globals.  It bundles the task store, the current
filter selection and the theme flag.
"""

from __future__ import annotations

import logging

from flask import Flask, current_app

from .client import TaskServiceClient, TaskServiceError
from .filters import FilterSelection, filter_tasks
from .models import Task
from .results import Result
from .store import TaskStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "todo_client"


class ClientController:
    """
    Owns the task store, the filter selection and the theme.

    Attributes:
        store: The task store.
        selection: Current filter selection (process-local, not persisted).
        dark_mode: Whether the dark theme is on.
    """

    def __init__(self, store: TaskStore, selection: FilterSelection | None = None) -> None:
        self.store = store
        self.selection = selection or FilterSelection()
        self.dark_mode = False
        self.loaded = False
        self.load_attempted = False

    @classmethod
    def from_config(cls, config) -> ClientController:
        client = TaskServiceClient(
            config["TASK_SERVICE_URL"], timeout=config["TASK_SERVICE_TIMEOUT"]
        )
        return cls(TaskStore(client))

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self.store.tasks, self.selection)

    def refresh(self) -> Result[list[Task], TaskServiceError]:
        result = self.store.load()
        if result.is_ok:
            self.loaded = True
        return result

    def ensure_loaded(self) -> Result[list[Task], TaskServiceError] | None:
        """
        Load on first use only; returns ``None`` on every later call.

        A failed first load is not retried here. Reloading is left to
        :meth:`refresh`, which the user triggers explicitly.
        """
        if self.load_attempted:
            return None
        self.load_attempted = True
        return self.refresh()

    def toggle_theme(self) -> bool:
        self.dark_mode = not self.dark_mode
        logger.debug("Dark mode %s", "on" if self.dark_mode else "off")
        return self.dark_mode


def init_controller(app: Flask, controller: ClientController | None = None) -> ClientController:
    """Attach a controller to *app*, building one from its config if none is given."""
    if controller is None:
        controller = ClientController.from_config(app.config)
    app.extensions[EXTENSION_KEY] = controller
    return controller


def get_controller() -> ClientController:
    return current_app.extensions[EXTENSION_KEY]
