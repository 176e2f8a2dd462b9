"""
HTML view routes for the to-do client.

Implements all user-facing routes.  Each handler renders a Jinja template
or performs one store operation and redirects back to the list, turning
the operation's result into a flash message.  The module is organised
into three logical sections:

1. **Helper functions**: form parsing and template filters.
2. **Task routes**: list, create, edit, delete and toggle-complete, all
   delegating to the controller's task store.
3. **Filter and theme routes**: status/priority/category selection,
   clearing filters and switching between light and dark themes.

No route changes the task list on its own: the store only applies what
the task service confirmed, so a failed call shows an error and leaves
the list as it was.

Key Concepts Demonstrated:
- Fire-and-confirm mutations driven from form posts
- Flash-message feedback for service failures
- Toggle-off filter chips backed by a nullable selection
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from ..controller import get_controller
from ..filters import StatusFilter
from ..models import Task, TaskCategory, TaskDraft, TaskPriority, ensure_utc, parse_iso_datetime
from ..store import TaskNotFoundError

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)

CATEGORY_COLORS = {
    TaskCategory.WORK: "#FF5722",
    TaskCategory.PERSONAL: "#2196F3",
    TaskCategory.SHOPPING: "#4CAF50",
    TaskCategory.HEALTH: "#E91E63",
    TaskCategory.OTHER: "#9C27B0",
}
DEFAULT_CATEGORY_COLOR = "#607D8B"

PRIORITY_COLORS = {
    TaskPriority.LOW: "#4CAF50",
    TaskPriority.MEDIUM: "#FFC107",
    TaskPriority.HIGH: "#F44336",
}
DEFAULT_PRIORITY_COLOR = "#FFC107"


# =====================================================================
# Helper Functions
# =====================================================================


class FormError(ValueError):
    """Raised when a submitted task form is invalid."""


def _parse_task_form(form) -> dict[str, Any]:
    """
    Validate a submitted task form.

    Args:
        form: The request form mapping.

    Returns:
        A dict with ``text``, ``category``, ``priority`` and ``due_date``
        (ISO-8601 UTC string or ``None``).

    Raises:
        FormError: With a user-facing message when a field is invalid.
    """
    text = form.get("text", "").strip()
    if not text:
        raise FormError("Task description is required")

    try:
        category = TaskCategory(form.get("category", TaskCategory.PERSONAL.value))
    except ValueError:
        raise FormError("Invalid category") from None
    try:
        priority = TaskPriority(form.get("priority", TaskPriority.MEDIUM.value))
    except ValueError:
        raise FormError("Invalid priority") from None

    due_date = None
    due_date_str = form.get("due_date", "").strip()
    if due_date_str:
        try:
            due_date = ensure_utc(datetime.fromisoformat(due_date_str)).isoformat()
        except ValueError:
            raise FormError("Invalid date format") from None

    return {"text": text, "category": category, "priority": priority, "due_date": due_date}


def _render_form(task: Task | None):
    if task is None:
        form_action = url_for("views.create_task")
        form_title = "Add New Task"
    else:
        form_action = url_for("views.update_task", task_id=task.id)
        form_title = "Edit Task"
    return render_template(
        "task_form.html",
        task=task,
        categories=TaskCategory,
        priorities=TaskPriority,
        default_category=TaskCategory.PERSONAL,
        default_priority=TaskPriority.MEDIUM,
        form_action=form_action,
        form_title=form_title,
        dark_mode=get_controller().dark_mode,
    )


def _task_or_404(task_id: str) -> Task:
    task = get_controller().store.get(task_id)
    if task is None:
        abort(404)
    return task


@views_bp.app_template_filter("category_color")
def category_color(category: Any) -> str:
    try:
        return CATEGORY_COLORS[TaskCategory(category)]
    except ValueError:
        return DEFAULT_CATEGORY_COLOR


@views_bp.app_template_filter("priority_color")
def priority_color(priority: Any) -> str:
    try:
        return PRIORITY_COLORS[TaskPriority(priority)]
    except ValueError:
        return DEFAULT_PRIORITY_COLOR


@views_bp.app_template_filter("due_date")
def format_due_date(value: str | None) -> str:
    """Format an ISO timestamp like ``Mar 5, 02:30 PM``; empty if unparseable."""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed:%b} {parsed.day}, {parsed:%I:%M %p}"


@views_bp.app_template_filter("input_datetime")
def input_datetime(value: str | None) -> str:
    """Format an ISO timestamp for a ``datetime-local`` input."""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed:%Y-%m-%dT%H:%M}"


# =====================================================================
# Task Routes
# =====================================================================


@views_bp.route("/health", methods=["GET"])
def health_check():
    """Return service health status for liveness probes."""
    return {"status": "healthy", "service": "todo-client"}, 200


@views_bp.route("/")
def index():
    """
    Render the filtered task list.

    Loads the collection from the task service on first render.  When that
    load fails the page still renders (empty) with an error message, and
    only the Refresh button loads again.
    """
    controller = get_controller()
    status_code = 200
    result = controller.ensure_loaded()
    if result is not None and result.is_err:
        flash("Failed to load tasks from server.", "error")
        status_code = 503

    return (
        render_template(
            "index.html",
            tasks=controller.visible_tasks(),
            total=len(controller.store),
            selection=controller.selection,
            statuses=StatusFilter,
            categories=TaskCategory,
            priorities=TaskPriority,
            dark_mode=controller.dark_mode,
        ),
        status_code,
    )


@views_bp.route("/refresh", methods=["POST"])
def refresh():
    result = get_controller().refresh()
    if result.is_err:
        flash("Failed to load tasks from server.", "error")
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/new")
def new_task():
    """Render the empty task creation form."""
    return _render_form(None)


@views_bp.route("/tasks", methods=["POST"])
def create_task():
    """
    Handle task creation form submission.

    Blank or invalid input is bounced back to the form without contacting
    the task service.
    """
    try:
        fields = _parse_task_form(request.form)
    except FormError as error:
        logger.info("Rejected new task form: %s", error)
        flash(str(error), "error")
        return redirect(url_for("views.new_task"))

    result = get_controller().store.add(TaskDraft(**fields))
    if result.is_err:
        flash(str(result.error), "error")
        return redirect(url_for("views.new_task"))

    flash("Task added", "success")
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/<task_id>/edit")
def edit_task(task_id: str):
    """Render the task form pre-populated from the local task."""
    return _render_form(_task_or_404(task_id))


@views_bp.route("/tasks/<task_id>/update", methods=["POST"])
def update_task(task_id: str):
    """Handle the task edit form submission."""
    try:
        fields = _parse_task_form(request.form)
    except FormError as error:
        logger.info("Rejected edit form for task %s: %s", task_id, error)
        flash(str(error), "error")
        return redirect(url_for("views.edit_task", task_id=task_id))

    store = get_controller().store
    current = store.get(task_id)
    # The input only has minute precision; an untouched field keeps the stored value.
    if current is not None and current.due_date is not None:
        if request.form.get("due_date", "").strip() == input_datetime(current.due_date):
            fields["due_date"] = current.due_date

    result = store.edit(task_id, fields)
    if result.is_err:
        if isinstance(result.error, TaskNotFoundError):
            abort(404)
        flash(str(result.error), "error")
        return redirect(url_for("views.edit_task", task_id=task_id))

    flash("Task updated", "success")
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/<task_id>/delete", methods=["GET"])
def confirm_delete(task_id: str):
    """Ask for confirmation before deleting."""
    return render_template(
        "confirm_delete.html",
        task=_task_or_404(task_id),
        dark_mode=get_controller().dark_mode,
    )


@views_bp.route("/tasks/<task_id>/delete", methods=["POST"])
def delete_task(task_id: str):
    result = get_controller().store.remove(task_id)
    if result.is_err:
        flash(str(result.error), "error")
    else:
        flash("Task deleted", "success")
    return redirect(url_for("views.index"))


@views_bp.route("/tasks/<task_id>/toggle", methods=["POST"])
def toggle_task(task_id: str):
    result = get_controller().store.toggle_complete(task_id)
    if result.is_err:
        if isinstance(result.error, TaskNotFoundError):
            abort(404)
        flash(str(result.error), "error")
    return redirect(url_for("views.index"))


# =====================================================================
# Filter and Theme Routes
# =====================================================================


@views_bp.route("/filters/status/<value>", methods=["POST"])
def filter_status(value: str):
    try:
        get_controller().selection.set_status(value)
    except ValueError:
        flash("Invalid status filter", "error")
    return redirect(url_for("views.index"))


@views_bp.route("/filters/priority/<value>", methods=["POST"])
def filter_priority(value: str):
    """Select a priority, or clear it when it is already selected."""
    try:
        get_controller().selection.select_priority(value)
    except ValueError:
        flash("Invalid priority filter", "error")
    return redirect(url_for("views.index"))


@views_bp.route("/filters/category/<value>", methods=["POST"])
def filter_category(value: str):
    """Select a category, or clear it when it is already selected."""
    try:
        get_controller().selection.select_category(value)
    except ValueError:
        flash("Invalid category filter", "error")
    return redirect(url_for("views.index"))


@views_bp.route("/filters/clear", methods=["POST"])
def clear_filters():
    get_controller().selection.clear()
    return redirect(url_for("views.index"))


@views_bp.route("/theme", methods=["POST"])
def toggle_theme():
    get_controller().toggle_theme()
    return redirect(url_for("views.index"))
