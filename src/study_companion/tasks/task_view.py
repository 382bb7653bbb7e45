# src/study_companion/tasks/task_view.py

"""
Task list view state.

The view owns nothing but a cached copy of the service's task list and the
current filter. Mutations are never applied optimistically: the view calls
the service and reloads on success; on failure it pushes a notice and keeps
the previous list.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.numbers import percent
from ..core.ports import Notifier, TaskService
from .task_models import CATEGORY_DISPLAY, Task, TaskCategory, TaskServiceError, display_for

logger = logging.getLogger(__name__)

ALL = "all"


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    percent: int


def filter_tasks(tasks: Sequence[Task], category: str) -> list[Task]:
    """Tasks whose stored category equals `category`; "all" returns everything, order kept."""
    if category == ALL:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def category_counts(tasks: Sequence[Task]) -> dict[str, int]:
    """Count per known category plus "all". Unknown stored categories only count in "all"."""
    counts = {ALL: len(tasks)}
    for cat in TaskCategory:
        counts[cat.value] = sum(1 for t in tasks if t.category == cat.value)
    return counts


def task_stats(tasks: Sequence[Task]) -> TaskStats:
    done = sum(1 for t in tasks if t.completed)
    return TaskStats(
        total=len(tasks),
        completed=done,
        pending=len(tasks) - done,
        percent=percent(done, len(tasks)),
    )


class TaskListView:
    def __init__(self, service: TaskService, notifier: Notifier) -> None:
        self._service = service
        self._notifier = notifier
        self._tasks: list[Task] = []
        self._filter: str = ALL
        self.loaded = False

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def filter_category(self) -> str:
        return self._filter

    def set_filter(self, category: str) -> str:
        """Set filter to "all" or a known category. Unknown values reset to "all"."""
        raw = (category or ALL).strip().lower()
        if raw != ALL and raw not in {c.value for c in TaskCategory}:
            logger.debug("Unknown filter %r, using all", category)
            raw = ALL
        self._filter = raw
        return raw

    def refresh(self) -> bool:
        try:
            self._tasks = list(self._service.list_tasks())
        except TaskServiceError as e:
            logger.info("Task list refresh failed: %s", e)
            self._notifier.push("Error", "Failed to load tasks", "destructive")
            return False
        self.loaded = True
        return True

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self._tasks, self._filter)

    def counts(self) -> dict[str, int]:
        return category_counts(self._tasks)

    def stats(self) -> TaskStats:
        return task_stats(self._tasks)

    def find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    # ---- mutations (through the service) ----

    def add_task(self, title: str, category: str = TaskCategory.GENERAL.value) -> Task | None:
        title = (title or "").strip()
        if not title:
            self._notifier.push("Error", "Please enter a task title", "destructive")
            return None

        try:
            task = self._service.create_task(title, category)
        except TaskServiceError as e:
            logger.info("Create task failed: %s", e)
            self._notifier.push("Error", "Failed to add task", "destructive")
            return None

        self.refresh()
        label = display_for(category).label
        self._notifier.push("Task Added", f"Task added to {label} category")
        return task

    def toggle_task(self, task_id: str) -> Task | None:
        current = self.find(task_id)
        if current is None:
            self._notifier.push("Error", "Failed to update task", "destructive")
            return None

        try:
            updated = self._service.update_task(task_id, completed=not current.completed)
        except TaskServiceError as e:
            logger.info("Update task failed id=%s: %s", task_id, e)
            self._notifier.push("Error", "Failed to update task", "destructive")
            return None

        self.refresh()
        return updated

    def delete_task(self, task_id: str) -> bool:
        try:
            deleted = self._service.delete_task(task_id)
        except TaskServiceError as e:
            logger.info("Delete task failed id=%s: %s", task_id, e)
            deleted = False

        if not deleted:
            self._notifier.push("Error", "Failed to delete task", "destructive")
            return False

        self.refresh()
        self._notifier.push("Task Deleted", "Task has been removed successfully")
        return True

    def empty_message(self) -> str:
        if self._filter == ALL:
            return "Add your first task to get started!"
        label = CATEGORY_DISPLAY[TaskCategory(self._filter)].label
        return f"No tasks in {label} category"
