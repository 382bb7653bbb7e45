# src/study_companion/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskServiceError(RuntimeError):
    """Any failure of a task backend (storage, transport, bad payload, missing id)."""


class TaskCategory(StrEnum):
    PERSONAL = "personal"
    WORK = "work"
    STUDY = "study"
    IMPORTANT = "important"
    GENERAL = "general"

    @classmethod
    def parse(cls, raw: str | None) -> TaskCategory:
        """Display category for a stored value. Only exact values match; anything else shows as GENERAL."""
        if not raw:
            return cls.GENERAL
        try:
            return cls(raw)
        except ValueError:
            return cls.GENERAL


@dataclass(frozen=True, slots=True)
class CategoryDisplay:
    label: str
    icon: str
    color: str


CATEGORY_DISPLAY: dict[TaskCategory, CategoryDisplay] = {
    TaskCategory.PERSONAL: CategoryDisplay("Personal", "🏠", "blue"),
    TaskCategory.WORK: CategoryDisplay("Work", "💼", "green"),
    TaskCategory.STUDY: CategoryDisplay("Study", "📖", "purple"),
    TaskCategory.IMPORTANT: CategoryDisplay("Important", "⭐", "red"),
    TaskCategory.GENERAL: CategoryDisplay("General", "⚪", "gray"),
}


def display_for(category: str | TaskCategory | None) -> CategoryDisplay:
    return CATEGORY_DISPLAY[TaskCategory.parse(category)]


@dataclass(slots=True)
class Task:
    id: str
    title: str
    category: str
    completed: bool
    created_at: float

    @property
    def display(self) -> CategoryDisplay:
        return display_for(self.category)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "completed": self.completed,
            "created_at": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Task:
        """Build from a service payload. Raises TaskServiceError on a bad shape."""
        if not isinstance(data, dict):
            raise TaskServiceError("Task payload must be an object.")
        try:
            task_id = data["id"]
            title = data["title"]
        except KeyError as e:
            raise TaskServiceError(f"Task payload missing field: {e.args[0]}") from e
        if task_id is None or not isinstance(title, str):
            raise TaskServiceError("Task payload has invalid id/title.")
        completed = data.get("completed", False)
        if not isinstance(completed, bool):
            raise TaskServiceError(f"Task {task_id}: completed must be a boolean")
        try:
            created_at = float(data.get("created_at") or 0.0)
        except (TypeError, ValueError):
            created_at = 0.0
        return cls(
            id=str(task_id),
            title=title,
            category=str(data.get("category") or TaskCategory.GENERAL.value),
            completed=completed,
            created_at=created_at,
        )


# Fields a caller may change through update_task().
UPDATABLE_FIELDS = frozenset({"title", "category", "completed"})
