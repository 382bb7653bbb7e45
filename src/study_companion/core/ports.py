# src/study_companion/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the views and the progress store.

Views depend on Protocols instead of concrete implementations.
This keeps storage/task backends/LLM providers swappable and makes testing easier.
"""

from typing import Any, Literal, Protocol

Role = Literal["user", "assistant"]
NoticeVariant = Literal["default", "destructive"]


class KeyValueStore(Protocol):
    """Local key-value store holding whole JSON values under string keys."""

    def get(self, key: str) -> str | None: ...
    def put(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> bool: ...


class TaskService(Protocol):
    """
    Task CRUD backend. The view never owns tasks, it only reads/mutates through this.

    Implementations raise TaskServiceError on any failure.
    """

    def list_tasks(self) -> list[Any]: ...
    def create_task(self, title: str, category: str) -> Any: ...
    def update_task(self, task_id: str, **fields: Any) -> Any: ...
    def delete_task(self, task_id: str) -> bool: ...


class TextGenerator(Protocol):
    """Single-shot text generation. Raises GenerationError on failure."""

    def generate(self, prompt: str) -> str: ...


class Notifier(Protocol):
    """Sink for transient user-visible notices (toasts)."""

    def push(self, title: str, description: str = "", variant: NoticeVariant = "default") -> Any: ...
