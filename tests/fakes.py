# tests/fakes.py

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any

from study_companion.llm.client import GenerationError
from study_companion.tasks.task_models import UPDATABLE_FIELDS, Task, TaskServiceError


class InMemoryKeyValueStore:
    """
    Dict-backed KeyValueStore.

    - Records every put for assertions
    - Can be switched to fail reads or writes
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.puts: list[tuple[str, str]] = []
        self.fail_get = False
        self.fail_put = False

    def get(self, key: str) -> str | None:
        if self.fail_get:
            raise OSError("disk unavailable")
        return self.data.get(key)

    def put(self, key: str, value: str) -> None:
        if self.fail_put:
            raise OSError("disk full")
        self.puts.append((key, value))
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class FakeTextGenerator:
    """
    Deterministic TextGenerator for unit tests.

    - Captures prompts for assertions
    - Returns next_text, or raises `error` when set
    """

    def __init__(self, next_text: str = "ok", error: Exception | None = None) -> None:
        self.next_text = next_text
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.next_text


class FailingGenerator(FakeTextGenerator):
    def __init__(self, message: str = "boom") -> None:
        super().__init__(error=GenerationError(message))


class FakeTaskService:
    """
    In-memory TaskService. Order is insertion order; `fail` makes every call raise.
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: list[Task] = list(tasks or [])
        self.fail = False
        self.calls: list[str] = []
        self._next = len(self.tasks) + 1

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail:
            raise TaskServiceError(f"{name} failed")

    def list_tasks(self) -> list[Task]:
        self._check("list")
        return [replace(t) for t in self.tasks]

    def create_task(self, title: str, category: str) -> Task:
        self._check("create")
        task = Task(
            id=f"t{self._next}",
            title=title,
            category=category,
            completed=False,
            created_at=time.time(),
        )
        self._next += 1
        self.tasks.append(task)
        return replace(task)

    def update_task(self, task_id: str, **fields: Any) -> Task:
        self._check("update")
        assert set(fields) <= UPDATABLE_FIELDS
        for i, t in enumerate(self.tasks):
            if t.id == task_id:
                self.tasks[i] = replace(t, **fields)
                return replace(self.tasks[i])
        raise TaskServiceError(f"Task not found: {task_id}")

    def delete_task(self, task_id: str) -> bool:
        self._check("delete")
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        return len(self.tasks) != before


def make_task(task_id: str, category: str, *, completed: bool = False, title: str | None = None) -> Task:
    return Task(
        id=task_id,
        title=title or f"task {task_id}",
        category=category,
        completed=completed,
        created_at=1_700_000_000.0,
    )
