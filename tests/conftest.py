# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from study_companion.core.chat import ChatSession
from study_companion.core.notify import NoticeQueue
from study_companion.core.state import AppState
from study_companion.progress.store import ProgressStore
from study_companion.storage.kv_store import SqliteKeyValueStore
from study_companion.tasks.task_store import TaskStore
from study_companion.tasks.task_view import TaskListView

from .fakes import FakeTextGenerator, InMemoryKeyValueStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="study-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        state_db_path=tmp_path / "state.sqlite3",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        progress_key="syllabusProgress",
        tasks_api_url="",
        tasks_timeout_seconds=1.0,
        llm_provider="offline",
        llm_models=["gemini-2.0-flash"],
        gemini_api_key=None,
        gemini_base_url="https://generativelanguage.googleapis.com/v1beta",
        openrouter_api_key=None,
        openrouter_base_url="https://openrouter.ai/api/v1",
        extra_headers={},
        llm_connect_timeout_seconds=1.0,
        llm_read_timeout_seconds=1.0,
    )


@pytest.fixture()
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def store(kv: InMemoryKeyValueStore) -> ProgressStore:
    s = ProgressStore(kv)
    s.initialize()
    return s


@pytest.fixture()
def notices() -> NoticeQueue:
    return NoticeQueue()


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with a deterministic generator.

    NOTE: We keep real SQLite stores here (key-value + tasks) because
    their correctness is part of what we want to test.
    """
    notices = NoticeQueue()
    kv = SqliteKeyValueStore(settings.state_db_path)
    progress = ProgressStore(kv, key=settings.progress_key)
    task_service = TaskStore(settings.tasks_db_path)
    generator = FakeTextGenerator("**Great** question!")
    return AppState(
        settings=settings,
        kv=kv,
        progress=progress,
        task_service=task_service,
        tasks=TaskListView(task_service, notices),
        generator=generator,
        chat=ChatSession(generator, notices),
        notices=notices,
    )
