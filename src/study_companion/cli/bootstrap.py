# src/study_companion/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (key-value store, progress,
  task service, text generator, chat),
- closes what needs closing on shutdown.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import get_settings
from ..core.chat import ChatSession
from ..core.notify import NoticeQueue
from ..core.ports import TaskService, TextGenerator
from ..core.state import AppState
from ..llm.client import GeminiClient, GenerationError
from ..llm.offline import OfflineTextGenerator
from ..llm.openrouter import OpenRouterClient
from ..progress.store import ProgressStore
from ..storage.kv_store import SqliteKeyValueStore
from ..tasks.http_service import HttpTaskService
from ..tasks.task_store import TaskStore
from ..tasks.task_view import TaskListView

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.state_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def build_text_generator(settings) -> TextGenerator:
    """
    Pick the configured provider. A provider that cannot be built (missing key,
    empty model list) falls back to the offline generator for demos.
    """
    provider = str(getattr(settings, "llm_provider", "gemini") or "gemini").lower()
    if provider == "offline":
        return OfflineTextGenerator()

    try:
        if provider == "openrouter":
            return OpenRouterClient.from_settings(settings)
        return GeminiClient.from_settings(settings)
    except GenerationError as e:
        logger.info("LLM provider %s unavailable (%s); using offline generator.", provider, e)
        return OfflineTextGenerator()


def build_task_service(settings) -> TaskService:
    url = str(getattr(settings, "tasks_api_url", "") or "").strip()
    if url:
        return HttpTaskService(url, timeout=float(getattr(settings, "tasks_timeout_seconds", 10.0)))
    return TaskStore(settings.tasks_db_path)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    notices = NoticeQueue()
    kv = SqliteKeyValueStore(settings.state_db_path)
    progress = ProgressStore(kv, key=getattr(settings, "progress_key", "syllabusProgress"))
    progress.initialize()

    task_service = build_task_service(settings)
    tasks = TaskListView(task_service, notices)

    generator = build_text_generator(settings)

    return AppState(
        settings=settings,
        kv=kv,
        progress=progress,
        task_service=task_service,
        tasks=tasks,
        generator=generator,
        chat=ChatSession(generator, notices),
        notices=notices,
    )


def _close_quietly(obj: Any, what: str) -> None:
    close = getattr(obj, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception:
        logger.debug("%s close failed.", what, exc_info=True)


def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    _close_quietly(state.generator, "Text generator")
    _close_quietly(state.task_service, "Task service")
    _close_quietly(state.kv, "Key-value store")
