# src/study_companion/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..progress.store import ProgressStore
from ..tasks.task_view import TaskListView
from .chat import ChatSession
from .notify import NoticeQueue
from .ports import KeyValueStore, TaskService, TextGenerator


@dataclass
class AppState:
    """Everything the front-end needs, owned by the composition root and passed by reference."""

    settings: Any

    kv: KeyValueStore
    progress: ProgressStore
    task_service: TaskService
    tasks: TaskListView
    generator: TextGenerator
    chat: ChatSession
    notices: NoticeQueue

    lock: threading.RLock = field(default_factory=threading.RLock)
