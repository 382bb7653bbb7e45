# src/study_companion/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import CATEGORY_DISPLAY, TaskCategory
from ..tasks.task_view import ALL

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_BAR_WIDTH = 20


class CommandRegistry:
    """Simple slash-command registry used by the console front-end (/help, /progress, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Anything else is sent to the study assistant.")
        return "\n".join(lines)


registry = CommandRegistry()


def progress_bar(pct: int, width: int = _BAR_WIDTH) -> str:
    filled = (max(0, min(100, pct)) * width) // 100
    return "[" + "#" * filled + "." * (width - filled) + f"] {pct:3d}%"


def _fmt_date(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d")


def _resolve_task_id(state: AppState, raw: str) -> str | None:
    """Accept a full task id or a unique prefix of one (ids are shown shortened)."""
    if not state.tasks.loaded:
        state.tasks.refresh()
    if state.tasks.find(raw) is not None:
        return raw
    matches = [t.id for t in state.tasks.tasks if t.id.startswith(raw)]
    return matches[0] if len(matches) == 1 else None


# ---- general ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    provider = getattr(settings, "llm_provider", "?")
    models = ", ".join(list(getattr(settings, "llm_models", []) or []))
    backend = getattr(settings, "tasks_api_url", "") or f"local ({getattr(settings, 'tasks_db_path', '?')})"
    load = state.progress.load_result
    return (
        "Status:\n"
        f"  Progress: {state.progress.get_overall_progress()}% (loaded: {load.source}, {load.reason})\n"
        f"  Generator: {type(state.generator).__name__} (provider: {provider})\n"
        f"  Models (priority -> fallback): {models}\n"
        f"  Tasks backend: {backend}"
    )


# ---- progress ----


def cmd_progress(state: AppState, args: list[str]) -> str:
    """
    /progress            -> overall + per-subject bars
    /progress <subject>  -> one subject with its chapters
    """
    if args:
        return cmd_chapters(state, args)

    store = state.progress
    lines = [
        f"Overall {progress_bar(store.get_overall_progress())} "
        f"({store.completed_chapters()}/{store.total_chapters()} chapters)"
    ]
    for subject in store.subjects:
        pct = store.get_subject_progress(subject.id)
        lines.append(f"  {subject.icon} {subject.name:<36} {progress_bar(pct)}  ({subject.id})")
    return "\n".join(lines)


def cmd_chapters(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /chapters <subject_id>"
    subject = state.progress.get_subject(args[0])
    if subject is None:
        known = ", ".join(s.id for s in state.progress.subjects)
        return f"Unknown subject: {args[0]}. Known: {known}"

    pct = state.progress.get_subject_progress(subject.id)
    lines = [f"{subject.icon} {subject.name} {progress_bar(pct)}"]
    for chapter in subject.chapters:
        mark = "x" if chapter.completed else " "
        lines.append(f"  [{mark}] {chapter.name}  ({chapter.id})")
    return "\n".join(lines)


def cmd_toggle(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /toggle <subject_id> <chapter_id>"
    subject_id, chapter_id = args[0], args[1]
    if not state.progress.toggle_chapter_completion(subject_id, chapter_id):
        return f"No chapter {chapter_id!r} in subject {subject_id!r}."

    subject = state.progress.get_subject(subject_id)
    chapter = subject.find_chapter(chapter_id) if subject else None
    status = "completed" if chapter and chapter.completed else "not completed"
    return (
        f"{chapter.name if chapter else chapter_id}: {status}. "
        f"{subject.name if subject else subject_id} is at {state.progress.get_subject_progress(subject_id)}%."
    )


def cmd_reset(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /reset        -> ask for confirmation
    /reset yes    -> clear all chapter completion
    """
    if not args or args[0].lower() not in ("yes", "y", "confirm"):
        return "This clears all chapter progress. Run /reset yes to confirm."
    if emit:
        emit("[PROGRESS] Resetting to the built-in syllabus...")
    state.progress.reset_progress()
    return f"Progress reset. Overall: {state.progress.get_overall_progress()}%."


# ---- tasks ----


def _render_tasks(state: AppState) -> str:
    view = state.tasks
    counts = view.counts()
    filters = [f"all ({counts[ALL]})"] + [
        f"{c.value} ({counts[c.value]})" for c in TaskCategory
    ]
    lines = ["Filters: " + " | ".join(filters), f"Showing: {view.filter_category}"]

    visible = view.visible_tasks()
    if not visible:
        lines.append(f"  No tasks found. {view.empty_message()}")
    for task in visible:
        mark = "x" if task.completed else " "
        d = task.display
        lines.append(
            f"  [{mark}] {task.id[:8]}  {d.icon} {d.label:<9}  {task.title}  ({_fmt_date(task.created_at)})"
        )

    if counts[ALL]:
        st = view.stats()
        lines.append(
            f"Total: {st.total}  Completed: {st.completed}  Pending: {st.pending}  Progress: {st.percent}%"
        )
    return "\n".join(lines)


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """/tasks [all|personal|work|study|important|general]"""
    if args:
        state.tasks.set_filter(args[0])
    if not state.tasks.refresh() and not state.tasks.loaded:
        return "Could not load tasks."
    return _render_tasks(state)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add [category] <title...>"""
    if not args:
        return "Usage: /add [category] <title>"
    category = TaskCategory.GENERAL.value
    if args[0].lower() in {c.value for c in TaskCategory} and len(args) > 1:
        category = args[0].lower()
        args = args[1:]
    task = state.tasks.add_task(" ".join(args), category)
    if task is None:
        return "Task not added."
    return f"Added {task.id[:8]} to {CATEGORY_DISPLAY[TaskCategory.parse(category)].label}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <task_id>"
    task_id = _resolve_task_id(state, args[0])
    if task_id is None:
        return f"No single task matches {args[0]!r}."
    task = state.tasks.toggle_task(task_id)
    if task is None:
        return "Task not updated."
    return f"{task.title}: {'done' if task.completed else 'pending'}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <task_id>"
    task_id = _resolve_task_id(state, args[0])
    if task_id is None:
        return f"No single task matches {args[0]!r}."
    return "Task deleted." if state.tasks.delete_task(task_id) else "Task not deleted."


# ---- chat ----


def cmd_history(state: AppState, args: list[str]) -> str:
    lines = []
    for m in state.chat.messages:
        ts = datetime.fromtimestamp(m.timestamp).astimezone().strftime("%H:%M")
        who = "You" if m.role == "user" else "Assistant"
        lines.append(f"[{ts}] {who}: {m.content}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show progress source, LLM provider and task backend.")
registry.register("progress", cmd_progress, help_text="Overall and per-subject progress: /progress [subject_id].", aliases=["p"])
registry.register("chapters", cmd_chapters, help_text="List chapters of a subject: /chapters <subject_id>.")
registry.register("toggle", cmd_toggle, help_text="Mark a chapter done/undone: /toggle <subject_id> <chapter_id>.", aliases=["t"])
registry.register("reset", cmd_reset, help_text="Clear all chapter progress: /reset yes.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [all|personal|work|study|important|general].")
registry.register("add", cmd_add, help_text="Add a task: /add [category] <title>.")
registry.register("done", cmd_done, help_text="Toggle a task done/pending: /done <task_id>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <task_id>.")
registry.register("history", cmd_history, help_text="Show this session's chat transcript.")
