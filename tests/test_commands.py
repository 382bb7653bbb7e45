# tests/test_commands.py

from __future__ import annotations

from study_companion.cli.commands import CommandRegistry, progress_bar, registry


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["aa"])
    reg.register("b", h3, "b")

    emitted: list[str] = []
    assert reg.handle(state, "/a x y") == "h2:x,y"
    assert reg.handle(state, "/AA") == "h2:"
    assert reg.handle(state, "/b", emit=emitted.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert emitted == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_progress_bar() -> None:
    assert progress_bar(0, width=10) == "[..........]   0%"
    assert progress_bar(50, width=10) == "[#####.....]  50%"
    assert progress_bar(100, width=10) == "[##########] 100%"


def test_progress_commands(state) -> None:
    out = registry.handle(state, "/progress")
    assert out is not None and out.startswith("Overall")
    assert "(0/106 chapters)" in out

    out = registry.handle(state, "/toggle mathematics polynomials")
    assert out is not None and "Polynomials: completed" in out
    assert state.progress.get_subject_progress("mathematics") == 7

    assert "No chapter" in (registry.handle(state, "/toggle mathematics nope") or "")

    chapters = registry.handle(state, "/chapters mathematics") or ""
    assert "[x] Polynomials  (polynomials)" in chapters
    assert "Unknown subject" in (registry.handle(state, "/chapters history") or "")


def test_reset_requires_confirmation(state) -> None:
    state.progress.toggle_chapter_completion("science", "electricity")

    assert "/reset yes" in (registry.handle(state, "/reset") or "")
    assert state.progress.get_overall_progress() == 1

    emitted: list[str] = []
    out = registry.handle(state, "/reset yes", emit=emitted.append)
    assert out == "Progress reset. Overall: 0%."
    assert emitted


def test_task_commands(state) -> None:
    out = registry.handle(state, "/add study Revise trigonometry") or ""
    assert out.startswith("Added ") and "Study" in out

    registry.handle(state, "/add Call grandma")
    [general, study] = state.tasks.tasks  # newest first
    assert general.category == "general" and general.title == "Call grandma"

    listing = registry.handle(state, "/tasks study") or ""
    assert "Revise trigonometry" in listing and "Call grandma" not in listing

    assert "done" in (registry.handle(state, f"/done {study.id[:8]}") or "")
    listing = registry.handle(state, "/tasks all") or ""
    assert "Completed: 1" in listing and "Progress: 50%" in listing

    assert registry.handle(state, f"/rm {general.id}") == "Task deleted."
    assert "No single task" in (registry.handle(state, "/rm zzz") or "")

    titles = [n.title for n in state.notices.drain()]
    assert titles.count("Task Added") == 2 and "Task Deleted" in titles


def test_history_and_status(state) -> None:
    state.chat.ask("What is photosynthesis?")
    history = registry.handle(state, "/history") or ""
    assert "You: What is photosynthesis?" in history
    assert "Assistant: Great question!" in history

    status = registry.handle(state, "/status") or ""
    assert "Progress: 0%" in status and "FakeTextGenerator" in status
