# src/study_companion/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _flush_notices(state: AppState) -> None:
    for notice in state.notices.drain():
        tag = "!" if notice.is_error else "i"
        desc = f" - {notice.description}" if notice.description else ""
        _print_ts(f"({tag}) {notice.title}{desc}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "study-companion"))

    _print_ts(f"<<< {app_name}: {state.chat.messages[0].content}")
    _print_ts("[CONSOLE] Ask a question, or use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slower operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> You: ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Commands (/help, /progress, ...)
        try:
            with state.lock:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            _flush_notices(state)
            continue

        # Normal chat: one blocking request, reply printed in full.
        emit("[LLM] Thinking...")
        with state.lock:
            reply = state.chat.ask(user_input)

        if reply is None:
            _print_ts("[LLM] Still working on the previous question.")
        else:
            _print_ts(f"<<< {app_name}: {reply.content}\n")
        _flush_notices(state)

    logger.info("Console connector finished.")
