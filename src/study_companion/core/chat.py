# src/study_companion/core/chat.py

"""
Chat transcript for the doubt assistant.

This module is transport-agnostic:
- the front-end passes in the student's raw question,
- the session renders the tutor prompt and calls a TextGenerator,
- the front-end decides how to display the transcript.

Key invariants:
- the transcript is append-only for the session (no edit, delete or persistence),
- a failed request appends a fallback assistant message instead of rolling back,
- only one request may be in flight; re-entrant submissions are rejected.
"""

from __future__ import annotations

import logging
import re
import threading
import time
import uuid
from dataclasses import dataclass, field

from ..llm.client import GenerationError
from .ports import Notifier, Role, TextGenerator

logger = logging.getLogger(__name__)

GREETING = (
    "Hi! I'm your AI study assistant. I'm here to help you with any doubts or questions "
    "about your Class 10 CBSE subjects. Feel free to ask me anything! 📚✨"
)

FALLBACK_REPLY = "I'm sorry, I couldn't process your question right now. Please try asking again! 😊"

PROMPT_TEMPLATE = """You are a friendly and knowledgeable AI tutor for Class 10 CBSE students.

Student's question: "{question}"

Please provide a helpful, clear, and encouraging response. If the question is about a specific subject or chapter, explain the concept step-by-step. If it's a math problem, show the solution process. If it's about other subjects, provide detailed explanations with examples.

Guidelines:
- Be encouraging and supportive
- Use simple language that a Class 10 student can understand
- Provide step-by-step explanations for complex topics
- Include relevant examples or analogies
- If it's a calculation, show each step clearly
- End with a motivating note or study tip

Keep your response focused, helpful, and student-friendly!"""

_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_ITALIC_RE = re.compile(r"\*(.*?)\*")
_HEADING_RE = re.compile(r"#{1,6}\s*")
_BLANK_RUN_RE = re.compile(r"\n\s*\n")


def build_prompt(question: str) -> str:
    return PROMPT_TEMPLATE.format(question=question)


def format_reply(text: str) -> str:
    """Strip bold/italic/heading markers, collapse blank-line runs, trim."""
    out = _BOLD_RE.sub(r"\1", text or "")
    out = _ITALIC_RE.sub(r"\1", out)
    out = _HEADING_RE.sub("", out)
    out = _BLANK_RUN_RE.sub("\n\n", out)
    return out.strip()


@dataclass(slots=True)
class Message:
    content: str
    role: Role
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)


class ChatSession:
    def __init__(self, generator: TextGenerator, notifier: Notifier) -> None:
        self._generator = generator
        self._notifier = notifier
        self._messages: list[Message] = [Message(content=GREETING, role="assistant")]
        self._busy = threading.Lock()

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    @property
    def is_pending(self) -> bool:
        return self._busy.locked()

    def _append(self, content: str, role: Role) -> Message:
        msg = Message(content=content, role=role)
        self._messages.append(msg)
        return msg

    def ask(self, question: str) -> Message | None:
        """
        Send one question and append the reply.

        Returns the appended assistant message, or None when nothing was sent
        (blank input or a request already in flight).
        """
        if not question or not question.strip():
            return None

        if not self._busy.acquire(blocking=False):
            logger.info("Chat submission ignored: a request is already pending.")
            return None

        try:
            self._append(question, "user")
            try:
                raw = self._generator.generate(build_prompt(question))
                reply = format_reply(raw)
                if not reply:
                    raise GenerationError("Model returned no content.")
            except GenerationError as e:
                logger.info("Chat generation failed: %s", e)
                return self._fail()
            except Exception:
                logger.exception("Chat generation crashed.")
                return self._fail()
            return self._append(reply, "assistant")
        finally:
            self._busy.release()

    def _fail(self) -> Message:
        self._notifier.push(
            "Oops! Something went wrong",
            "I couldn't process your question right now. Please try again!",
            "destructive",
        )
        return self._append(FALLBACK_REPLY, "assistant")
