# src/study_companion/llm/offline.py

from __future__ import annotations

import re

_QUESTION_RE = re.compile(r'Student\'s question: "(.*?)"\n', re.DOTALL)


class OfflineTextGenerator:
    """
    Offline deterministic generator used for demos when no external API is configured.

    Echoes the student's question (pulled out of the tutor template) with a hint on
    how to enable real answers. Never fails.
    """

    def generate(self, prompt: str) -> str:
        m = _QUESTION_RE.search(prompt or "")
        question = m.group(1).strip() if m else (prompt or "").strip()
        return (
            "**Offline demo mode**: no external LLM is configured.\n"
            "Set STUDY_GEMINI_API_KEY (or STUDY_LLM_PROVIDER=openrouter with "
            "STUDY_OPENROUTER_API_KEY) to get real answers.\n\n\n"
            f"You asked: {question}\n\n"
            "Study tip: write the question down in your notebook and try it once more after revising the chapter!"
        )

