# tests/test_chat.py

from __future__ import annotations

from study_companion.core.chat import FALLBACK_REPLY, GREETING, ChatSession, build_prompt, format_reply
from study_companion.core.notify import NoticeQueue

from .fakes import FailingGenerator, FakeTextGenerator


def test_format_reply_strips_markup() -> None:
    raw = "## Step 1\n**Factorise** the *quadratic*.\n\n\n\n### Step 2\nSolve.  \n"
    assert format_reply(raw) == "Step 1\nFactorise the quadratic.\n\nStep 2\nSolve."


def test_format_reply_collapses_whitespace_only_lines() -> None:
    assert format_reply("a\n   \n \t \nb") == "a\n\nb"
    assert format_reply("   ") == ""


def test_prompt_embeds_raw_question() -> None:
    prompt = build_prompt("What is a polynomial?")
    assert 'Student\'s question: "What is a polynomial?"' in prompt
    assert prompt.startswith("You are a friendly and knowledgeable AI tutor for Class 10 CBSE students.")


def test_transcript_starts_with_greeting() -> None:
    chat = ChatSession(FakeTextGenerator(), NoticeQueue())
    [first] = chat.messages
    assert first.role == "assistant" and first.content == GREETING


def test_ask_appends_user_then_formatted_reply() -> None:
    gen = FakeTextGenerator("**Ohm's law**: V = IR")
    notices = NoticeQueue()
    chat = ChatSession(gen, notices)

    reply = chat.ask("Explain Ohm's law")

    assert reply is not None and reply.content == "Ohm's law: V = IR"
    roles = [m.role for m in chat.messages]
    assert roles == ["assistant", "user", "assistant"]
    assert chat.messages[1].content == "Explain Ohm's law"
    assert "Explain Ohm's law" in gen.prompts[0]
    assert len(notices) == 0
    assert not chat.is_pending


def test_blank_question_is_ignored() -> None:
    gen = FakeTextGenerator()
    chat = ChatSession(gen, NoticeQueue())
    assert chat.ask("  \n") is None
    assert len(chat.messages) == 1
    assert gen.prompts == []


def test_failure_appends_fallback_and_notifies() -> None:
    notices = NoticeQueue()
    chat = ChatSession(FailingGenerator("HTTP 500"), notices)

    reply = chat.ask("Why is the sky blue?")

    assert reply is not None and reply.content == FALLBACK_REPLY
    assert [m.role for m in chat.messages] == ["assistant", "user", "assistant"]
    [notice] = notices.drain()
    assert notice.is_error and notice.title == "Oops! Something went wrong"


def test_unexpected_exception_and_empty_reply_use_fallback() -> None:
    notices = NoticeQueue()
    chat = ChatSession(FakeTextGenerator(error=KeyError("candidates")), notices)
    assert chat.ask("q1").content == FALLBACK_REPLY

    chat2 = ChatSession(FakeTextGenerator("   "), notices)
    assert chat2.ask("q2").content == FALLBACK_REPLY
    assert len(notices.drain()) == 2


def test_reentrant_submission_is_rejected() -> None:
    notices = NoticeQueue()
    holder: dict[str, ChatSession] = {}
    inner_results = []

    class ReentrantGenerator:
        def generate(self, prompt: str) -> str:
            # A second submission while this one is in flight.
            inner_results.append(holder["chat"].ask("second"))
            return "first answer"

    chat = ChatSession(ReentrantGenerator(), notices)
    holder["chat"] = chat

    reply = chat.ask("first")

    assert inner_results == [None]
    assert reply is not None and reply.content == "first answer"
    assert [m.content for m in chat.messages[1:]] == ["first", "first answer"]


def test_transcript_is_append_only_copy() -> None:
    chat = ChatSession(FakeTextGenerator(), NoticeQueue())
    chat.messages.clear()
    assert len(chat.messages) == 1
