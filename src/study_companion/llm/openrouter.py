# src/study_companion/llm/openrouter.py

from __future__ import annotations

import logging
import time
from typing import Any

import openai
from openai import OpenAI

from .client import GenerationError, ModelFallback, make_timeout

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    return isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError))


def _is_rate_limit_error(exc: Exception) -> bool:
    return isinstance(exc, openai.RateLimitError)


def _is_connection_error(exc: Exception) -> bool:
    # APITimeoutError subclasses APIConnectionError.
    return isinstance(exc, openai.APIConnectionError)


def _is_not_found_error(exc: Exception) -> bool:
    return isinstance(exc, openai.NotFoundError)


class OpenRouterClient:
    """
    OpenAI-compatible chat completion (OpenRouter by default), non-streaming.

    The prompt is sent as a single user message; the reply text is
    choices[0].message.content. Automatic SDK retries are disabled so the
    model fallback can move on quickly.
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        models: list[str],
        base_url: str = "https://openrouter.ai/api/v1",
        extra_headers: dict[str, str] | None = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
        client: Any | None = None,
    ) -> None:
        if client is None and (not api_key or not str(api_key).strip()):
            raise GenerationError("OpenRouter API key is not set. Set STUDY_OPENROUTER_API_KEY in your .env.")
        self._fallback = ModelFallback(models)
        if not self._fallback.models:
            raise GenerationError("LLM model list is empty. Set STUDY_LLM_MODELS in your .env.")

        self._headers = dict(extra_headers or {})
        self._client = client or OpenAI(
            base_url=str(base_url),
            api_key=str(api_key),
            timeout=make_timeout(connect_timeout, read_timeout),
            max_retries=0,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> OpenRouterClient:
        return cls(
            api_key=getattr(settings, "openrouter_api_key", None),
            models=list(getattr(settings, "llm_models", []) or []),
            base_url=getattr(settings, "openrouter_base_url", "") or "https://openrouter.ai/api/v1",
            extra_headers=dict(getattr(settings, "extra_headers", {}) or {}),
            connect_timeout=float(getattr(settings, "llm_connect_timeout_seconds", 5.0)),
            read_timeout=float(getattr(settings, "llm_read_timeout_seconds", 30.0)),
        )

    def _generate_once(self, model: str, prompt: str) -> str:
        completion = self._client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            extra_headers=self._headers or None,
        )
        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise GenerationError(f"Unexpected completion shape from model: {model}") from e
        if not content:
            raise GenerationError(f"Model returned no content: {model}")
        return str(content)

    def generate(self, prompt: str) -> str:
        last_error: Exception | None = None

        for model in self._fallback.candidates():
            logger.info("LLM: trying model=%s", model)
            t0 = time.monotonic()
            try:
                text = self._generate_once(model, prompt)
            except Exception as e:
                last_error = e

                if _is_auth_error(e):
                    raise GenerationError(
                        "LLM authentication failed. Check your API key (STUDY_OPENROUTER_API_KEY)."
                    ) from e

                if _is_not_found_error(e):
                    self._fallback.mark_unavailable(model)
                    logger.info("LLM: model not available (404): %s", model)
                    continue

                if _is_rate_limit_error(e):
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                    continue

                if _is_connection_error(e):
                    logger.info("LLM: network/timeout error on model=%s, trying next", model)
                    continue

                logger.info("LLM: error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue

            logger.info("LLM: reply from model=%s (%.2fs, %d chars)", model, time.monotonic() - t0, len(text))
            return text

        if last_error is not None:
            if _is_rate_limit_error(last_error):
                raise GenerationError("LLM is rate-limited. Try again later.") from last_error
            if _is_connection_error(last_error):
                raise GenerationError("LLM network/timeout error. Try again later or change models.") from last_error
        raise GenerationError("All LLM models failed.") from last_error
