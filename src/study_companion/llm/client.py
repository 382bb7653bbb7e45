# src/study_companion/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

BAD_MODEL_COOLDOWN_SECONDS = 3600.0


class GenerationError(RuntimeError):
    """Text generation failed for this request (config, transport, status or reply shape)."""


class _AuthFailed(GenerationError):
    pass


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if "API key is not set" in msg:
        return "LLM is not configured (missing API key). Set STUDY_GEMINI_API_KEY or STUDY_OPENROUTER_API_KEY in .env (see .env.example)."
    if "model list is empty" in msg:
        return "LLM is not configured (no models). Set STUDY_LLM_MODELS in .env (see .env.example)."
    if "authentication failed" in msg:
        return "LLM rejected the API key. Check STUDY_GEMINI_API_KEY / STUDY_OPENROUTER_API_KEY."
    return msg


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


class ModelFallback:
    """
    Ordered model list with a per-instance cooldown for models that returned 404.

    Policy shared by every provider:
    - 404 (model not available) -> cool the model down for an hour, try next.
    - rate limit / 5xx / network -> try next.
    - auth -> fail fast (no retries across models).
    """

    def __init__(self, models: list[str]) -> None:
        self.models = [m.strip() for m in models if m and m.strip()]
        self._bad: dict[str, float] = {}  # model -> retry_at (monotonic)

    def candidates(self) -> list[str]:
        now = time.monotonic()
        out = [m for m in self.models if self._bad.get(m, 0.0) <= now]
        # Everything cooling down: try the full list rather than fail without a request.
        return out or list(self.models)

    def mark_unavailable(self, model: str) -> None:
        self._bad[model] = time.monotonic() + BAD_MODEL_COOLDOWN_SECONDS


def extract_gemini_text(data: Any) -> str:
    """Reply text at candidates[0].content.parts[0].text; any other shape is an error."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise GenerationError("Unexpected response shape from generation endpoint.") from e
    if not isinstance(text, str):
        raise GenerationError("Generation endpoint returned non-text content.")
    return text


class GeminiClient:
    """
    Google Generative Language API (generateContent) over httpx.

    One POST per attempt:
      {base_url}/models/{model}:generateContent?key=API_KEY
      {"contents": [{"parts": [{"text": prompt}]}]}
    """

    def __init__(
        self,
        *,
        api_key: str | None,
        models: list[str],
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key or not str(api_key).strip():
            raise GenerationError("Gemini API key is not set. Set STUDY_GEMINI_API_KEY in your .env.")
        self._fallback = ModelFallback(models)
        if not self._fallback.models:
            raise GenerationError("LLM model list is empty. Set STUDY_LLM_MODELS in your .env.")

        self._api_key = str(api_key).strip()
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=make_timeout(connect_timeout, read_timeout),
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Any) -> GeminiClient:
        return cls(
            api_key=getattr(settings, "gemini_api_key", None),
            models=list(getattr(settings, "llm_models", []) or []),
            base_url=getattr(settings, "gemini_base_url", "") or "https://generativelanguage.googleapis.com/v1beta",
            connect_timeout=float(getattr(settings, "llm_connect_timeout_seconds", 5.0)),
            read_timeout=float(getattr(settings, "llm_read_timeout_seconds", 30.0)),
        )

    def close(self) -> None:
        self._client.close()

    def _generate_once(self, model: str, prompt: str) -> str:
        resp = self._client.post(
            f"/models/{model}:generateContent",
            params={"key": self._api_key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
        )
        if resp.status_code in (401, 403):
            raise _AuthFailed("LLM authentication failed. Check your API key (STUDY_GEMINI_API_KEY).")
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise GenerationError("Generation endpoint returned invalid JSON.") from e
        return extract_gemini_text(data)

    def generate(self, prompt: str) -> str:
        last_error: Exception | None = None

        for model in self._fallback.candidates():
            logger.info("LLM: trying model=%s", model)
            t0 = time.monotonic()
            try:
                text = self._generate_once(model, prompt)
            except _AuthFailed:
                raise
            except httpx.HTTPStatusError as e:
                last_error = e
                status = e.response.status_code
                if status == 404:
                    self._fallback.mark_unavailable(model)
                    logger.info("LLM: model not available (404): %s", model)
                elif status == 429:
                    logger.info("LLM: rate-limited on model=%s, trying next", model)
                else:
                    logger.info("LLM: HTTP %s on model=%s, trying next", status, model)
                continue
            except httpx.HTTPError as e:
                last_error = e
                logger.info("LLM: network/timeout error on model=%s (%s), trying next", model, e.__class__.__name__)
                continue
            except GenerationError as e:
                last_error = e
                logger.info("LLM: bad reply from model=%s (%s), trying next", model, e)
                continue

            logger.info("LLM: reply from model=%s (%.2fs, %d chars)", model, time.monotonic() - t0, len(text))
            return text

        if isinstance(last_error, httpx.HTTPStatusError) and last_error.response.status_code == 429:
            raise GenerationError("LLM is rate-limited. Try again later.") from last_error
        if isinstance(last_error, httpx.TransportError):
            raise GenerationError("LLM network/timeout error. Try again later or change models.") from last_error
        raise GenerationError("All LLM models failed.") from last_error
