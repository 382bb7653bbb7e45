# src/study_companion/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Everything else receives settings by injection (tests use a SimpleNamespace).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "STUDY"

LLM_PROVIDERS = ("gemini", "openrouter", "offline")

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    state_db_path: Path
    tasks_db_path: Path

    # ---- Progress ----
    progress_key: str

    # ---- Task service ----
    tasks_api_url: str
    tasks_timeout_seconds: float

    # ---- Text generation ----
    llm_provider: str
    llm_models: list[str]
    gemini_api_key: str | None
    gemini_base_url: str
    openrouter_api_key: str | None
    openrouter_base_url: str
    extra_headers: dict[str, str]
    llm_connect_timeout_seconds: float
    llm_read_timeout_seconds: float

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "study-companion").strip() or "study-companion"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/study"))
        state_db_path = _env_path(_k("STATE_DB_PATH"), data_dir / "state.sqlite3")
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        progress_key = _env(_k("PROGRESS_KEY"), "syllabusProgress").strip() or "syllabusProgress"

        tasks_api_url = _env(_k("TASKS_API_URL"), "").strip().rstrip("/")
        tasks_timeout_seconds = _env_float(_k("TASKS_TIMEOUT_SECONDS"), 10.0)

        llm_provider = _env(_k("LLM_PROVIDER"), "gemini").strip().lower()
        if llm_provider not in LLM_PROVIDERS:
            llm_provider = "gemini"

        default_models = ["gemini-2.0-flash"] if llm_provider != "openrouter" else [
            "google/gemini-2.0-flash-exp:free",
            "deepseek/deepseek-chat-v3-0324:free",
        ]
        llm_models = _env_list(_k("LLM_MODELS"), default_models)

        gemini_api_key = _first_env(_k("GEMINI_API_KEY"), "GEMINI_API_KEY", default=None)
        gemini_base_url = _env(
            _k("GEMINI_BASE_URL"), "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")

        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": app_name,
        }

        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 30.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            state_db_path=state_db_path,
            tasks_db_path=tasks_db_path,
            progress_key=progress_key,
            tasks_api_url=tasks_api_url,
            tasks_timeout_seconds=tasks_timeout_seconds,
            llm_provider=llm_provider,
            llm_models=llm_models,
            gemini_api_key=gemini_api_key,
            gemini_base_url=gemini_base_url,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            extra_headers=extra_headers,
            llm_connect_timeout_seconds=connect_timeout,
            llm_read_timeout_seconds=read_timeout,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first call."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
