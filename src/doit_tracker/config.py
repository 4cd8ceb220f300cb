# src/doit_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time: without Supabase keys the app runs on local storage,
  without an LLM key suggestions fall back to fixed lists.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "DOIT"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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

    # ---- Remote persistence (Supabase) ----
    supabase_url: str | None
    supabase_anon_key: str | None
    supabase_email: str | None
    supabase_password: str | None

    # ---- Local persistence ----
    local_user: str | None
    data_dir: Path
    local_db_path: Path
    seed_defaults: bool

    # ---- LLM / OpenRouter (suggestions) ----
    openrouter_api_key: str | None
    openrouter_base_url: str
    llm_models: list[str]
    extra_headers: dict[str, str]

    @property
    def remote_configured(self) -> bool:
        return bool((self.supabase_url or "").strip() and (self.supabase_anon_key or "").strip())

    @staticmethod
    def from_env() -> "Settings":
        app_name = _first_env(_k("APP_NAME"), default="doit") or "doit"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Accept the bare SUPABASE_* names used by hosted setups as well.
        supabase_url = _first_env(_k("SUPABASE_URL"), "SUPABASE_URL", default=None)
        supabase_anon_key = _first_env(_k("SUPABASE_ANON_KEY"), "SUPABASE_ANON_KEY", default=None)
        supabase_email = _first_env(_k("SUPABASE_EMAIL"), default=None)
        supabase_password = _first_env(_k("SUPABASE_PASSWORD"), default=None)

        local_user = _first_env(_k("LOCAL_USER"), default=None)
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/doit"))
        local_db_path = _env_path(_k("LOCAL_DB_PATH"), data_dir / "local_store.sqlite3")
        seed_defaults = _env_bool(_k("SEED_DEFAULTS"), True)

        openrouter_api_key = _first_env(_k("OPENROUTER_API_KEY"), "OPENROUTER_API_KEY", default=None)
        openrouter_base_url = _env(_k("OPENROUTER_BASE_URL"), "https://openrouter.ai/api/v1")
        llm_models = _env_list(
            _k("LLM_MODELS"),
            [
                "google/gemini-2.5-flash",
                "qwen/qwen-2.5-72b-instruct:free",
                "deepseek/deepseek-chat-v3-0324:free",
            ],
        )
        extra_headers = {
            "HTTP-Referer": _env(_k("HTTP_REFERER"), "https://example.com"),
            "X-Title": _env(_k("APP_TITLE"), app_name),
        }

        return Settings(
            app_name=app_name,
            log_level=log_level,
            supabase_url=supabase_url,
            supabase_anon_key=supabase_anon_key,
            supabase_email=supabase_email,
            supabase_password=supabase_password,
            local_user=(local_user or "").strip() or None,
            data_dir=data_dir,
            local_db_path=local_db_path,
            seed_defaults=seed_defaults,
            openrouter_api_key=openrouter_api_key,
            openrouter_base_url=openrouter_base_url,
            llm_models=llm_models,
            extra_headers=extra_headers,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
