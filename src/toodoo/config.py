# src/toodoo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TOODOO"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    store_path: Path
    tasks_key: str
    profile_key: str

    # ---- Tasks ----
    max_title_length: int

    # ---- Voice ----
    voice_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "toodoo") or "toodoo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/toodoo"))
        storage_backend = _env(_k("STORAGE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        default_name = "toodoo.json" if storage_backend == "json" else "toodoo.sqlite3"
        store_path = _env_path(_k("STORE_PATH"), data_dir / default_name)

        tasks_key = _env(_k("TASKS_KEY"), "todos") or "todos"
        profile_key = _env(_k("PROFILE_KEY"), "toodoo-user") or "toodoo-user"

        # Non-positive bounds fall back to the default.
        max_title_length = _env_int(_k("MAX_TITLE_LENGTH"), 100)
        if max_title_length <= 0:
            max_title_length = 100

        voice_enabled = _env_bool(_k("VOICE_ENABLED"), False)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            store_path=store_path,
            tasks_key=tasks_key,
            profile_key=profile_key,
            max_title_length=max_title_length,
            voice_enabled=voice_enabled,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
