# src/tasks_panel/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time: missing list/account only fail when a command runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TASKPANEL"

DEFAULT_GOG_PATH = "/opt/homebrew/bin/gog"
DEFAULT_REFRESH_INTERVAL_SECONDS = 300


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


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


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
    data_dir: Path

    # ---- External task CLI ----
    gog_path: str
    list_id: str
    account: str

    # ---- Refresh ----
    refresh_interval_seconds: float
    auto_refresh: bool

    # ---- Console ----
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "tasks-panel").strip() or "tasks-panel"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/tasks_panel"))

        gog_path = _env(_k("GOG_PATH"), DEFAULT_GOG_PATH).strip() or DEFAULT_GOG_PATH
        list_id = _env(_k("LIST_ID")).strip()
        account = _env(_k("ACCOUNT")).strip()

        refresh_interval_seconds = _env_float(
            _k("REFRESH_INTERVAL_SECONDS"), float(DEFAULT_REFRESH_INTERVAL_SECONDS)
        )
        auto_refresh = _env_bool(_k("AUTO_REFRESH"), True)
        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            gog_path=gog_path,
            list_id=list_id,
            account=account,
            refresh_interval_seconds=refresh_interval_seconds,
            auto_refresh=auto_refresh,
            console_enabled=console_enabled,
        )


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
