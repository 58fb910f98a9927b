"""Application configuration. Loads .env, then overrides from settings.json."""

import json
import os
from pathlib import Path

from dotenv import load_dotenv

from rindang.utils.constants import DEFAULT_MAX_RETRY_COUNT

# Find the project root (where .env lives)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# Runtime settings file for in-app configuration
_SETTINGS_FILE = _PROJECT_ROOT / "data" / "settings.json"


def _load_settings() -> dict:
    """Load saved runtime settings from JSON file."""
    if _SETTINGS_FILE.exists():
        try:
            return json.loads(_SETTINGS_FILE.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            pass
    return {}


def _save_settings(settings: dict):
    """Persist runtime settings to JSON file."""
    _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    _SETTINGS_FILE.write_text(
        json.dumps(settings, indent=2), encoding="utf-8"
    )


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


# Load saved settings once at import time
_runtime = _load_settings()


class Config:
    """Central configuration: .env defaults, settings.json overrides."""

    # Paths
    PROJECT_ROOT: Path = _PROJECT_ROOT
    DATABASE_PATH: Path = Path(
        os.getenv("OFFLINE_DB_PATH", str(_PROJECT_ROOT / "data" / "rindang_offline.db"))
    )
    BACKUP_PATH: Path = Path(
        os.getenv("DATABASE_BACKUP_PATH", str(_PROJECT_ROOT / "data" / "backups"))
    )

    # Remote store (settings.json overrides .env)
    SUPABASE_URL: str = _runtime.get(
        "supabase_url",
        os.getenv("SUPABASE_URL", ""),
    )
    SUPABASE_ANON_KEY: str = _runtime.get(
        "supabase_anon_key",
        os.getenv("SUPABASE_ANON_KEY", ""),
    )
    REMOTE_TIMEOUT: float = float(_runtime.get(
        "remote_timeout",
        os.getenv("REMOTE_TIMEOUT", "15"),
    ))

    # Offline sync
    MAX_RETRY_COUNT: int = int(_runtime.get(
        "max_retry_count",
        os.getenv("MAX_RETRY_COUNT", str(DEFAULT_MAX_RETRY_COUNT)),
    ))
    AUTO_SYNC: bool = _as_bool(_runtime.get(
        "auto_sync",
        os.getenv("AUTO_SYNC", "true"),
    ))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def is_remote_configured(cls) -> bool:
        return bool(cls.SUPABASE_URL and cls.SUPABASE_ANON_KEY)

    @classmethod
    def update_remote_settings(cls, url: str, anon_key: str,
                               timeout: float):
        """Update remote store settings at runtime and persist to disk."""
        cls.SUPABASE_URL = url
        cls.SUPABASE_ANON_KEY = anon_key
        cls.REMOTE_TIMEOUT = timeout

        settings = _load_settings()
        settings["supabase_url"] = url
        settings["supabase_anon_key"] = anon_key
        settings["remote_timeout"] = timeout
        _save_settings(settings)

    @classmethod
    def update_sync_settings(cls, max_retry_count: int, auto_sync: bool):
        """Update offline sync behaviour and persist."""
        if max_retry_count < 1:
            raise ValueError("max_retry_count must be at least 1")
        cls.MAX_RETRY_COUNT = max_retry_count
        cls.AUTO_SYNC = auto_sync

        settings = _load_settings()
        settings["max_retry_count"] = max_retry_count
        settings["auto_sync"] = auto_sync
        _save_settings(settings)
