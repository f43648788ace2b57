# Runtime configuration
#
# Values come from environment variables, optionally seeded from a
# ``.env`` file in the working directory.

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Process-wide settings for the API server."""

    host: str = "0.0.0.0"
    port: int = 3000
    database_path: str = field(
        default_factory=lambda: str(Path.cwd() / "threat_intel.db")
    )
    log_level: str = "INFO"
    log_json: bool = True
    dashboard_cache_ttl: float = 300.0  # seconds

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env") -> "Settings":
        """Read settings from the environment.

        ``env_file`` (relative to the working directory) is loaded first
        if it exists; variables already set in the environment win.
        """
        if env_file:
            load_dotenv(env_file)
        defaults = cls()
        return cls(
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", str(defaults.port))),
            database_path=os.getenv("DATABASE_PATH", defaults.database_path),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            log_json=_env_bool("LOG_JSON", defaults.log_json),
            dashboard_cache_ttl=float(
                os.getenv("DASHBOARD_CACHE_TTL", str(defaults.dashboard_cache_ttl))
            ),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the global settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def set_settings(settings: Optional[Settings]) -> None:
    """Replace the global settings (``None`` forces a reload on next use)."""
    global _settings
    _settings = settings
