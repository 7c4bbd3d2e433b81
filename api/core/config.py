"""
Runtime settings.

Settings are read from the environment once at startup and passed explicitly
to `create_app()` (see `api/main.py`). Nothing else in the API reads `os.environ`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_REGISTRATION_PATH = "/register.php"
DEFAULT_API_NAME = "NU Student Registration API"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


@dataclass(frozen=True)
class Settings:
    database_url: str = ""
    pool_min_size: int = 1
    pool_max_size: int = 5
    command_timeout_s: int = 30
    registration_path: str = DEFAULT_REGISTRATION_PATH
    api_name: str = DEFAULT_API_NAME
    cors_allow_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"


def load_settings() -> Settings:
    # Used as a router prefix: leading slash, no trailing slash, never bare "/".
    path = _env_str("REGISTRATION_PATH", DEFAULT_REGISTRATION_PATH).strip("/")
    path = "/" + path if path else DEFAULT_REGISTRATION_PATH

    min_size = max(_env_int("DB_POOL_MIN_SIZE", 1), 0)
    max_size = max(_env_int("DB_POOL_MAX_SIZE", 5), 1)

    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        pool_min_size=min(min_size, max_size),
        pool_max_size=max_size,
        command_timeout_s=max(_env_int("DB_COMMAND_TIMEOUT", 30), 1),
        registration_path=path,
        api_name=_env_str("API_NAME", DEFAULT_API_NAME),
        cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", ("*",)),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
    )
