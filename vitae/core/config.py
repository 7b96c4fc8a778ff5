from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    database_path: str
    storage_path: str
    storage_base_url: str
    gotenberg_url: str
    gotenberg_timeout_s: float
    jina_api_key: str | None
    jina_base_url: str
    jina_timeout_s: float
    tailor_max_bullets: int
    tailor_concurrency: int
    default_template: str


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    database_path=_get_env("DATABASE_PATH", "data/vitae.db") or "data/vitae.db",
    storage_path=_get_env("STORAGE_PATH", "data/storage") or "data/storage",
    storage_base_url=_get_env("STORAGE_BASE_URL", "http://localhost:8000/files") or "http://localhost:8000/files",
    gotenberg_url=_get_env("GOTENBERG_URL", "http://localhost:3000") or "http://localhost:3000",
    gotenberg_timeout_s=_get_env_float("GOTENBERG_TIMEOUT_S", 60.0),
    jina_api_key=_get_env("JINA_API_KEY"),
    jina_base_url=_get_env("JINA_BASE_URL", "https://r.jina.ai") or "https://r.jina.ai",
    jina_timeout_s=_get_env_float("JINA_TIMEOUT_S", 30.0),
    tailor_max_bullets=_get_env_int("TAILOR_MAX_BULLETS", 15),
    tailor_concurrency=_get_env_int("TAILOR_CONCURRENCY", 4),
    default_template=(_get_env("DEFAULT_TEMPLATE", "jake") or "jake").strip().lower(),
)

if settings.tailor_max_bullets < 1:
    raise RuntimeError("TAILOR_MAX_BULLETS must be at least 1.")

if settings.tailor_concurrency < 1:
    raise RuntimeError("TAILOR_CONCURRENCY must be at least 1.")
