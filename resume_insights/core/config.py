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
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    track_view_rate_limit: str
    cors_allowed_origins: tuple[str, ...]
    cors_allow_credentials: bool
    trust_x_forwarded_for: bool
    insights_db_path: str
    dashboard_cache_ttl_seconds: int
    history_default_limit: int
    default_industry: str
    scoring_config_path: str | None


settings = Settings(
    api_key=_get_env("API_KEY"),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    track_view_rate_limit=_get_env("TRACK_VIEW_RATE_LIMIT", "30/minute") or "30/minute",
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
    insights_db_path=_get_env("INSIGHTS_DB_PATH", "data/insights.db") or "data/insights.db",
    dashboard_cache_ttl_seconds=_get_env_int("DASHBOARD_CACHE_TTL_SECONDS", 300),
    history_default_limit=_get_env_int("HISTORY_DEFAULT_LIMIT", 10),
    default_industry=(_get_env("DEFAULT_INDUSTRY", "software_engineering") or "software_engineering").strip().lower(),
    scoring_config_path=_get_env("SCORING_CONFIG_PATH"),
)

if settings.dashboard_cache_ttl_seconds < 0:
    raise RuntimeError("DASHBOARD_CACHE_TTL_SECONDS must not be negative.")

if not 1 <= settings.history_default_limit <= 100:
    raise RuntimeError("HISTORY_DEFAULT_LIMIT must be between 1 and 100.")
