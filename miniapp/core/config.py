from __future__ import annotations

import logging
import os

DEFAULT_DATABASE_URL = "sqlite:///./miniapp.db"


def database_url() -> str:
    url = os.getenv("MINIAPP_DATABASE_URL", "").strip()
    if url:
        return url
    host = os.getenv("DB_HOST", "").strip()
    if not host:
        return DEFAULT_DATABASE_URL
    port = os.getenv("DB_PORT", "5432")
    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "")
    name = os.getenv("DB_NAME", "appdrop")
    sslmode = os.getenv("DB_SSLMODE", "disable")
    auth = f"{user}:{password}" if password else user
    return f"postgresql+psycopg://{auth}@{host}:{port}/{name}?sslmode={sslmode}"


def api_key() -> str:
    return os.getenv("MINIAPP_API_KEY", "")


def log_level() -> int:
    raw = os.getenv("MINIAPP_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def cors_origins() -> list[str]:
    raw = os.getenv("MINIAPP_CORS_ORIGINS", "*")
    origins = [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]
