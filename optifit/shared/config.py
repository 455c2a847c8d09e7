from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str = "false") -> bool:
    return (_env(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


def _list(name: str, default: str = "") -> list[str]:
    value = _env(name, default) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    jwt_secret: str
    jwt_access_ttl_minutes: int
    jwt_refresh_ttl_days: int
    password_bcrypt_rounds: int
    google_client_id: str
    google_client_secret: str
    google_redirect_uri: str
    google_timeout_seconds: float
    cors_allow_origins: list[str]
    log_level: str
    auto_create_schema: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        jwt_secret=_env("JWT_SECRET", ""),
        jwt_access_ttl_minutes=int(_env("JWT_ACCESS_TTL_MINUTES", "60")),
        jwt_refresh_ttl_days=int(_env("JWT_REFRESH_TTL_DAYS", "7")),
        password_bcrypt_rounds=int(_env("PASSWORD_BCRYPT_ROUNDS", "10")),
        google_client_id=_env("GOOGLE_CLIENT_ID", ""),
        google_client_secret=_env("GOOGLE_CLIENT_SECRET", ""),
        google_redirect_uri=_env(
            "GOOGLE_REDIRECT_URI",
            "http://localhost:8000/auth/external/callback",
        ),
        google_timeout_seconds=float(_env("GOOGLE_TIMEOUT_SECONDS", "10")),
        cors_allow_origins=_list("CORS_ALLOW_ORIGINS", "*"),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        auto_create_schema=_bool("AUTO_CREATE_SCHEMA"),
    )
