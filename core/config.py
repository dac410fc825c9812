"""
Application Configuration.

All runtime settings for the DevConnector API are read from environment
variables into a single `Settings` object when the application starts. Nothing
else in the code base reads `os.environ` directly, so tests can point the
application at a throwaway database simply by setting variables before the
lifespan runs.

Recognised variables:
- `DATABASE_URL`: SQLAlchemy async URL (SQLite via aiosqlite by default).
- `JWT_SECRET_KEY` / `JWT_ALGORITHM` / `JWT_EXPIRES_IN`: session token signing.
- `BCRYPT_ROUNDS`: cost factor used when hashing passwords.
- `ENVIRONMENT` / `LOG_LEVEL`: logging behaviour.
- `CORS_ORIGINS`: comma-separated list of allowed browser origins.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./devconnector.db"
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _get_env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: Optional[List[str]] = None) -> List[str]:
    value = os.getenv(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime settings"""

    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret_key: Optional[str] = None
    jwt_algorithm: str = "HS256"
    # 100 hours
    jwt_expires_in: int = 360000
    bcrypt_rounds: int = 10
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment"""
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            jwt_secret_key=os.getenv("JWT_SECRET_KEY") or None,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_expires_in=_get_env_int("JWT_EXPIRES_IN", 360000),
            bcrypt_rounds=_get_env_int("BCRYPT_ROUNDS", 10),
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=_get_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get global settings, reading the environment on first use"""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def init_settings(settings: Optional[Settings] = None) -> Settings:
    """Initialize global settings (re-reads the environment when none given)"""
    global _settings
    _settings = settings or Settings.from_env()
    return _settings
