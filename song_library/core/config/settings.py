"""
Settings - Application configuration using dataclasses.

Environment variables:
- ENV: local, dev, prod
- DATABASE_URL: SQLAlchemy async URL (postgresql+asyncpg://...)
- CACHE_BACKEND: redis, memory
- REDIS_URL: Redis connection URL
- CACHE_PREFIX: Redis key prefix
- MUSIC_INFO_URL: Base URL of the metadata service
- MUSIC_INFO_TIMEOUT: Metadata request timeout, seconds
- HTTP_HOST / HTTP_PORT: Listen address
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
- LOG_JSON: true/false
- LOG_FILE: Optional rotating log file
- CACHE_RECOVERY_ON_START: Rebuild the cache from the database at startup
"""

import os
from enum import Enum
from typing import Optional
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Environment(str, Enum):
    """Deployment environment."""
    LOCAL = "local"
    DEV = "dev"
    PROD = "prod"


class CacheBackend(str, Enum):
    """Cache backend options."""
    REDIS = "redis"
    MEMORY = "memory"


class LogLevel(str, Enum):
    """Log level options."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class Settings:
    """Application settings from environment."""

    env: Environment = field(
        default_factory=lambda: Environment(os.getenv("ENV", "local"))
    )

    # Database
    database_url: Optional[str] = field(
        default_factory=lambda: os.getenv("DATABASE_URL")
    )

    # Cache
    cache_backend: CacheBackend = field(
        default_factory=lambda: CacheBackend(os.getenv("CACHE_BACKEND", "redis"))
    )
    redis_url: Optional[str] = field(
        default_factory=lambda: os.getenv("REDIS_URL")
    )
    cache_prefix: str = field(
        default_factory=lambda: os.getenv("CACHE_PREFIX", "songlib:")
    )
    cache_recovery_on_start: bool = field(
        default_factory=lambda: _env_flag("CACHE_RECOVERY_ON_START")
    )

    # Metadata service
    music_info_url: Optional[str] = field(
        default_factory=lambda: os.getenv("MUSIC_INFO_URL")
    )
    music_info_timeout: float = field(
        default_factory=lambda: float(os.getenv("MUSIC_INFO_TIMEOUT", "10"))
    )

    # HTTP
    http_host: str = field(
        default_factory=lambda: os.getenv("HTTP_HOST", "0.0.0.0")
    )
    http_port: int = field(
        default_factory=lambda: int(os.getenv("HTTP_PORT", "8080"))
    )

    # Logging
    log_level: LogLevel = field(
        default_factory=lambda: LogLevel(os.getenv("LOG_LEVEL", "INFO"))
    )
    log_json: bool = field(
        default_factory=lambda: _env_flag("LOG_JSON")
    )
    log_file: Optional[str] = field(
        default_factory=lambda: os.getenv("LOG_FILE") or None
    )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings (tests that change the environment)."""
    global _settings
    _settings = None
