"""Application configuration using Pydantic Settings.

This module centralizes runtime configuration for the realtime server. Values
can be provided via environment variables (preferred) or fall back to the
defaults below. A ``Settings`` instance is intended to be retrieved via
``get_settings`` which caches the object for reuse across the process.

Environment variable prefix: ``TASKBOARD_`` (e.g. ``TASKBOARD_PORT``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime application settings.

    Attributes map directly to environment variables using the ``TASKBOARD_``
    prefix (case-insensitive). For example, ``heartbeat_interval`` <-
    ``TASKBOARD_HEARTBEAT_INTERVAL``.
    """

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host interface to bind the server",
    )  # fmt: skip
    port: int = Field(
        default=8080,
        description="Server port",
    )  # fmt: skip
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Application log level",
    )
    reload: bool = Field(
        default=False,
        description="Enable auto-reload in development",
    )  # fmt: skip
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of origins allowed to open event streams",
    )  # fmt: skip

    # Realtime settings
    heartbeat_interval: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between heartbeat comments on idle event streams",
    )  # fmt: skip
    stream_queue_size: int = Field(
        default=256,
        gt=0,
        description="Events buffered per client stream before new events are dropped",
    )  # fmt: skip
    log_events: bool = Field(
        default=False,
        description="Log every published realtime event",
    )  # fmt: skip

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str:
        """Normalize and validate log level."""
        if v is None:
            return "INFO"

        v_upper = str(v).upper()

        allowed = {"TRACE", "DEBUG", "INFO", "WARNING", "ERROR"}
        if v_upper not in allowed:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {', '.join(sorted(allowed))}")

        return v_upper

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS origins as a list, ``["*"]`` when unset."""
        origins = [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        return origins or ["*"]

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        case_sensitive=False,
        extra="ignore",  # Ignore unexpected env vars
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached ``Settings`` instance.

    The first invocation reads environment variables / .env file; subsequent
    calls reuse the same object to ensure consistent config.
    """

    return Settings()


__all__ = ["Settings", "get_settings"]
