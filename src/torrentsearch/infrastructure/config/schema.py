"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
StorageBackendName = Literal["diskcache", "redis"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class StorageConfig(BaseModel):
    """Persistent key-value store (preferences + Torznab providers)."""

    backend: StorageBackendName = Field(
        default="diskcache",
        description="Storage backend: 'diskcache' (SQLite) or 'redis'",
    )
    directory: Path = Field(
        default=Path("./.data/torrentsearch"),
        validation_alias=AliasChoices("dir", "directory"),
        description="Diskcache SQLite DB path",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (only when backend=redis)",
    )
    max_concurrent: int = Field(
        default=10,
        description="Max parallel storage ops (semaphore limit)",
    )

    @field_validator("directory", mode="before")
    @classmethod
    def _validate_directory(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("max_concurrent")
    @classmethod
    def _validate_max_concurrent(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("storage.max_concurrent must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/search/logging/storage).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="torrentsearch", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP client shared by every provider (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=20.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Transport timeout in seconds for provider requests.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="torrentsearch/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Search orchestration (YAML section: search.*)
    provider_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "provider_timeout_seconds",
            AliasPath("search", "provider_timeout_seconds"),
        ),
        description="Per-provider search timeout; slower providers count as failed.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Storage (YAML section: storage.*)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @field_validator("http_timeout_seconds", "provider_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "search": {"provider_timeout_seconds": self.provider_timeout_seconds},
            "logging": {"level": self.log_level, "format": self.log_format},
            "storage": {
                "backend": self.storage.backend,
                "dir": str(self.storage.directory),
                "redis_url": self.storage.redis_url,
                "max_concurrent": self.storage.max_concurrent,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read TORRENTSEARCH_* variables,
    converts to a dict of set values, merges it over YAML/defaults,
    then validates AppConfig.

    Supported env var examples (flat, explicit):
    - TORRENTSEARCH_HTTP_TIMEOUT_SECONDS
    - TORRENTSEARCH_PROVIDER_TIMEOUT_SECONDS
    - TORRENTSEARCH_LOG_LEVEL
    - TORRENTSEARCH_STORAGE_BACKEND / TORRENTSEARCH_STORAGE_REDIS_URL
    """

    model_config = SettingsConfigDict(
        env_prefix="TORRENTSEARCH_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    provider_timeout_seconds: Optional[float] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    storage_backend: Optional[StorageBackendName] = None
    storage_dir: Optional[Path] = None
    storage_redis_url: Optional[str] = None
    storage_max_concurrent: Optional[int] = None

    @field_validator("storage_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
