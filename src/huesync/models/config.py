"""Application configuration model."""

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

from huesync.model_manager.persistence import PydanticPersistence

APP_NAME = "huesync"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def config_dir() -> Path:
    """Configuration directory, honoring XDG_CONFIG_HOME."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_NAME


def default_config_path() -> Path:
    return config_dir() / "config.json"


class CacheBackendType(str, Enum):
    """Where bridge caches are persisted between runs."""

    MEMORY = "memory"
    FILE = "file"


class BridgeConfig(BaseModel):
    """One configured bridge."""

    id: str = Field(min_length=1, description="Stable bridge identifier")
    name: str = Field(default="", description="Human-readable bridge name")
    address: str = Field(min_length=1, description="Bridge IP address or host name")
    credential: str = Field(default="", description="Opaque credential obtained at pairing time")
    enabled: bool = Field(default=True, description="Disabled bridges are skipped at startup")

    @property
    def display_name(self) -> str:
        return self.name or self.id


class CacheConfig(BaseModel):
    """Cache freshness and synchronization settings."""

    backend: CacheBackendType = Field(
        default=CacheBackendType.MEMORY,
        description="Cache persistence backend (memory or file)",
    )
    directory: Path | None = Field(
        default=None,
        description="Directory for file-backed caches (None = <config dir>/cache)",
    )
    stale_after_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Age after which a read triggers a synchronous refetch (seconds)",
    )
    sync_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="How often each bridge is synchronized in the background (seconds)",
    )
    request_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout applied to every bridge fetch or write (seconds)",
    )
    warm_on_startup: bool = Field(
        default=True,
        description="Fetch every entity kind when a bridge starts",
    )

    @field_serializer("directory")
    def serialize_path(self, path: Path | None) -> str | None:
        """Serialize Path to string."""
        return str(path) if path is not None else None

    def cache_directory(self) -> Path:
        """Directory used by the file backend."""
        return self.directory if self.directory is not None else config_dir() / "cache"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    bridges: list[BridgeConfig] = Field(default_factory=list, description="Configured bridges")
    cache: CacheConfig = Field(default_factory=CacheConfig, description="Cache settings")
    log_level: str = Field(default="WARNING", description="Log level used when no CLI flag overrides it")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def check_unique_bridge_ids(self) -> "AppConfig":
        seen: set[str] = set()
        for bridge in self.bridges:
            if bridge.id in seen:
                raise ValueError(f"duplicate bridge id {bridge.id!r} in bridges")
            seen.add(bridge.id)
        return self

    @property
    def enabled_bridges(self) -> list[BridgeConfig]:
        return [b for b in self.bridges if b.enabled]

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  ($XDG_CONFIG_HOME/huesync/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = default_config_path()

        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file (atomic, keeps a .bak of the previous version)."""
        if path is None:
            path = default_config_path()

        PydanticPersistence.save_json(self, path)
