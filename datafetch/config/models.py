"""
Configuration models for datafetch.

This module defines the configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CACHE_NAMESPACE = "DataFetcherCache"
DEFAULT_CACHE_TTL = 3600.0


def default_cache_dir() -> Path:
    """Base directory for the durable cache tier."""
    return Path.home() / ".cache" / "datafetch"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class CacheConfig(BaseModel):
    """Two-tier response cache configuration."""

    enabled: bool = Field(
        default=True,
        description="Whether fetch_with_cache consults the cache at all",
    )
    directory: Path = Field(
        default_factory=default_cache_dir,
        description="Base directory of the durable cache tier",
    )
    namespace: str = Field(
        default=DEFAULT_CACHE_NAMESPACE,
        min_length=1,
        description="Sub-directory holding this cache's entries",
    )
    default_ttl: float = Field(
        default=DEFAULT_CACHE_TTL, gt=0, description="Default TTL in seconds"
    )
    memory_count_limit: int = Field(
        default=100, ge=1, description="Maximum entries in the memory tier"
    )
    memory_size_limit: int = Field(
        default=50 * 1024 * 1024,
        ge=1,
        description="Maximum total payload bytes in the memory tier",
    )

    @field_validator("namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Keep the namespace a single path component."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("namespace must be a single directory name")
        return v


class ClientConfig(BaseModel):
    """HTTP client configuration."""

    default_timeout: float = Field(
        default=30.0, gt=0, description="Session default timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default="datafetch/1.0", description="User-Agent sent with every request"
    )
    max_connections_per_host: int = Field(
        default=10, ge=1, le=100, description="Maximum connections per host"
    )


class GlobalConfig(BaseModel):
    """Top-level configuration combining every section."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
