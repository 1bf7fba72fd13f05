"""
Configuration management for datafetch.

This module provides configuration models and a loader that merges
configuration files with environment variables.
"""

from .loader import ConfigLoader, load_config
from .models import (
    DEFAULT_CACHE_NAMESPACE,
    DEFAULT_CACHE_TTL,
    CacheConfig,
    ClientConfig,
    GlobalConfig,
    LoggingConfig,
    LogLevel,
    default_cache_dir,
)

__all__ = [
    "CacheConfig",
    "ClientConfig",
    "ConfigLoader",
    "DEFAULT_CACHE_NAMESPACE",
    "DEFAULT_CACHE_TTL",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "default_cache_dir",
    "load_config",
]
