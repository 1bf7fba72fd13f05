"""
Async HTTP data fetching with typed decoding and two-tier caching.

This package provides a small, production-ready fetching layer built on
AIOHTTP and Pydantic.

Features:
- Immutable request configurations with a fluent builder
- Async network client with a typed error taxonomy
- Memory + disk response cache with per-request cache policies
- Two-step request chaining with observable progress
- Weather forecast loading on top of the chain coordinator
"""

from .cache import CacheEntry, CacheStore, DiskCache, MemoryCache
from .chain import ChainState, RequestChainCoordinator
from .client import NetworkClient, build_url
from .config import (
    CacheConfig,
    ClientConfig,
    ConfigLoader,
    GlobalConfig,
    LoggingConfig,
    LogLevel,
    load_config,
)
from .exceptions import (
    CacheError,
    DataFetchError,
    DecodingError,
    ErrorHandler,
    InvalidURLError,
    NetworkError,
    NoDataError,
    ServerError,
    TimeoutError,
)
from .fetcher import (
    DataFetcher,
    create_data_fetcher,
    expiration_for_policy,
    generate_cache_key,
)
from .logging import cleanup_logging, get_logger, setup_logging
from .models import (
    CachePolicy,
    CachePolicyKind,
    HTTPMethod,
    RequestConfiguration,
    RequestConfigurationBuilder,
)
from .weather import (
    ForecastResponse,
    Period,
    PointResponse,
    WeatherDataService,
    next_refresh,
    refresh_interval,
)

__version__ = "1.0.0"

__all__ = [
    # Exceptions
    "DataFetchError",
    "InvalidURLError",
    "NoDataError",
    "DecodingError",
    "ServerError",
    "NetworkError",
    "TimeoutError",
    "CacheError",
    "ErrorHandler",
    # Models
    "HTTPMethod",
    "CachePolicy",
    "CachePolicyKind",
    "RequestConfiguration",
    "RequestConfigurationBuilder",
    # Cache
    "CacheEntry",
    "CacheStore",
    "DiskCache",
    "MemoryCache",
    # Fetching
    "NetworkClient",
    "build_url",
    "DataFetcher",
    "create_data_fetcher",
    "generate_cache_key",
    "expiration_for_policy",
    # Chaining
    "ChainState",
    "RequestChainCoordinator",
    # Weather
    "PointResponse",
    "ForecastResponse",
    "Period",
    "WeatherDataService",
    "refresh_interval",
    "next_refresh",
    # Configuration
    "CacheConfig",
    "ClientConfig",
    "ConfigLoader",
    "GlobalConfig",
    "LoggingConfig",
    "LogLevel",
    "load_config",
    # Logging
    "setup_logging",
    "get_logger",
    "cleanup_logging",
]
