"""
Fetch orchestrator combining the network client and the cache store.

This module provides the DataFetcher class, the main entry point of the
library, together with the cache key derivation and the cache policy rules
used by fetch_with_cache.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Optional

from aiohttp import ClientSession
from pydantic import ValidationError

from .cache import CacheStore
from .client import NetworkClient
from .config.models import DEFAULT_CACHE_TTL, GlobalConfig
from .models import (
    CachePolicy,
    CachePolicyKind,
    RequestConfiguration,
    RequestConfigurationBuilder,
)
from .serialization import decode, encode

logger = logging.getLogger(__name__)


def generate_cache_key(configuration: RequestConfiguration) -> str:
    """
    Derive the cache key for a request configuration.

    The key joins, with ``|``, the domain, the path, the method name, the
    query parameters as sorted-key JSON and the base64 of the body (empty
    strings when absent), then base64-encodes the result with the URL-safe
    alphabet so it can double as a file name.

    Headers and timeout are not part of the key.
    """
    query = configuration.query_parameters
    body = configuration.body
    components = [
        configuration.domain,
        configuration.path,
        configuration.method.value,
        json.dumps(query, sort_keys=True, ensure_ascii=False) if query else "",
        base64.b64encode(body).decode("ascii") if body else "",
    ]
    joined = "|".join(components)
    return base64.urlsafe_b64encode(joined.encode("utf-8")).decode("ascii")


def expiration_for_policy(policy: CachePolicy) -> Optional[float]:
    """
    Translate a cache policy into the TTL passed to the cache store.

    Returns:
        TTL in seconds, or None when the result must not be stored
    """
    if policy.kind in (
        CachePolicyKind.DEFAULT,
        CachePolicyKind.RETURN_CACHE_DATA_ELSE_LOAD,
    ):
        return DEFAULT_CACHE_TTL
    elif policy.kind in (
        CachePolicyKind.RELOAD_IGNORING_CACHE,
        CachePolicyKind.RETURN_CACHE_DATA_DONT_LOAD,
    ):
        return None
    elif policy.kind == CachePolicyKind.CUSTOM:
        return policy.expiration
    raise ValueError(f"Unknown cache policy: {policy.kind}")


class DataFetcher:
    """
    Fetches request configurations with optional two-tier caching.

    ``fetch`` always goes to the network. ``fetch_with_cache`` serves a
    stored result when one exists and is fresh, otherwise fetches it and
    stores it according to the configuration's cache policy.

    Usage:
        ```python
        async with create_data_fetcher() as fetcher:
            config = fetcher.configure(domain="api.weather.gov", path="/points/37.2,-121.8")
            point = await fetcher.fetch_with_cache(config, PointResponse)
        ```

    Concurrent calls are independent: two concurrent fetches of the same
    uncached configuration both reach the network and both store their
    result.
    """

    def __init__(
        self,
        client: Optional[NetworkClient] = None,
        cache: Optional[CacheStore] = None,
        enable_cache: bool = True,
    ):
        """
        Initialize the fetcher.

        Args:
            client: Network client (a default one is created if None)
            cache: Cache store (a memory-only store is created if None)
            enable_cache: When False, fetch_with_cache behaves like fetch
        """
        self.client = client or NetworkClient()
        self.cache: Optional[CacheStore] = None
        if enable_cache:
            self.cache = cache if cache is not None else CacheStore()

    async def __aenter__(self) -> DataFetcher:
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the network client's resources."""
        await self.client.close()

    @staticmethod
    def configure(**fields: Any) -> RequestConfiguration:
        """Build a RequestConfiguration from keyword arguments."""
        return RequestConfiguration(**fields)

    @staticmethod
    def builder() -> RequestConfigurationBuilder:
        """Start a fluent RequestConfigurationBuilder."""
        return RequestConfigurationBuilder()

    async def fetch(
        self,
        configuration: RequestConfiguration,
        response_model: Optional[Any] = None,
    ) -> Any:
        """
        Fetch a configuration from the network, bypassing the cache.

        Args:
            configuration: The request configuration
            response_model: Type to decode the response into (None for plain JSON)

        Returns:
            The decoded response body
        """
        return await self.client.request(configuration, response_model)

    async def fetch_with_cache(
        self,
        configuration: RequestConfiguration,
        response_model: Optional[Any] = None,
    ) -> Any:
        """
        Fetch a configuration, serving and storing results through the cache.

        A ``return_cache_data_dont_load`` policy still fetches on a miss; like
        ``reload_ignoring_cache`` it only prevents storing the result.

        Args:
            configuration: The request configuration, including its cache policy
            response_model: Type to decode the response into (None for plain JSON)

        Returns:
            The cached or freshly fetched value
        """
        if self.cache is None:
            return await self.fetch(configuration, response_model)

        key = generate_cache_key(configuration)
        target = f"{configuration.method.value} {configuration.domain}{configuration.path}"

        cached = await self.cache.get(key)
        if cached is not None:
            try:
                value = decode(cached, response_model)
                logger.debug(f"Cache hit for {target}")
                return value
            except ValidationError as e:
                logger.warning(f"Cached payload for {target} no longer decodes, refetching: {e}")

        logger.debug(f"Cache miss for {target}")
        result = await self.fetch(configuration, response_model)

        expiration = expiration_for_policy(configuration.cache_policy)
        if expiration is None:
            return result

        try:
            data = encode(result, response_model)
        except ValueError as e:
            logger.warning(f"Could not serialize result for {target}, not caching: {e}")
            return result

        await self.cache.set(data, key, expiration)
        logger.debug(f"Cached {target} for {expiration}s")
        return result

    async def remove_cached(self, configuration: RequestConfiguration) -> None:
        """Drop the cached result of a configuration, if any."""
        if self.cache is not None:
            await self.cache.remove(generate_cache_key(configuration))

    async def clear_cache(self) -> None:
        """Drop every cached result."""
        if self.cache is not None:
            await self.cache.clear()


def create_data_fetcher(
    config: Optional[GlobalConfig] = None,
    session: Optional[ClientSession] = None,
) -> DataFetcher:
    """
    Create a DataFetcher wired from configuration.

    Args:
        config: Global configuration (defaults if None)
        session: Existing aiohttp session for the network client

    Returns:
        A DataFetcher with its own client and, if enabled, a two-tier cache
    """
    config = config or GlobalConfig()
    client = NetworkClient(config.client, session=session)
    if not config.cache.enabled:
        return DataFetcher(client, enable_cache=False)
    return DataFetcher(client, CacheStore.from_config(config.cache))
