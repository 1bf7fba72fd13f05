"""
Shared test fixtures and configuration for the datafetch test suite.
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
from aioresponses import aioresponses

from datafetch import (
    CacheStore,
    DataFetcher,
    DiskCache,
    MemoryCache,
    NetworkClient,
    RequestConfiguration,
)

FORECAST_URL = "https://api.weather.gov/gridpoints/MTR/99,82/forecast"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for cache files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def disk_cache(temp_dir: Path) -> DiskCache:
    """Disk tier rooted in the temporary directory."""
    return DiskCache(temp_dir, "TestCache")


@pytest.fixture
def cache_store(disk_cache: DiskCache) -> CacheStore:
    """Two-tier cache store for testing."""
    return CacheStore(MemoryCache(max_items=10, max_bytes=4096), disk_cache)


@pytest.fixture
async def fetcher(cache_store: CacheStore) -> AsyncGenerator[DataFetcher, None]:
    """DataFetcher with a two-tier cache in a temporary directory."""
    async with DataFetcher(NetworkClient(), cache_store) as fetcher:
        yield fetcher


@pytest.fixture
def mock_http() -> Generator[aioresponses, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses() as mocked:
        yield mocked


@pytest.fixture
def point_payload() -> dict:
    """Sample point document from api.weather.gov."""
    return {
        "id": "https://api.weather.gov/points/37.2883,-121.8434",
        "type": "Feature",
        "properties": {
            "@id": "https://api.weather.gov/points/37.2883,-121.8434",
            "@type": "wx:Point",
            "forecast": FORECAST_URL,
        },
    }


@pytest.fixture
def forecast_payload() -> dict:
    """Sample forecast document from api.weather.gov."""
    return {
        "properties": {
            "periods": [
                {
                    "name": "Tonight",
                    "temperature": 52,
                    "temperatureUnit": "F",
                    "temperatureTrend": None,
                    "icon": "https://api.weather.gov/icons/land/night/few?size=medium",
                    "shortForecast": "Mostly Clear",
                },
                {
                    "name": "Saturday",
                    "temperature": 74,
                    "temperatureUnit": "F",
                    "temperatureTrend": "rising",
                    "icon": "https://api.weather.gov/icons/land/day/skc?size=medium",
                    "shortForecast": "Sunny",
                },
            ]
        }
    }


@pytest.fixture
def point_config() -> RequestConfiguration:
    """Configuration for the default point document."""
    return RequestConfiguration(
        domain="api.weather.gov", path="/points/37.2883,-121.8434", timeout=15.0
    )
