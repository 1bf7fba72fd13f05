"""
Weather forecast loading built on the request chain coordinator.

The forecast is a two-step lookup against api.weather.gov: the point
document for a coordinate names the forecast URL, and the forecast document
lists the forecast periods. This module holds the payload models for both
documents, the WeatherDataService driving the chain and the refresh-interval
contract used by widget timelines.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from yarl import URL

from .chain import ChainState, RequestChainCoordinator
from .exceptions import DataFetchError
from .models import RequestConfiguration

logger = logging.getLogger(__name__)

WEATHER_DOMAIN = "api.weather.gov"
DEFAULT_LATITUDE = 37.2883
DEFAULT_LONGITUDE = -121.8434
CHAIN_TIMEOUT = 15.0

# Widget timeline refresh intervals in seconds
AVAILABLE_REFRESH_INTERVAL = 1800.0
UNAVAILABLE_REFRESH_INTERVAL = 300.0


class PointProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="@id")
    type: str = Field(alias="@type")
    forecast: str


class PointResponse(BaseModel):
    """Point metadata document; ``properties.forecast`` is the forecast URL."""

    id: str
    type: str
    properties: PointProperties


class Period(BaseModel):
    """A single forecast period."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    temperature: int
    temperature_unit: str
    temperature_trend: Optional[str] = None
    icon: str
    short_forecast: str


class ForecastProperties(BaseModel):
    periods: List[Period]


class ForecastResponse(BaseModel):
    """Forecast document."""

    properties: ForecastProperties


def point_configuration(
    latitude: float = DEFAULT_LATITUDE, longitude: float = DEFAULT_LONGITUDE
) -> RequestConfiguration:
    """Configuration for the point document of a coordinate."""
    return RequestConfiguration(
        domain=WEATHER_DOMAIN,
        path=f"/points/{latitude},{longitude}",
        timeout=CHAIN_TIMEOUT,
    )


def forecast_configuration(point: PointResponse) -> RequestConfiguration:
    """
    Configuration for the forecast URL named by a point document.

    A forecast URL that cannot be parsed, or has no host, falls back to the
    bare weather domain with no path.
    """
    try:
        url = URL(point.properties.forecast)
    except (ValueError, TypeError):
        url = None

    if url is None or not url.host:
        logger.warning(f"Unusable forecast URL {point.properties.forecast!r}")
        return RequestConfiguration(domain=WEATHER_DOMAIN)

    return RequestConfiguration(domain=url.host, path=url.path, timeout=CHAIN_TIMEOUT)


def refresh_interval(has_data: bool) -> float:
    """Seconds until a widget should refresh, retrying sooner without data."""
    return AVAILABLE_REFRESH_INTERVAL if has_data else UNAVAILABLE_REFRESH_INTERVAL


def next_refresh(periods: Sequence[Period], now: Optional[datetime] = None) -> datetime:
    """Timestamp of the next widget refresh given the loaded periods."""
    now = now or datetime.now()
    return now + timedelta(seconds=refresh_interval(bool(periods)))


class WeatherDataService:
    """
    Loads forecast periods through a RequestChainCoordinator.

    The service mirrors the coordinator's ``is_loading``, ``progress`` and
    ``error`` fields and keeps the most recently loaded ``periods``.
    """

    def __init__(self, coordinator: RequestChainCoordinator):
        self.coordinator = coordinator
        self.is_loading = False
        self.progress = 0.0
        self.error: Optional[DataFetchError] = None
        self.periods: List[Period] = []
        self._unsubscribe = coordinator.subscribe(self._on_state)

    def _on_state(self, state: ChainState) -> None:
        self.is_loading = state.is_loading
        self.progress = state.progress
        self.error = state.error

    async def load_periods(
        self,
        latitude: float = DEFAULT_LATITUDE,
        longitude: float = DEFAULT_LONGITUDE,
    ) -> List[Period]:
        """
        Load the forecast periods for a coordinate.

        Returns:
            The loaded periods, or an empty list if the chain failed
        """
        self.clear_error()

        forecast = await self.coordinator.chain_two_requests(
            point_configuration(latitude, longitude),
            forecast_configuration,
            first_model=PointResponse,
            second_model=ForecastResponse,
        )

        if forecast is None:
            self.periods = []
        else:
            self.periods = forecast.properties.periods
        logger.info(f"Loaded {len(self.periods)} forecast periods for {latitude},{longitude}")
        return self.periods

    def clear_data(self) -> None:
        """Forget loaded periods and any error."""
        self.periods = []
        self.clear_error()

    def clear_error(self) -> None:
        self.coordinator.clear_error()

    def close(self) -> None:
        """Stop mirroring the coordinator's state."""
        self._unsubscribe()
