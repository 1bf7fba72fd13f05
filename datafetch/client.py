"""
Async HTTP client for datafetch using AIOHTTP.

This module provides the NetworkClient class that turns a RequestConfiguration
into an HTTPS request, validates the response status and decodes the body
into the caller's response model. It performs no caching and no retries.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector
from yarl import URL

from .config.models import ClientConfig
from .exceptions import (
    DataFetchError,
    ErrorHandler,
    InvalidURLError,
    NoDataError,
    ServerError,
)
from .models import RequestConfiguration
from .serialization import decode

logger = logging.getLogger(__name__)

URL_SCHEME = "https"

# Characters that cannot appear in a bare host name
_INVALID_HOST_CHARS = re.compile(r"[\s/?#@:\[\]\\%]")


def build_url(configuration: RequestConfiguration) -> URL:
    """
    Build the https URL for a request configuration.

    Args:
        configuration: The request configuration

    Returns:
        The URL with domain, path and query parameters applied

    Raises:
        InvalidURLError: If the domain/path combination is not a valid URL
    """
    domain = configuration.domain
    path = configuration.path

    if not domain or _INVALID_HOST_CHARS.search(domain):
        raise InvalidURLError(url=f"{URL_SCHEME}://{domain}{path}")
    if path and not path.startswith("/"):
        raise InvalidURLError(url=f"{URL_SCHEME}://{domain}{path}")

    try:
        return URL.build(
            scheme=URL_SCHEME,
            host=domain,
            path=path,
            query=configuration.query_parameters or None,
        )
    except (ValueError, TypeError) as e:
        raise InvalidURLError(url=f"{URL_SCHEME}://{domain}{path}") from e


class NetworkClient:
    """
    Async HTTP client executing request configurations.

    NetworkClient owns an aiohttp ClientSession created on first use, or uses
    a session supplied by the caller. A supplied session is left open on
    close(); an owned session is closed.

    Usage:
        ```python
        async with NetworkClient() as client:
            config = RequestConfiguration(domain="api.weather.gov", path="/points/37.2,-121.8")
            point = await client.request(config, PointResponse)
        ```

    Errors:
        - InvalidURLError when the URL cannot be built
        - NetworkError for transport failures, TimeoutError for timeouts
        - ServerError for non-2xx responses
        - NoDataError for an empty 2xx body
        - pydantic.ValidationError when the body does not decode into the model
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults if None)
            session: Existing session to use instead of creating one
        """
        self.config = config or ClientConfig()
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> NetworkClient:
        await self._create_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _create_session(self) -> None:
        """
        Create the aiohttp session if there is none yet.

        This method is idempotent.
        """
        if self._session is not None:
            return

        connector = TCPConnector(
            limit_per_host=self.config.max_connections_per_host,
            ssl=self.config.verify_ssl,
            enable_cleanup_closed=True,
        )

        self._session = ClientSession(
            timeout=ClientTimeout(total=self.config.default_timeout),
            connector=connector,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,  # Status codes are validated manually
        )
        self._owns_session = True

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def request_data(self, configuration: RequestConfiguration) -> bytes:
        """
        Execute a request and return the raw response body.

        Args:
            configuration: The request configuration

        Returns:
            The body of a 2xx response
        """
        url = build_url(configuration)
        if self._session is None:
            await self._create_session()
        if self._session is None:
            raise DataFetchError("Session not properly initialized")

        method = configuration.method.value
        logger.debug(f"{method} {url} (timeout {configuration.timeout}s)")

        try:
            async with self._session.request(
                method,
                url,
                headers=configuration.headers,
                data=configuration.body,
                timeout=ClientTimeout(total=configuration.timeout),
            ) as response:
                status = response.status
                if not isinstance(status, int):
                    raise aiohttp.ClientError(f"Malformed response status: {status!r}")
                if not 200 <= status <= 299:
                    raise ServerError(status, url=str(url))
                data = await response.read()
        except DataFetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            error = ErrorHandler.handle_aiohttp_error(e, str(url), configuration.timeout)
            logger.debug(f"{method} {url} failed: {error}")
            raise error from e

        logger.debug(f"{method} {url} -> {status} ({len(data)} bytes)")
        if not data:
            raise NoDataError(url=str(url))
        return data

    async def request(
        self,
        configuration: RequestConfiguration,
        response_model: Optional[Any] = None,
    ) -> Any:
        """
        Execute a request and decode the response body.

        Args:
            configuration: The request configuration
            response_model: Type to decode the JSON body into (None for plain JSON)

        Returns:
            The decoded response body
        """
        data = await self.request_data(configuration)
        return decode(data, response_model)
