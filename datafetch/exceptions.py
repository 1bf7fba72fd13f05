"""
Exception hierarchy for the datafetch library.

This module provides the error taxonomy raised by the HTTP client, the fetch
orchestrator and the request chain coordinator, plus a translator that maps
aiohttp transport exceptions onto that taxonomy.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import aiohttp


class DataFetchError(Exception):
    """
    Base exception for all datafetch operations.

    Attributes:
        message: Human-readable error message
        url: URL that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class InvalidURLError(DataFetchError):
    """Raised when a request configuration cannot produce a well-formed URL."""

    def __init__(self, message: str = "Invalid URL", url: Optional[str] = None) -> None:
        super().__init__(message, url)


class NoDataError(DataFetchError):
    """Raised when a successful response carries no body."""

    def __init__(
        self, message: str = "No data received", url: Optional[str] = None
    ) -> None:
        super().__init__(message, url)


class DecodingError(DataFetchError):
    """
    Raised when a payload cannot be decoded into the requested type.

    Attributes:
        cause: The underlying decode exception
    """

    def __init__(self, cause: BaseException, url: Optional[str] = None) -> None:
        super().__init__(f"Decoding error: {cause}", url)
        self.cause = cause


class ServerError(DataFetchError):
    """
    Raised when the server answers with a status code outside 200-299.

    The response body is discarded and never parsed as error detail.

    Attributes:
        status_code: HTTP status code returned by the server
    """

    def __init__(self, status_code: int, url: Optional[str] = None) -> None:
        super().__init__(f"Server error with code: {status_code}", url)
        self.status_code = status_code


class NetworkError(DataFetchError):
    """
    Raised for transport-level failures.

    Covers DNS resolution failures, refused connections, TLS failures and
    malformed responses. The request chain coordinator also uses it to wrap
    any failure of a chained request.

    Attributes:
        cause: The underlying exception, if any
    """

    def __init__(
        self,
        cause: Optional[BaseException] = None,
        url: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message or f"Network error: {cause}", url)
        self.cause = cause


class TimeoutError(NetworkError):
    """
    Raised when a request exceeds its configured timeout.

    Subclasses NetworkError so callers handling transport failures
    generically also see timeouts.

    Attributes:
        timeout_value: The timeout value that was exceeded (in seconds)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(cause, url, message="Request timeout")
        self.timeout_value = timeout_value


class CacheError(DataFetchError):
    """
    Raised for cache storage failures.

    The cache store never lets these reach callers of the fetch API; they are
    logged and treated as misses.

    Attributes:
        cause: The underlying storage exception
    """

    def __init__(self, cause: BaseException, key: Optional[str] = None) -> None:
        super().__init__(f"Cache error: {cause}", key=key)
        self.cause = cause


class ErrorHandler:
    """Translates aiohttp and asyncio exceptions into DataFetchError subclasses."""

    @staticmethod
    def handle_aiohttp_error(
        error: Exception,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> DataFetchError:
        """
        Convert a transport exception to the matching DataFetchError.

        Args:
            error: The original exception
            url: The URL that caused the error
            timeout_value: The timeout that was in effect for the request

        Returns:
            Appropriate DataFetchError subclass
        """
        if isinstance(error, DataFetchError):
            return error

        # ServerTimeoutError is both a ClientError and an asyncio.TimeoutError
        if isinstance(error, asyncio.TimeoutError):
            return TimeoutError(url=url, timeout_value=timeout_value, cause=error)

        elif isinstance(error, aiohttp.InvalidURL):
            return InvalidURLError(url=url)

        else:
            return NetworkError(error, url=url)
