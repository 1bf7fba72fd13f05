"""
Request models for the datafetch library.

This module contains the immutable request configuration, its cache policy
and a fluent builder for assembling configurations step by step.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .base import CachePolicyKind, HTTPMethod

DEFAULT_TIMEOUT = 30.0


class CachePolicy(BaseModel):
    """
    Tagged cache policy attached to a request configuration.

    Use the constructors rather than instantiating directly:

        ```python
        CachePolicy.default()
        CachePolicy.reload_ignoring_cache()
        CachePolicy.custom(600)
        ```

    Only the ``custom`` kind carries an expiration; it is rejected on every
    other kind.
    """

    model_config = ConfigDict(frozen=True)

    kind: CachePolicyKind = Field(
        default=CachePolicyKind.DEFAULT,
        description="Which cache policy variant this is",
    )
    expiration: Optional[float] = Field(
        default=None,
        ge=0,
        description="TTL in seconds, only for the custom variant",
    )

    @model_validator(mode="after")
    def validate_expiration(self) -> "CachePolicy":
        """Require an expiration for custom policies and forbid it elsewhere."""
        if self.kind == CachePolicyKind.CUSTOM and self.expiration is None:
            raise ValueError("custom cache policy requires an expiration")
        if self.kind != CachePolicyKind.CUSTOM and self.expiration is not None:
            raise ValueError(f"{self.kind.value} cache policy takes no expiration")
        return self

    @classmethod
    def default(cls) -> "CachePolicy":
        return cls(kind=CachePolicyKind.DEFAULT)

    @classmethod
    def reload_ignoring_cache(cls) -> "CachePolicy":
        return cls(kind=CachePolicyKind.RELOAD_IGNORING_CACHE)

    @classmethod
    def return_cache_data_else_load(cls) -> "CachePolicy":
        return cls(kind=CachePolicyKind.RETURN_CACHE_DATA_ELSE_LOAD)

    @classmethod
    def return_cache_data_dont_load(cls) -> "CachePolicy":
        return cls(kind=CachePolicyKind.RETURN_CACHE_DATA_DONT_LOAD)

    @classmethod
    def custom(cls, expiration: float) -> "CachePolicy":
        return cls(kind=CachePolicyKind.CUSTOM, expiration=expiration)


class RequestConfiguration(BaseModel):
    """
    Immutable description of a single HTTP request.

    RequestConfiguration carries everything the network client needs to build
    and send a request, plus the cache policy used by the fetch orchestrator.
    The URL scheme is always https; ``domain`` is the bare host name.

    Example:
        ```python
        from datafetch import CachePolicy, HTTPMethod, RequestConfiguration

        config = RequestConfiguration(
            domain="api.example.com",
            path="/users",
            method=HTTPMethod.GET,
            query_parameters={"page": "1"},
            headers={"Authorization": "Bearer token"},
            cache_policy=CachePolicy.custom(600),
        )
        ```

    Instances are frozen: assigning to a field raises a validation error.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    domain: str = Field(
        default="",
        description="Host name of the request, e.g. 'api.example.com'",
    )
    path: str = Field(
        default="",
        description="Path component of the URL, e.g. '/users/123'",
    )
    method: HTTPMethod = Field(
        default=HTTPMethod.GET,
        description="HTTP method to use for the request",
    )
    query_parameters: Optional[Dict[str, str]] = Field(
        default=None,
        description="Query parameters appended to the URL",
    )
    headers: Optional[Dict[str, str]] = Field(
        default=None,
        description="Headers sent verbatim with the request",
    )
    body: Optional[bytes] = Field(
        default=None,
        description="Raw request body",
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    cache_policy: CachePolicy = Field(
        default_factory=CachePolicy.default,
        description="Cache policy applied by fetch_with_cache",
    )


class RequestConfigurationBuilder:
    """
    Fluent builder for RequestConfiguration.

    Each setter returns the builder so calls can be chained; calling a setter
    twice keeps the last value.

        ```python
        config = (
            RequestConfigurationBuilder()
            .domain("api.weather.gov")
            .path("/points/37.2883,-121.8434")
            .timeout(15.0)
            .build()
        )
        ```
    """

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {}

    def domain(self, value: str) -> "RequestConfigurationBuilder":
        self._fields["domain"] = value
        return self

    def path(self, value: str) -> "RequestConfigurationBuilder":
        self._fields["path"] = value
        return self

    def method(self, value: HTTPMethod) -> "RequestConfigurationBuilder":
        self._fields["method"] = value
        return self

    def query_parameters(self, value: Dict[str, str]) -> "RequestConfigurationBuilder":
        self._fields["query_parameters"] = dict(value)
        return self

    def headers(self, value: Dict[str, str]) -> "RequestConfigurationBuilder":
        self._fields["headers"] = dict(value)
        return self

    def body(self, value: bytes) -> "RequestConfigurationBuilder":
        self._fields["body"] = value
        return self

    def timeout(self, value: float) -> "RequestConfigurationBuilder":
        self._fields["timeout"] = value
        return self

    def cache_policy(self, value: CachePolicy) -> "RequestConfigurationBuilder":
        self._fields["cache_policy"] = value
        return self

    def build(self) -> RequestConfiguration:
        """Create the configuration from the values set so far."""
        return RequestConfiguration(**self._fields)
