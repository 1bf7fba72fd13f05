"""
Base models and common types for the datafetch library.

This module contains the enums shared by the request models.
"""

from __future__ import annotations

from enum import Enum


class HTTPMethod(str, Enum):
    """HTTP methods supported by the network client."""

    GET = "GET"  # Retrieve a resource
    POST = "POST"  # Create a resource
    PUT = "PUT"  # Replace a resource
    DELETE = "DELETE"  # Remove a resource
    PATCH = "PATCH"  # Partially update a resource


class CachePolicyKind(str, Enum):
    """
    Enumeration of cache policy variants.

    Determines whether a cached request result is stored and for how long.
    """

    DEFAULT = "default"  # Store with the default TTL
    RELOAD_IGNORING_CACHE = "reload_ignoring_cache"  # Never store
    RETURN_CACHE_DATA_ELSE_LOAD = "return_cache_data_else_load"  # Same as default
    RETURN_CACHE_DATA_DONT_LOAD = "return_cache_data_dont_load"  # Never store
    CUSTOM = "custom"  # Store with an explicit TTL
