"""
Data models for the datafetch library.
"""

from .base import CachePolicyKind, HTTPMethod
from .request import (
    DEFAULT_TIMEOUT,
    CachePolicy,
    RequestConfiguration,
    RequestConfigurationBuilder,
)

__all__ = [
    "CachePolicy",
    "CachePolicyKind",
    "DEFAULT_TIMEOUT",
    "HTTPMethod",
    "RequestConfiguration",
    "RequestConfigurationBuilder",
]
