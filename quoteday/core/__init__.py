"""
Core infrastructure for the quote backend: persistence, caching, security and errors.
"""

from .cache_client import CacheClient, get_cache_client, close_cache_client
from .clock import Clock, system_clock, system_rng
from .exceptions import ErrorCode, QuoteServiceException

__all__ = [
    "CacheClient",
    "get_cache_client",
    "close_cache_client",
    "Clock",
    "system_clock",
    "system_rng",
    "ErrorCode",
    "QuoteServiceException",
]
