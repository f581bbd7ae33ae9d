"""
Configuration package for the Quote of the Day backend.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    QuoteSettings,
    GenerationSettings,
    RedisSettings,
    SecuritySettings,
    settings,
    build_settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "QuoteSettings",
    "GenerationSettings",
    "RedisSettings",
    "SecuritySettings",
    "settings",
    "build_settings",
    "get_settings",
    "reload_settings",
]
