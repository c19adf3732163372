"""Configuration settings for anthropic-lite.

Thin facade over the top-level settings/ package so library code can
import configuration from one place.
"""

from __future__ import annotations

from settings import (
    ClientConfig,
    LoggingConfig,
    ObservabilityConfig,
    Settings,
    get_settings,
    reload_settings,
)
from settings import settings as get_settings_singleton

# Module-level settings singleton
settings = get_settings_singleton()

__all__ = [
    "Settings",
    "settings",
    "get_settings",
    "reload_settings",
    "ClientConfig",
    "LoggingConfig",
    "ObservabilityConfig",
]
