"""
Configuration module for term-intel.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from term_intel.config.settings import (
    Settings,
    LLMSettings,
    SearchSettings,
    KeywordSettings,
    LoggingSettings,
)
from term_intel.config.loader import (
    load_config,
    get_settings,
    reset_settings,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "LLMSettings",
    "SearchSettings",
    "KeywordSettings",
    "LoggingSettings",
    "load_config",
    "get_settings",
    "reset_settings",
    "get_default_config_path",
]
