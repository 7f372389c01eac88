# gitclient/config/__init__.py

"""
Configuration for the git client: settings, proxy and YAML persistence.
"""

from .base import BaseConfig
from .errors import ConfigError, ConfigFileError
from .loader import ConfigLoader
from .proxy import ProxyConfiguration
from .settings import (
    DEFAULT_TIMEOUT_SECONDS,
    GitClientSettings,
    get_default_timeout,
    get_settings,
    set_default_timeout,
    set_settings,
)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "BaseConfig",
    "ConfigError",
    "ConfigFileError",
    "ConfigLoader",
    "GitClientSettings",
    "ProxyConfiguration",
    "get_default_timeout",
    "get_settings",
    "set_default_timeout",
    "set_settings",
]
